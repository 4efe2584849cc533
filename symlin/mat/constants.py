# Operators
# ----------------------------------------------------------------------------------------------------------------------

# Unary Arithmetic
UNARY_POSITIVE_OPERATOR = 1
UNARY_NEGATION_OPERATOR = 2

# Binary Arithmetic
ADDITION_OPERATOR = 11
SUBTRACTION_OPERATOR = 12
MULTIPLICATION_OPERATOR = 13
DIVISION_OPERATOR = 14

# Logical
CONJUNCTION_OPERATOR = 111
DISJUNCTION_OPERATOR = 112

# Relational
EQUALITY_OPERATOR = "=="
LESS_INEQUALITY_OPERATOR = "<"
LESS_EQUAL_INEQUALITY_OPERATOR = "<="
GREATER_INEQUALITY_OPERATOR = ">"
GREATER_EQUAL_INEQUALITY_OPERATOR = ">="

RELATIONAL_OPERATORS = (
    EQUALITY_OPERATOR,
    LESS_INEQUALITY_OPERATOR,
    LESS_EQUAL_INEQUALITY_OPERATOR,
    GREATER_INEQUALITY_OPERATOR,
    GREATER_EQUAL_INEQUALITY_OPERATOR,
)

# Symbols
OPERATOR_SYMBOLS = {
    UNARY_POSITIVE_OPERATOR: "+",
    UNARY_NEGATION_OPERATOR: "-",
    ADDITION_OPERATOR: "+",
    SUBTRACTION_OPERATOR: "-",
    MULTIPLICATION_OPERATOR: "*",
    DIVISION_OPERATOR: "/",
    CONJUNCTION_OPERATOR: "and",
    DISJUNCTION_OPERATOR: "or",
}

# Functions
# ----------------------------------------------------------------------------------------------------------------------

SUMMATION_FUNCTION = "sum"
ABSOLUTE_VALUE_FUNCTION = "abs"
MAXIMUM_FUNCTION = "max"
MINIMUM_FUNCTION = "min"

TRANSFORMATION_FUNCTIONS = (
    SUMMATION_FUNCTION,
    ABSOLUTE_VALUE_FUNCTION,
    MAXIMUM_FUNCTION,
    MINIMUM_FUNCTION,
)

# Variable Types
# ----------------------------------------------------------------------------------------------------------------------

CONTINUOUS_VAR_TYPE = "continuous"
INTEGER_VAR_TYPE = "integer"
BINARY_VAR_TYPE = "binary"

VAR_TYPES = (CONTINUOUS_VAR_TYPE, INTEGER_VAR_TYPE, BINARY_VAR_TYPE)

# Optimization Directions
# ----------------------------------------------------------------------------------------------------------------------

MINIMIZE = "minimize"
MAXIMIZE = "maximize"

DIRECTIONS = (MINIMIZE, MAXIMIZE)

# Expression Classifications
# ----------------------------------------------------------------------------------------------------------------------

CONSTANT_CLASS = "constant"
VARIABLE_CLASS = "variable"
LINEAR_CLASS = "linear"
NON_LINEAR_CLASS = "non_linear"

# Auxiliary Entity Kinds
# ----------------------------------------------------------------------------------------------------------------------

ABS_AUX_KIND = "abs"
MAX_AUX_KIND = "max"
MIN_AUX_KIND = "min"
AND_AUX_KIND = "and"
OR_AUX_KIND = "or"
IF_THEN_ELSE_AUX_KIND = "ite"
PIECEWISE_AUX_KIND = "pwl"

# Defaults
# ----------------------------------------------------------------------------------------------------------------------

DEFAULT_BIG_M = 1000
VARIABLE_COUNTER_WIDTH = 8
CONSTRAINT_COUNTER_WIDTH = 8
AUX_DIGEST_LENGTH = 12
VARIABLE_NAME_PREFIX = "x"
CONSTRAINT_NAME_PREFIX = "c"

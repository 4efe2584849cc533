from numbers import Number
from typing import Iterable, List, Sequence, Union

import symlin.mat as mat


# Leaves
# ----------------------------------------------------------------------------------------------------------------------

def build_numeric_node(value: Number):
    return mat.NumericNode(value)


def build_dummy_node(symbol: str):
    return mat.DummyNode(symbol)


def build_variable_node(symbol: str, *indices) -> mat.VariableNode:
    """
    Build a reference to a variable family. String components are literals: dummies must be passed as dummy nodes and
    wildcards as mat.WILDCARD.
    :param symbol: symbol of the family
    :param indices: index components
    :return: variable node
    """
    return mat.VariableNode(symbol, indices)


def build_parameter_node(symbol: str, *indices) -> mat.ParameterNode:
    return mat.ParameterNode(symbol, indices)


# Generators
# ----------------------------------------------------------------------------------------------------------------------

def build_range_node(start: Union[int, mat.ArithmeticExpressionNode],
                     end: Union[int, mat.ArithmeticExpressionNode],
                     step: Union[int, mat.ArithmeticExpressionNode] = 1):
    return mat.RangeSetNode(start, end, step)


def build_generator(symbol: str, domain) -> mat.Generator:
    return mat.Generator(symbol, domain)


def build_generators(*pairs) -> List[mat.Generator]:
    """Build generators from (symbol, domain) pairs, e.g. build_generators(('i', range(1, 4)), ('j', 'products'))."""
    return [build_generator(sym, domain) for sym, domain in pairs]


# Arithmetic Operations
# ----------------------------------------------------------------------------------------------------------------------

def build_negation_node(operand: mat.ArithmeticExpressionNode):
    return mat.ArithmeticOperationNode.negation(operand)


def build_addition_node(terms: List[mat.ArithmeticExpressionNode],
                        is_prioritized: bool = False):
    return mat.ArithmeticOperationNode(operator=mat.ADDITION_OPERATOR,
                                       operands=[mat.wrap_operand(t) for t in terms],
                                       is_prioritized=is_prioritized)


def build_subtraction_node(lhs_term: mat.ArithmeticExpressionNode,
                           rhs_term: mat.ArithmeticExpressionNode,
                           is_prioritized: bool = False):
    return mat.ArithmeticOperationNode(operator=mat.SUBTRACTION_OPERATOR,
                                       operands=[mat.wrap_operand(lhs_term), mat.wrap_operand(rhs_term)],
                                       is_prioritized=is_prioritized)


def build_multiplication_node(factors: List[mat.ArithmeticExpressionNode],
                              is_prioritized: bool = False):
    return mat.ArithmeticOperationNode(operator=mat.MULTIPLICATION_OPERATOR,
                                       operands=[mat.wrap_operand(f) for f in factors],
                                       is_prioritized=is_prioritized)


def build_fractional_node(numerator: mat.ArithmeticExpressionNode,
                          denominator: mat.ArithmeticExpressionNode):
    return mat.ArithmeticOperationNode.division(mat.wrap_operand(numerator),
                                                mat.wrap_operand(denominator))


# Transformations
# ----------------------------------------------------------------------------------------------------------------------

def build_summation_node(operand: mat.ArithmeticExpressionNode,
                         generators: Iterable[mat.Generator] = None):
    """
    Build a summation. With generators, the operand is summed over every combination of their elements; without
    generators, the operand is expected to be a wildcard variable reference.
    """
    return mat.ArithmeticTransformationNode(fcn=mat.SUMMATION_FUNCTION,
                                            operands=mat.wrap_operand(operand),
                                            generators=generators)


def build_absolute_value_node(operand: mat.ArithmeticExpressionNode):
    return mat.ArithmeticTransformationNode(fcn=mat.ABSOLUTE_VALUE_FUNCTION,
                                            operands=mat.wrap_operand(operand))


def build_maximum_node(operands: Union[mat.ArithmeticExpressionNode, Sequence[mat.ArithmeticExpressionNode]]):
    return mat.ArithmeticTransformationNode(fcn=mat.MAXIMUM_FUNCTION,
                                            operands=operands)


def build_minimum_node(operands: Union[mat.ArithmeticExpressionNode, Sequence[mat.ArithmeticExpressionNode]]):
    return mat.ArithmeticTransformationNode(fcn=mat.MINIMUM_FUNCTION,
                                            operands=operands)


# Logical Operations
# ----------------------------------------------------------------------------------------------------------------------

def build_conjunction_node(operands: List[mat.ArithmeticExpressionNode]):
    return mat.LogicalOperationNode(operator=mat.CONJUNCTION_OPERATOR,
                                    operands=operands)


def build_disjunction_node(operands: List[mat.ArithmeticExpressionNode]):
    return mat.LogicalOperationNode(operator=mat.DISJUNCTION_OPERATOR,
                                    operands=operands)


# Conditional and Piecewise-Linear Expressions
# ----------------------------------------------------------------------------------------------------------------------

def build_conditional_node(condition: mat.ArithmeticExpressionNode,
                           then_operand: mat.ArithmeticExpressionNode,
                           else_operand: mat.ArithmeticExpressionNode):
    return mat.ArithmeticConditionalNode(condition=mat.wrap_operand(condition),
                                         then_operand=then_operand,
                                         else_operand=else_operand)


def build_piecewise_linear_node(operand: mat.ArithmeticExpressionNode,
                                breakpoints: Sequence[Number],
                                slopes: Sequence[Number],
                                intercepts: Sequence[Number]):
    return mat.PiecewiseLinearNode(operand=operand,
                                   breakpoints=breakpoints,
                                   slopes=slopes,
                                   intercepts=intercepts)

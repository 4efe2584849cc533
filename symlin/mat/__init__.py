from .constants import *

from ordered_set import OrderedSet

from .types import Element, Term, TermMap

from .exceptions import (
    SymlinError,
    LookupFailureError,
    ShapeError,
    DomainError,
    ConstructionError,
)

from .polynomial import Polynomial, format_number, term_to_literal

from .entity import (
    Variable,
    Constraint,
)

from .state import State

from .exprn import (
    ExpressionNode,
    LogicalExpressionNode,
    SetExpressionNode,
    ArithmeticExpressionNode,
    wrap_operand,
)

from .dummyn import (
    BaseDummyNode,
    DummyNode,
    WildcardNode,
    WILDCARD,
    is_wildcard,
)

from .setn import (
    BaseSetNode,
    EnumeratedSetNode,
    RangeSetNode,
    DataSetNode,
    Generator,
)

from .opern import ArithmeticOperationNode

from .lexprn import LogicalOperationNode

from .aexprn import (
    NumericNode,
    DeclaredEntityNode,
    VariableNode,
    ParameterNode,
    ArithmeticTransformationNode,
    ArithmeticConditionalNode,
    PiecewiseLinearNode,
)

from .pattern import (
    Family,
    matches_pattern,
    has_wildcard,
    match_entries,
    sum_matching,
    lookup,
)

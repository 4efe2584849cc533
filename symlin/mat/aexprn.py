from numbers import Number
from typing import List, Sequence, Union

import numpy as np

from .constants import *
from .exprn import ExpressionNode, LogicalExpressionNode, ArithmeticExpressionNode, wrap_operand
from .dummyn import is_wildcard
from .setn import Generator


# Leaf Nodes
# ----------------------------------------------------------------------------------------------------------------------

class NumericNode(ArithmeticExpressionNode):

    def __init__(self, value: Number):

        super().__init__()

        if isinstance(value, bool) or not isinstance(value, Number):
            raise TypeError("Numeric node cannot be built from '{0}' of type '{1}'".format(value, type(value)))

        self.value: Number = value
        if isinstance(self.value, float):
            if self.value.is_integer():
                self.value = int(self.value)

    def get_children(self) -> list:
        return []

    def get_literal(self) -> str:
        if self.value == np.inf:
            literal = "Infinity"
        elif self.value == -np.inf:
            literal = "-Infinity"
        else:
            literal = str(self.value)
        if self.is_prioritized:
            return '(' + literal + ')'
        return literal


class DeclaredEntityNode(ArithmeticExpressionNode):

    def __init__(self,
                 symbol: str,
                 indices: Sequence = None):

        super().__init__()

        self.symbol: str = symbol
        self.indices: list = []

        # components are literals, dummy nodes, wildcards or arithmetic expressions of dummies
        if indices is not None:
            for component in indices:
                if isinstance(component, (ExpressionNode, str, Number)):
                    self.indices.append(component)
                else:
                    raise ValueError("Unable to resolve index component '{0}' of entity '{1}'".format(component,
                                                                                                     symbol))

    @property
    def is_indexed(self) -> bool:
        return len(self.indices) > 0

    def get_children(self) -> list:
        return [c for c in self.indices if isinstance(c, ExpressionNode)]

    def get_literal(self) -> str:
        literal = self.symbol
        if self.is_indexed:
            literal += "[{0}]".format(", ".join([self.__get_component_literal(c) for c in self.indices]))
        return literal

    @staticmethod
    def __get_component_literal(component) -> str:
        if isinstance(component, str):
            return "'{0}'".format(component)
        return str(component)


class VariableNode(DeclaredEntityNode):
    """
    Reference to an indexed variable family. An index list that contains at least one wildcard denotes the implicit
    sum of every family entry matching the pattern.
    """

    def is_pattern(self) -> bool:
        return any(is_wildcard(c) for c in self.indices)


class ParameterNode(DeclaredEntityNode):
    """Reference to a constant of the external data context, e.g. cost[i, j]."""


# Transformation Nodes
# ----------------------------------------------------------------------------------------------------------------------

class ArithmeticTransformationNode(ArithmeticExpressionNode):

    def __init__(self,
                 fcn: str,
                 operands: Union[ArithmeticExpressionNode, List[ArithmeticExpressionNode]] = None,
                 generators: List[Generator] = None):

        super().__init__()

        if fcn not in TRANSFORMATION_FUNCTIONS:
            raise ValueError("Unable to resolve symbol '{0}' as an arithmetic transformation".format(fcn))

        self.fcn: str = fcn
        self.generators: List[Generator] = list(generators) if generators is not None else []
        self.operands: List[ArithmeticExpressionNode] = []

        if self.fcn == SUMMATION_FUNCTION and len(self.generators) > 0:
            self.is_prioritized = True

        if operands is not None:
            if isinstance(operands, ExpressionNode):
                self.operands.append(operands)
            else:
                self.operands.extend([wrap_operand(o) for o in operands])

    def is_reductive(self) -> bool:
        return len(self.generators) > 0

    def is_pattern(self) -> bool:
        """
        Returns True if the transformation is applied to the entries matched by a single wildcard variable
        reference, e.g. max(x[_]).
        """
        return len(self.operands) == 1 \
            and isinstance(self.operands[0], VariableNode) \
            and self.operands[0].is_pattern()

    def get_children(self) -> list:
        return self.operands

    def get_literal(self) -> str:

        arguments = [o.get_literal() for o in self.operands]

        # reductive transformation
        if self.is_reductive():
            literal = "{0}({1} for {2})".format(self.fcn,
                                                ', '.join(arguments),
                                                ", ".join(str(g) for g in self.generators))

        # non-reductive transformation
        else:
            literal = "{0}({1})".format(self.fcn, ', '.join(arguments))

        return literal


class ArithmeticConditionalNode(ArithmeticExpressionNode):

    def __init__(self,
                 condition: LogicalExpressionNode,
                 then_operand: ArithmeticExpressionNode,
                 else_operand: ArithmeticExpressionNode,
                 is_prioritized: bool = False):

        super().__init__()
        self.conditions: List[ExpressionNode] = [condition]
        self.operands: List[ArithmeticExpressionNode] = [wrap_operand(then_operand), wrap_operand(else_operand)]
        self.is_prioritized = is_prioritized

    @property
    def condition(self) -> ExpressionNode:
        return self.conditions[0]

    @property
    def then_operand(self) -> ArithmeticExpressionNode:
        return self.operands[0]

    @property
    def else_operand(self) -> ArithmeticExpressionNode:
        return self.operands[1]

    def get_children(self) -> List[ExpressionNode]:
        children = []
        children.extend(self.conditions)
        children.extend(self.operands)
        return children

    def get_literal(self) -> str:
        literal = "if {0} then {1} else {2}".format(self.condition, self.then_operand, self.else_operand)
        if self.is_prioritized:
            literal = "({0})".format(literal)
        return literal


class PiecewiseLinearNode(ArithmeticExpressionNode):
    """
    Piecewise-linear function of an operand. Segment i spans [breakpoints[i], breakpoints[i + 1]] and takes the value
    slopes[i] * operand + intercepts[i].
    """

    def __init__(self,
                 operand: ArithmeticExpressionNode,
                 breakpoints: Sequence[Number],
                 slopes: Sequence[Number],
                 intercepts: Sequence[Number]):

        super().__init__()
        self.operand: ArithmeticExpressionNode = wrap_operand(operand)
        self.breakpoints: List[Number] = list(breakpoints)
        self.slopes: List[Number] = list(slopes)
        self.intercepts: List[Number] = list(intercepts)

    def get_segment_count(self) -> int:
        return len(self.slopes)

    def get_children(self) -> List[ExpressionNode]:
        return [self.operand]

    def get_literal(self) -> str:
        return "piecewise({0}, breakpoints={1}, slopes={2}, intercepts={3})".format(self.operand,
                                                                                    self.breakpoints,
                                                                                    self.slopes,
                                                                                    self.intercepts)


from typing import List

from .constants import *
from .exprn import ExpressionNode, LogicalExpressionNode, ArithmeticExpressionNode, wrap_operand
from .aexprn import VariableNode


class LogicalOperationNode(LogicalExpressionNode, ArithmeticExpressionNode):
    """
    Variadic conjunction or disjunction of 0-1 valued operands. The node is itself 0-1 valued, so that it can be used
    wherever an arithmetic expression is expected.
    """

    def __init__(self,
                 operator: int,
                 operands: List[ArithmeticExpressionNode] = None):

        super().__init__()

        if operator not in (CONJUNCTION_OPERATOR, DISJUNCTION_OPERATOR):
            raise ValueError("Unable to resolve operator '{0}' as an n-ary logical operator".format(operator))

        self.operator: int = operator
        self.operands: List[ArithmeticExpressionNode] = [wrap_operand(o) for o in operands] \
            if operands is not None else []

    def __and__(self, other: ArithmeticExpressionNode):
        return self.conjunction(self, other)

    def __or__(self, other: ArithmeticExpressionNode):
        return self.disjunction(self, other)

    @staticmethod
    def conjunction(lhs_operand: ArithmeticExpressionNode, rhs_operand: ArithmeticExpressionNode):
        return LogicalOperationNode.__combine(CONJUNCTION_OPERATOR, lhs_operand, rhs_operand)

    @staticmethod
    def disjunction(lhs_operand: ArithmeticExpressionNode, rhs_operand: ArithmeticExpressionNode):
        return LogicalOperationNode.__combine(DISJUNCTION_OPERATOR, lhs_operand, rhs_operand)

    @staticmethod
    def __combine(operator: int, lhs_operand: ArithmeticExpressionNode, rhs_operand: ArithmeticExpressionNode):
        operands = []
        for operand in (lhs_operand, rhs_operand):
            if isinstance(operand, LogicalOperationNode) and operand.operator == operator:
                operands.extend(operand.operands)
            else:
                operands.append(operand)
        return LogicalOperationNode(operator=operator, operands=operands)

    def is_pattern(self) -> bool:
        """Returns True if the operation is applied to the entries matched by a single wildcard variable reference."""
        return len(self.operands) == 1 \
            and isinstance(self.operands[0], VariableNode) \
            and self.operands[0].is_pattern()

    def get_children(self) -> List[ExpressionNode]:
        return self.operands

    def get_literal(self) -> str:

        s = ""
        for i, operand in enumerate(self.operands):
            if i == 0:
                s = operand.get_literal()
            else:
                s += " {0} {1}".format(OPERATOR_SYMBOLS[self.operator], operand)

        if self.is_prioritized:
            return '(' + s + ')'
        else:
            return s

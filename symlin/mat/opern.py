from typing import List

from .constants import *
from .exprn import ExpressionNode, ArithmeticExpressionNode


class ArithmeticOperationNode(ArithmeticExpressionNode):

    def __init__(self,
                 operator: int,
                 operands: List[ArithmeticExpressionNode],
                 is_prioritized: bool = False):
        super().__init__()
        self.operator: int = operator
        self.operands: List[ArithmeticExpressionNode] = list(operands)
        self.is_prioritized = is_prioritized

        if self.operator not in OPERATOR_SYMBOLS or self.operator in (CONJUNCTION_OPERATOR, DISJUNCTION_OPERATOR):
            raise ValueError("Unable to resolve operator '{0}' as an arithmetic operator".format(self.operator))

    @staticmethod
    def negation(operand: ArithmeticExpressionNode):
        return ArithmeticOperationNode(operator=UNARY_NEGATION_OPERATOR,
                                       operands=[operand])

    @staticmethod
    def addition(lhs_operand: ArithmeticExpressionNode, rhs_operand: ArithmeticExpressionNode):

        operands = []
        for operand in (lhs_operand, rhs_operand):
            # flatten nested sums into a single n-ary addition
            if isinstance(operand, ArithmeticOperationNode) and operand.operator == ADDITION_OPERATOR \
                    and not operand.is_prioritized:
                operands.extend(operand.operands)
            else:
                operands.append(operand)

        return ArithmeticOperationNode(operator=ADDITION_OPERATOR,
                                       operands=operands)

    @staticmethod
    def subtraction(lhs_operand: ArithmeticExpressionNode, rhs_operand: ArithmeticExpressionNode):
        return ArithmeticOperationNode(operator=SUBTRACTION_OPERATOR,
                                       operands=[lhs_operand, rhs_operand])

    @staticmethod
    def multiplication(lhs_operand: ArithmeticExpressionNode, rhs_operand: ArithmeticExpressionNode):

        operands = []
        for operand in (lhs_operand, rhs_operand):
            if isinstance(operand, ArithmeticOperationNode) and operand.operator == MULTIPLICATION_OPERATOR:
                operands.extend(operand.operands)
            else:
                operands.append(operand)

        return ArithmeticOperationNode(operator=MULTIPLICATION_OPERATOR,
                                       operands=operands)

    @staticmethod
    def division(lhs_operand: ArithmeticExpressionNode, rhs_operand: ArithmeticExpressionNode):
        return ArithmeticOperationNode(operator=DIVISION_OPERATOR,
                                       operands=[lhs_operand, rhs_operand])

    def is_unary(self) -> bool:
        return self.operator in (UNARY_POSITIVE_OPERATOR, UNARY_NEGATION_OPERATOR)

    def get_arity(self) -> int:
        return len(self.operands)

    def get_children(self) -> List[ExpressionNode]:
        return self.operands

    def get_literal(self) -> str:

        if self.is_unary():
            s = "{0}{1}".format(OPERATOR_SYMBOLS[self.operator], self.__get_operand_literal(self.operands[0]))
            return "(" + s + ")" if self.is_prioritized else s

        s = ""
        for i, operand in enumerate(self.operands):
            if i == 0:
                s = self.__get_operand_literal(operand)
            else:
                s += " {0} {1}".format(OPERATOR_SYMBOLS[self.operator], self.__get_operand_literal(operand))

        if self.is_prioritized:
            return "(" + s + ")"
        else:
            return s

    @staticmethod
    def __get_operand_literal(operand: ExpressionNode) -> str:
        if isinstance(operand, ArithmeticOperationNode) and not operand.is_prioritized and operand.get_arity() > 1:
            return "(" + operand.get_literal() + ")"
        return operand.get_literal()

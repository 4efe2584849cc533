from abc import ABC, abstractmethod
from typing import List


# Expression Node
# ----------------------------------------------------------------------------------------------------------------------

class ExpressionNode(ABC):

    def __init__(self):
        self.is_prioritized: bool = False

    def __str__(self):
        return self.get_literal()

    def __repr__(self):
        return "{0}<{1}>".format(type(self).__name__, self.get_literal())

    @abstractmethod
    def get_children(self) -> List["ExpressionNode"]:
        pass

    @abstractmethod
    def get_literal(self) -> str:
        return ""


# Fundamental Expression Nodes
# ----------------------------------------------------------------------------------------------------------------------

class LogicalExpressionNode(ExpressionNode, ABC):

    def __init__(self):
        super().__init__()


class SetExpressionNode(ExpressionNode, ABC):

    def __init__(self):
        super().__init__()


class ArithmeticExpressionNode(ExpressionNode, ABC):

    def __init__(self):
        super().__init__()

    # Operator overloads build new expression trees. The arithmetic node module is imported lazily to avoid a
    # circular dependency between the node base classes and the operation node.

    def __neg__(self):
        from .opern import ArithmeticOperationNode
        return ArithmeticOperationNode.negation(self)

    def __add__(self, other):
        from .opern import ArithmeticOperationNode
        return ArithmeticOperationNode.addition(self, wrap_operand(other))

    def __radd__(self, other):
        from .opern import ArithmeticOperationNode
        return ArithmeticOperationNode.addition(wrap_operand(other), self)

    def __sub__(self, other):
        from .opern import ArithmeticOperationNode
        return ArithmeticOperationNode.subtraction(self, wrap_operand(other))

    def __rsub__(self, other):
        from .opern import ArithmeticOperationNode
        return ArithmeticOperationNode.subtraction(wrap_operand(other), self)

    def __mul__(self, other):
        from .opern import ArithmeticOperationNode
        return ArithmeticOperationNode.multiplication(self, wrap_operand(other))

    def __rmul__(self, other):
        from .opern import ArithmeticOperationNode
        return ArithmeticOperationNode.multiplication(wrap_operand(other), self)

    def __truediv__(self, other):
        from .opern import ArithmeticOperationNode
        return ArithmeticOperationNode.division(self, wrap_operand(other))

    def __rtruediv__(self, other):
        from .opern import ArithmeticOperationNode
        return ArithmeticOperationNode.division(wrap_operand(other), self)


def wrap_operand(operand) -> ArithmeticExpressionNode:
    if isinstance(operand, ArithmeticExpressionNode):
        return operand
    from .aexprn import NumericNode
    return NumericNode(operand)

from typing import List

from .exprn import ArithmeticExpressionNode


class BaseDummyNode(ArithmeticExpressionNode):

    def __init__(self):
        super().__init__()

    def get_children(self) -> List["ArithmeticExpressionNode"]:
        return []


class DummyNode(BaseDummyNode):
    """
    Symbolic index component that is resolved through the generator bindings of the current state. An unbound dummy
    is kept as an opaque reference that never equals a concrete index component.
    """

    def __init__(self, symbol: str):
        super().__init__()
        self.symbol: str = symbol

    def __eq__(self, other):
        return isinstance(other, DummyNode) and other.symbol == self.symbol

    def __hash__(self):
        return hash(("dummy", self.symbol))

    def get_literal(self) -> str:
        return self.symbol


class WildcardNode(BaseDummyNode):
    """
    Index component that matches any value of the corresponding dimension. Wildcards never take part in binding
    resolution.
    """

    def __eq__(self, other):
        return isinstance(other, WildcardNode)

    def __hash__(self):
        return hash("wildcard")

    def get_literal(self) -> str:
        return "_"


WILDCARD = WildcardNode()


def is_wildcard(component) -> bool:
    return isinstance(component, WildcardNode)

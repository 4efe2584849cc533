from typing import Iterable, List, Optional, Union

from .exprn import ExpressionNode, SetExpressionNode, ArithmeticExpressionNode, wrap_operand


class BaseSetNode(SetExpressionNode):

    def __init__(self):
        super().__init__()


class EnumeratedSetNode(BaseSetNode):
    """Explicit list of elements, e.g. {1, 2, 'a'}. Arithmetic elements are evaluated eagerly."""

    def __init__(self, elements: Iterable):
        super().__init__()
        self.elements: list = list(elements)

    def get_children(self) -> List[ExpressionNode]:
        return [e for e in self.elements if isinstance(e, ExpressionNode)]

    def get_literal(self) -> str:
        return "{" + ", ".join(str(e) if not isinstance(e, str) else "'{0}'".format(e) for e in self.elements) + "}"


class RangeSetNode(BaseSetNode):
    """Contiguous integer range start..end, both bounds inclusive."""

    def __init__(
        self,
        start: Union[int, ArithmeticExpressionNode],
        end: Union[int, ArithmeticExpressionNode],
        step: Union[int, ArithmeticExpressionNode] = 1,
    ):
        super().__init__()
        self.start: ArithmeticExpressionNode = wrap_operand(start)
        self.end: ArithmeticExpressionNode = wrap_operand(end)
        self.step: ArithmeticExpressionNode = wrap_operand(step)

    def get_children(self) -> List[ExpressionNode]:
        return [self.start, self.end, self.step]

    def get_literal(self) -> str:
        literal = "{0}..{1}".format(self.start, self.end)
        if self.step.get_literal() != "1":
            literal += " by {0}".format(self.step)
        return literal


class DataSetNode(BaseSetNode):
    """
    Domain taken from the external data context. A mapping yields its keys, any other iterable yields its elements.
    Optional key nodes select a nested entry, e.g. routes[i].
    """

    def __init__(self, symbol: str, keys: Iterable = None):
        super().__init__()
        self.symbol: str = symbol
        self.keys: list = list(keys) if keys is not None else []

    def get_children(self) -> List[ExpressionNode]:
        return [k for k in self.keys if isinstance(k, ExpressionNode)]

    def get_literal(self) -> str:
        literal = self.symbol
        if len(self.keys) > 0:
            literal += "[{0}]".format(", ".join(str(k) for k in self.keys))
        return literal


class Generator:
    """Binding of a dummy symbol to the elements of a domain: 'symbol in domain'."""

    def __init__(self, symbol: str, domain: Union[BaseSetNode, range, list, tuple]):
        self.symbol: str = symbol
        self.domain: BaseSetNode = build_domain_node(domain)

    def __str__(self):
        return "{0} in {1}".format(self.symbol, self.domain)

    def __repr__(self):
        return "Generator<{0}>".format(self)


def build_domain_node(domain) -> Optional[BaseSetNode]:
    if isinstance(domain, BaseSetNode):
        return domain
    elif isinstance(domain, range):
        if domain.step > 0:
            return RangeSetNode(domain.start, domain.stop - 1, domain.step)
        return EnumeratedSetNode(list(domain))
    elif isinstance(domain, (list, tuple)):
        return EnumeratedSetNode(domain)
    elif isinstance(domain, str):
        return DataSetNode(domain)
    else:
        raise ValueError("Unsupported generator domain '{0}' of type '{1}'".format(domain, type(domain)))

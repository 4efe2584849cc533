from typing import Any, Dict, Iterable, Mapping, Tuple

from .exceptions import LookupFailureError


class State:
    """
    Evaluation context of an expression: the generator bindings in scope and the external data context through which
    free data symbols (e.g. cost tables or product lists) are resolved.
    """

    def __init__(self, bindings: Mapping[str, Any] = None, data: Mapping[str, Any] = None):
        self.__bindings: Dict[str, Any] = dict(bindings) if bindings is not None else {}
        self.__data: Mapping[str, Any] = data if data is not None else {}

    def __str__(self):
        return "{" + ", ".join("{0}={1}".format(k, v) for k, v in self.__bindings.items()) + "}"

    @property
    def bindings(self) -> Dict[str, Any]:
        return dict(self.__bindings)

    @property
    def data(self) -> Mapping[str, Any]:
        return self.__data

    def is_bound(self, symbol: str) -> bool:
        return symbol in self.__bindings

    def get_binding(self, symbol: str, default=None):
        return self.__bindings.get(symbol, default)

    def get_data(self, symbol: str):
        if symbol not in self.__data:
            raise LookupFailureError("Data symbol '{0}' is not defined in the data context".format(symbol))
        return self.__data[symbol]

    def bind(self, pairs: Iterable[Tuple[str, Any]]) -> "State":
        bindings = dict(self.__bindings)
        bindings.update(pairs)
        return State(bindings=bindings, data=self.__data)

    def get_bindings_key(self) -> Tuple[Tuple[str, str], ...]:
        return tuple(sorted((k, repr(v)) for k, v in self.__bindings.items()))

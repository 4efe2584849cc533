from typing import Dict, List, Optional, Sequence, Tuple

from .dummyn import is_wildcard
from .exceptions import LookupFailureError, ShapeError
from .polynomial import Polynomial
from .types import Element

Family = Dict[Element, Polynomial]


def matches_pattern(idx: Element, pattern: Sequence) -> bool:
    """
    Check whether a concrete index matches a pattern. Each pattern component must either be a wildcard or be equal to
    the corresponding index component. An arity mismatch is a non-match.
    :param idx: concrete index tuple
    :param pattern: resolved pattern components
    :return: True if the index matches the pattern
    """
    if len(idx) != len(pattern):
        return False
    return all(is_wildcard(p) or p == i for i, p in zip(idx, pattern))


def has_wildcard(pattern: Sequence) -> bool:
    return any(is_wildcard(p) for p in pattern)


def match_entries(family: Family, pattern: Sequence) -> List[Tuple[Element, Polynomial]]:
    return [(idx, p) for idx, p in family.items() if matches_pattern(idx, pattern)]


def sum_matching(family: Family, pattern: Sequence) -> Polynomial:
    total = Polynomial()
    for _, p in match_entries(family, pattern):
        total = total.add(p)
    return total


def lookup(family: Family, idx: Element, symbol: Optional[str] = None) -> Polynomial:
    """
    Retrieve the polynomial stored at an exact index.
    :param family: index-to-polynomial mapping of a variable family
    :param idx: concrete index tuple
    :param symbol: family symbol, used in error messages
    :return: the stored polynomial
    """
    idx = tuple(idx)

    if idx in family:
        return family[idx]

    literal = symbol if symbol is not None else "variable"
    arities = {len(k) for k in family}
    if len(arities) > 0 and len(idx) not in arities:
        raise ShapeError(
            "Index {0} of '{1}' has arity {2}, whereas the family is indexed with arity {3}".format(
                idx, literal, len(idx), ", ".join(str(a) for a in sorted(arities))
            )
        )

    raise LookupFailureError("Variable not found: {0}{1}".format(literal, list(idx)))

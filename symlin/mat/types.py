from numbers import Number
from typing import Dict, Tuple, Union

Element = Tuple[Union[int, float, str, None], ...]

Term = Tuple[str, ...]
TermMap = Dict[Term, Number]

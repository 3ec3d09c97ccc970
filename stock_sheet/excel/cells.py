from __future__ import annotations

import math
from typing import Any, Union

"""Cell normalizer.

Manually edited sheets are full of blanks, dash placeholders and thousands
separators. Every cell is coerced to a finite number and anything that cannot
be parsed becomes 0. This function never raises.
"""

__all__ = [
    "to_number",
]

Number = Union[int, float]

_PLACEHOLDERS = {"", "-"}


def _tidy(value: float) -> Number:
    if not math.isfinite(value):
        return 0
    if value.is_integer():
        return int(value)
    return value


def to_number(value: Any) -> Number:
    """Coerce a raw cell into a number.

    >>> to_number("1,234")
    1234
    >>> to_number(" - ")
    0
    >>> to_number("abc")
    0
    """
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return _tidy(value)
    text = str(value).strip()
    if text in _PLACEHOLDERS:
        return 0
    text = text.replace(",", "")
    try:
        parsed = float(text)
    except (TypeError, ValueError):
        return 0
    return _tidy(parsed)

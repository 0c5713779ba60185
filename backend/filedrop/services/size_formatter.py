"""Human readable file sizes for the listing page."""
import math
from typing import Optional

# (threshold, unit) from largest to smallest; a size must exceed the threshold
_UNITS = (
    (1_000_000_000, "GB"),
    (1_000_000, "MB"),
    (1_000, "kB"),
)


def _format_number(value: float) -> str:
    text = repr(value)
    if text.endswith(".0"):
        return text[:-2]
    return text


def format_size(size: Optional[int]) -> str:
    """
    Format a byte count with decimal units and one fractional digit.

    ``None`` (unknown size) gives an empty string. A count equal to a
    threshold stays in the smaller unit, so 1000 bytes is ``"1000 B"``.
    Whole values are printed without a fractional part (``"1 MB"``).
    """
    if size is None:
        return ""

    divisor, unit = 1, "B"
    for threshold, name in _UNITS:
        if size > threshold:
            divisor, unit = threshold, name
            break

    # round half up, python's round() would round half to even
    value = math.floor(size / divisor * 10 + 0.5) / 10
    return f"{_format_number(value)} {unit}"

# utils/strings.py
from __future__ import annotations

from typing import Optional


def format_number(value: Optional[float]) -> str:
    """
    Render points/thresholds the way people write them: integral values
    without a trailing ".0", everything else as the shortest float repr.

    >>> format_number(5.0), format_number(7.5), format_number(None)
    ('5', '7.5', '')
    """
    if value is None:
        return ""
    f = float(value)
    if f.is_integer():
        return str(int(f))
    return repr(f)


def text_or_empty(value: Optional[str]) -> str:
    return "" if value is None else str(value)

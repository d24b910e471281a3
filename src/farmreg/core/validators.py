# File: src/farmreg/core/validators.py
"""Reusable validation utilities for dialogue input."""

import math
import re
from decimal import Decimal

# Plain decimal notation only: "2", "2.5", ".5". No signs, exponents or commas.
_DECIMAL_RE = re.compile(r"^(\d+(\.\d*)?|\.\d+)$")


def parse_farm_size(value: str) -> float:
    """
    Parse a farm size in acres.

    Args:
        value: Raw user entry

    Returns:
        Farm size as a positive float

    Raises:
        ValueError: If value is not plain decimal notation, not finite, or not > 0
    """
    candidate = (value or "").strip()
    if not _DECIMAL_RE.match(candidate):
        raise ValueError(f"Invalid farm size format: {value!r}")

    size = float(candidate)
    if not math.isfinite(size):
        raise ValueError("Farm size must be a finite number")
    if size <= 0:
        raise ValueError("Farm size must be greater than zero")

    return size


def format_acres(value: float) -> str:
    """
    Render a farm size in plain decimal notation (10, 2.5, 0.0000001).

    Uses the shortest round-tripping digits of the float, so no exponent
    and no binary noise; trailing zeros and a bare `.` are dropped.
    """
    text = format(Decimal(repr(float(value))), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text

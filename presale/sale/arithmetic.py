"""
arithmetic.py - Bounded integer arithmetic for sale accounting.

Sale quantities and prices are non-negative integers no larger than the
configured ceiling. Any sum or product that leaves that range raises
ArithmeticOverflow instead of wrapping or growing without bound.
"""

from __future__ import annotations

from ..config import MAX_AMOUNT
from .errors import ArithmeticOverflow


def check_amount(value: int, name: str = "amount", max_amount: int = MAX_AMOUNT) -> int:
    """
    Validate that value is an int within [0, max_amount].

    Raises:
        TypeError: If value is not an int (bool is rejected too)
        ArithmeticOverflow: If value is negative or above max_amount
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be int, got {type(value).__name__}")
    if value < 0 or value > max_amount:
        raise ArithmeticOverflow(f"{name} out of range: {value}")
    return value


def checked_add(a: int, b: int, max_amount: int = MAX_AMOUNT) -> int:
    result = a + b
    if result > max_amount:
        raise ArithmeticOverflow(f"{a} + {b} exceeds {max_amount}")
    return result


def checked_mul(a: int, b: int, max_amount: int = MAX_AMOUNT) -> int:
    result = a * b
    if result > max_amount:
        raise ArithmeticOverflow(f"{a} * {b} exceeds {max_amount}")
    return result

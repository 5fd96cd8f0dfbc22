"""
caliper.core.utils
==================

Numeric and formatting helpers shared by the unit engine.

All amounts and factors are ``decimal.Decimal`` values computed in a private
context matching IEEE 754 decimal64: 16 significant digits, round half to
even. The process-wide decimal context is never modified; every operation goes
through ``MATH_CONTEXT`` explicitly.
"""

from __future__ import annotations

from decimal import ROUND_HALF_EVEN, Context, Decimal, InvalidOperation
from typing import Union

from caliper.core.errors import InvalidDefinition

Number = Union[Decimal, int, float, str]

MATH_CONTEXT = Context(prec=16, rounding=ROUND_HALF_EVEN)

ONE = Decimal(1)
ZERO = Decimal(0)

# multiply, divide and power symbols
MULT = "·"
DIV = "/"
POW = "^"
SQ = "²"
CUBED = "³"


def create_amount(value: Number) -> Decimal:
    """Convert ``value`` into a Decimal rounded to ``MATH_CONTEXT``.

    Floats go through their shortest ``repr`` so that ``0.3048`` becomes
    ``Decimal("0.3048")`` and not its binary expansion.
    """
    if value is None:
        raise InvalidDefinition("amount.cannot.be.null", "Amount cannot be null")
    if isinstance(value, bool):
        raise InvalidDefinition("amount.not.numeric", f"Amount must be numeric, got {value!r}")
    if isinstance(value, Decimal):
        return MATH_CONTEXT.plus(value)
    if isinstance(value, float):
        value = repr(value)
    if isinstance(value, (int, str)):
        try:
            return MATH_CONTEXT.create_decimal(value)
        except (InvalidOperation, ValueError):
            raise InvalidDefinition(
                "amount.not.numeric", f"Amount must be numeric, got {value!r}"
            ) from None
    raise InvalidDefinition("amount.not.numeric", f"Amount must be numeric, got {value!r}")


def decimal_add(a: Decimal, b: Decimal) -> Decimal:
    return MATH_CONTEXT.add(a, b)


def decimal_subtract(a: Decimal, b: Decimal) -> Decimal:
    return MATH_CONTEXT.subtract(a, b)


def decimal_multiply(a: Decimal, b: Decimal) -> Decimal:
    return MATH_CONTEXT.multiply(a, b)


def decimal_divide(a: Decimal, b: Decimal) -> Decimal:
    try:
        return MATH_CONTEXT.divide(a, b)
    except (ZeroDivisionError, InvalidOperation):
        raise InvalidDefinition("division.by.zero", f"Cannot divide {a} by {b}") from None


def decimal_power(base: Decimal, exponent: int) -> Decimal:
    """Integer power; negative exponents produce the reciprocal."""
    result = MATH_CONTEXT.power(base, exponent)
    # zero to a negative power is infinite
    if not result.is_finite():
        raise InvalidDefinition("division.by.zero", f"Cannot raise {base} to the power {exponent}")
    return result


def divide_amounts(dividend: Number, divisor: Number) -> Decimal:
    """Divide two literal amounts, e.g. ``divide_amounts("5", "9")``."""
    return decimal_divide(create_amount(dividend), create_amount(divisor))


def power_suffix(n: int) -> str:
    """Suffix for ``|n|``: '' for 1, '²' and '³' for 2 and 3, else '^n'."""
    n = abs(n)
    if n == 1:
        return ""
    if n == 2:
        return SQ
    if n == 3:
        return CUBED
    return f"{POW}{n}"


__all__ = [
    "MATH_CONTEXT",
    "ONE",
    "ZERO",
    "MULT",
    "DIV",
    "create_amount",
    "decimal_add",
    "decimal_subtract",
    "decimal_multiply",
    "decimal_divide",
    "decimal_power",
    "divide_amounts",
    "power_suffix",
]

"""Reduction of units to their fundamental terms.

``Reducer`` expands an arbitrary unit into an aggregate scaling factor and a
mapping of fundamental (terminal scalar) units to integer exponents, and renders
that mapping as the canonical *base symbol*. Two units with the same dimensional
content, however they were built (``N·m`` vs ``J``), render the same string.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Dict, List, Mapping, Tuple

from caliper.core.errors import RecursionLimitExceeded
from caliper.core.unit import Power, Product, Quotient, Scalar, Unit
from caliper.core.utils import (
    DIV,
    MULT,
    ONE,
    decimal_divide,
    decimal_multiply,
    power_suffix,
)

logger = logging.getLogger(__name__)

Terms = Dict[Unit, int]


class Reducer:
    """Accumulates ``scaling_factor`` and ``terms`` for one unit."""

    MAX_RECURSIONS = 10

    def __init__(self, terms: Mapping[Unit, int] | None = None) -> None:
        self.scaling_factor: Decimal = ONE
        self.terms: Terms = {u: p for u, p in (terms or {}).items() if p != 0}

    # ------------------------------------------------------------------
    # Expansion
    # ------------------------------------------------------------------
    def explode(self, unit: Unit) -> "Reducer":
        self._explode(unit, False, 0, unit)
        return self

    def _scale(self, factor: Decimal, invert: bool) -> None:
        if factor == ONE:
            return
        if invert:
            self.scaling_factor = decimal_divide(self.scaling_factor, factor)
        else:
            self.scaling_factor = decimal_multiply(self.scaling_factor, factor)

    def _explode(self, unit: Unit, invert: bool, counter: int, root: Unit) -> None:
        counter += 1
        if counter > self.MAX_RECURSIONS:
            self.terms.clear()
            logger.warning("Reduction of %s exceeded %d levels", root.symbol, self.MAX_RECURSIONS)
            raise RecursionLimitExceeded(root.symbol, self.MAX_RECURSIONS)

        self._scale(unit.scaling_factor, invert)

        abscissa = unit.abscissa_unit
        shape = abscissa.shape

        if isinstance(shape, Quotient):
            self._explode(shape.dividend, invert, counter, root)
            self._explode(shape.divisor, not invert, counter, root)

        elif isinstance(shape, Product):
            self._explode(shape.multiplier, invert, counter, root)
            self._explode(shape.multiplicand, invert, counter, root)

        elif isinstance(shape, Power):
            # base^-n is the reciprocal of base^n
            if shape.exponent < 0:
                invert = not invert
            for _ in range(abs(shape.exponent)):
                self._explode(shape.base, invert, counter, root)

        elif isinstance(shape, Scalar):
            if abscissa.is_terminal:
                self.add_term(abscissa, invert)
            else:
                self._explode(abscissa, invert, counter, root)

    def add_term(self, unit: Unit, invert: bool) -> None:
        """Raise (or lower, when ``invert``) the exponent of ``unit`` by one."""
        # unity is the multiplicative identity
        if unit.is_unity:
            return

        power = self.terms.get(unit, 0) + (-1 if invert else 1)
        if power == 0:
            self.terms.pop(unit, None)
        else:
            self.terms[unit] = power

    # ------------------------------------------------------------------
    # Term algebra
    # ------------------------------------------------------------------
    def merged(self, other: "Reducer", invert: bool = False) -> "Reducer":
        """A new reducer holding this one's terms times (or over) ``other``'s."""
        result = Reducer(self.terms)
        sign = -1 if invert else 1
        for unit, power in other.terms.items():
            combined = result.terms.get(unit, 0) + sign * power
            if combined == 0:
                result.terms.pop(unit, None)
            else:
                result.terms[unit] = combined

        if invert:
            result.scaling_factor = decimal_divide(self.scaling_factor, other.scaling_factor)
        else:
            result.scaling_factor = decimal_multiply(self.scaling_factor, other.scaling_factor)
        return result

    def sorted_terms(self) -> List[Tuple[Unit, int]]:
        return sorted(self.terms.items(), key=lambda item: item[0].symbol)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------
    def build_string(self) -> str:
        numerator: List[str] = []
        denominator: List[str] = []

        for unit, power in self.sorted_terms():
            if unit.is_unity:
                continue
            rendered = f"{unit.symbol}{power_suffix(power)}"
            if power < 0:
                denominator.append(rendered)
            else:
                numerator.append(rendered)

        num = MULT.join(numerator)
        if len(numerator) > 1:
            num = f"({num})"
        elif not numerator:
            num = "1"

        if not denominator:
            return num

        den = MULT.join(denominator)
        if len(denominator) > 1:
            den = f"({den})"
        return f"{num}{DIV}{den}"


def reduce_unit(unit: Unit) -> Reducer:
    """Explode ``unit`` into a fresh ``Reducer``."""
    return Reducer().explode(unit)


__all__ = ["Reducer", "reduce_unit"]

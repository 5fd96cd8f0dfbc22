"""
caliper.core.conversion
=======================

The linear relation ``y = a·x + b`` that ties a unit to its abscissa unit.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING

from caliper.core.utils import ONE, ZERO, decimal_add, decimal_multiply

if TYPE_CHECKING:  # pragma: no cover - imported only for type checking
    from caliper.core.unit import Unit


@dataclass(frozen=True, slots=True)
class Conversion:
    """
    Conversion from an owning unit to ``abscissa_unit``.

    Attributes
    ----------
    abscissa_unit : Unit
        The x-axis unit; an amount in the owning unit converts into it.
    scaling_factor : Decimal
        ``a`` in ``y = a·x + b``.
    offset : Decimal
        ``b`` in ``y = a·x + b``. Only meaningful for scalar units
        (e.g. Celsius → Kelvin).
    """

    abscissa_unit: "Unit"
    scaling_factor: Decimal = ONE
    offset: Decimal = ZERO

    @property
    def is_identity(self) -> bool:
        return self.scaling_factor == ONE and self.offset == ZERO

    def convert(self, x: Decimal) -> Decimal:
        """Map an amount expressed in the owning unit onto the abscissa unit."""
        return decimal_add(decimal_multiply(self.scaling_factor, x), self.offset)


__all__ = ["Conversion"]

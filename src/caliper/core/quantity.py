"""
caliper.core.quantity
=====================

Defines the `Quantity` class: an amount paired with a unit of measure.

Amounts are ``decimal.Decimal`` values kept at 16 significant digits with
round-half-even rounding (see ``caliper.core.utils.MATH_CONTEXT``), so that
conversions round-trip stably. Dimensional work (reduction, factor resolution,
unit algebra) is delegated to `Unit`.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from caliper.core.errors import InvalidDefinition
from caliper.core.unit import Unit, registry_of
from caliper.core.utils import (
    ONE,
    Number,
    create_amount,
    decimal_add,
    decimal_divide,
    decimal_multiply,
    decimal_power,
    decimal_subtract,
)


class Quantity:
    """
    An amount of some unit of measure, e.g. ``10 ft``.

    Attributes
    ----------
    amount : Decimal
        The magnitude expressed in ``unit``.
    unit : Unit
        The unit of measure.
    """

    __slots__ = ["amount", "unit"]

    def __init__(self, amount: Number, unit: Unit):
        if unit is None:
            raise InvalidDefinition("unit.cannot.be.null", "The unit of a quantity cannot be null")
        self.amount = create_amount(amount)
        self.unit = unit

    # --- conversion ------------------------------------------------------

    def convert(self, target: "Unit | str") -> Quantity:
        """Express this quantity in ``target`` (a unit or a registered symbol)."""
        target = self._resolve_unit(target)

        if target is self.unit or target == self.unit:
            return self

        multiplier = self.unit.get_conversion_factor(target)

        # adjust for a non-zero "this" offset, then for the target's
        offset_amount = decimal_add(self.amount, self.unit.offset)
        new_amount = decimal_multiply(offset_amount, multiplier)
        new_amount = decimal_subtract(new_amount, target.offset)
        return Quantity(new_amount, target)

    to = convert

    def _resolve_unit(self, unit: "Unit | str") -> Unit:
        if isinstance(unit, Unit):
            return unit
        if isinstance(unit, str):
            found = registry_of(self.unit).get(unit)
            if found is None:
                raise InvalidDefinition("unit.not.found", f"Unknown unit symbol: {unit}")
            return found
        raise InvalidDefinition("unit.cannot.be.null", f"Expected a unit, got {unit!r}")

    # --- arithmetic ------------------------------------------------------

    def add(self, other: Quantity) -> Quantity:
        to_add = other.convert(self.unit)
        return Quantity(decimal_add(self.amount, to_add.amount), self.unit)

    def subtract(self, other: Quantity) -> Quantity:
        to_subtract = other.convert(self.unit)
        return Quantity(decimal_subtract(self.amount, to_subtract.amount), self.unit)

    def multiply(self, other: "Quantity | Number") -> Quantity:
        if isinstance(other, Quantity):
            amount = decimal_multiply(self.amount, other.amount)
            return Quantity(amount, self.unit.multiply(other.unit))
        return Quantity(decimal_multiply(self.amount, create_amount(other)), self.unit)

    def divide(self, other: "Quantity | Number") -> Quantity:
        if isinstance(other, Quantity):
            amount = decimal_divide(self.amount, other.amount)
            return Quantity(amount, self.unit.divide(other.unit))
        return Quantity(decimal_divide(self.amount, create_amount(other)), self.unit)

    def invert(self) -> Quantity:
        return Quantity(decimal_divide(ONE, self.amount), self.unit.invert())

    def power(self, exponent: int) -> Quantity:
        new_unit = self.unit.power(exponent)
        return Quantity(decimal_power(self.amount, exponent), new_unit)

    def __add__(self, other: Quantity) -> Quantity:
        if not isinstance(other, Quantity):
            return NotImplemented
        return self.add(other)

    def __sub__(self, other: Quantity) -> Quantity:
        if not isinstance(other, Quantity):
            return NotImplemented
        return self.subtract(other)

    def __mul__(self, other: "Quantity | Unit | Number") -> Quantity:
        # quantity × unit
        if isinstance(other, Unit):
            return Quantity(self.amount, self.unit.multiply(other))
        if isinstance(other, (Quantity, Decimal, int, float)) and not isinstance(other, bool):
            return self.multiply(other)
        return NotImplemented

    def __rmul__(self, other: Number) -> Quantity:
        # allows 3 * (2 m) -> 6 m
        if isinstance(other, (Decimal, int, float)) and not isinstance(other, bool):
            return self.multiply(other)
        return NotImplemented

    def __truediv__(self, other: "Quantity | Unit | Number") -> Quantity:
        # quantity / unit
        if isinstance(other, Unit):
            return Quantity(self.amount, self.unit.divide(other))
        if isinstance(other, (Quantity, Decimal, int, float)) and not isinstance(other, bool):
            return self.divide(other)
        return NotImplemented

    def __rtruediv__(self, other: Number) -> Quantity:
        # scalar / quantity -> quantity in the inverse unit
        if isinstance(other, (Decimal, int, float)) and not isinstance(other, bool):
            return self.invert().multiply(other)
        return NotImplemented

    def __pow__(self, n: int) -> Quantity:
        return self.power(n)

    def __neg__(self) -> Quantity:
        return Quantity(-self.amount, self.unit)

    # --- comparison ------------------------------------------------------

    def compare(self, other: Quantity) -> int:
        """-1, 0 or 1 after converting ``other`` into this quantity's unit."""
        to_compare = other
        if not (other.unit is self.unit or other.unit == self.unit):
            to_compare = other.convert(self.unit)
        if self.amount < to_compare.amount:
            return -1
        if self.amount > to_compare.amount:
            return 1
        return 0

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Quantity):
            return NotImplemented
        # same amount and same unit of measure
        return self.amount == other.amount and self.unit == other.unit

    def __hash__(self) -> int:
        return hash(self.amount) ^ hash(self.unit)

    def __lt__(self, other: Quantity) -> bool:
        return self.compare(other) < 0

    def __le__(self, other: Quantity) -> bool:
        return self.compare(other) <= 0

    def __gt__(self, other: Quantity) -> bool:
        return self.compare(other) > 0

    def __ge__(self, other: Quantity) -> bool:
        return self.compare(other) >= 0

    def __repr__(self) -> str:
        return f"{self.amount} {self.unit.symbol}"

    def __format__(self, format_spec: str) -> str:
        """Format the amount with ``format_spec`` and append the unit symbol."""
        if not format_spec:
            return repr(self)
        return f"{format(self.amount, format_spec)} {self.unit.symbol}"


class NamedQuantity(Quantity):
    """
    A quantity with an identity of its own, e.g. a physical constant.

    Attributes
    ----------
    name, symbol, description : str, optional
        Set on construction or later with `set_id`.
    """

    __slots__ = ["name", "symbol", "description"]

    def __init__(
        self,
        amount: Number,
        unit: Unit,
        name: Optional[str] = None,
        symbol: Optional[str] = None,
        description: Optional[str] = None,
    ):
        super().__init__(amount, unit)
        self.set_id(name, symbol, description)

    @classmethod
    def from_quantity(
        cls,
        quantity: Quantity,
        name: Optional[str] = None,
        symbol: Optional[str] = None,
        description: Optional[str] = None,
    ) -> NamedQuantity:
        return cls(quantity.amount, quantity.unit, name, symbol, description)

    def set_id(self, name: Optional[str], symbol: Optional[str], description: Optional[str]) -> None:
        self.name = name
        self.symbol = symbol
        self.description = description

    def __str__(self) -> str:
        ident = [part for part in (self.symbol, self.name, self.description) if part is not None]
        if not ident:
            return repr(self)
        return f"{self!r} ({', '.join(ident)})"


__all__ = ["Quantity", "NamedQuantity"]

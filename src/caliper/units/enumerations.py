# caliper.units.enumerations

from __future__ import annotations

from enum import Enum, auto


class CatalogUnit(Enum):
    """Tags for the units of the default catalog.

    A unit carries at most one tag and a registry holds at most one unit per
    tag, so ``registry.get(CatalogUnit.FOOT)`` is independent of symbols.
    """

    ONE = auto()

    # SI
    METRE = auto()
    KILOGRAM = auto()
    SECOND = auto()
    AMPERE = auto()
    KELVIN = auto()
    MOLE = auto()
    CANDELA = auto()
    RADIAN = auto()
    STERADIAN = auto()
    SQUARE_METRE = auto()
    CUBIC_METRE = auto()
    SQUARE_SECOND = auto()
    METRE_PER_SEC = auto()
    METRE_PER_SEC_SQUARED = auto()
    HERTZ = auto()
    NEWTON = auto()
    PASCAL = auto()
    JOULE = auto()
    WATT = auto()
    COULOMB = auto()
    VOLT = auto()
    OHM = auto()
    GRAM = auto()
    LITRE = auto()
    MINUTE = auto()
    HOUR = auto()
    CELSIUS = auto()

    # International customary
    FOOT = auto()
    INCH = auto()
    YARD = auto()
    MILE = auto()
    SQUARE_FOOT = auto()
    FEET_PER_SEC = auto()
    FEET_PER_SEC_SQUARED = auto()
    POUND_MASS = auto()
    POUND_FORCE = auto()
    RANKINE = auto()
    FAHRENHEIT = auto()


__all__ = ["CatalogUnit"]

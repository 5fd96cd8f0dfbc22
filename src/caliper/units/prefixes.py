"""
caliper.units.prefixes
======================

SI decimal prefixes and the IEC binary prefixes used for digital information.
"""

from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import Optional


class Prefix(Enum):
    """A unit prefix: ``(prefix name, symbol, factor)``."""

    YOTTA = ("yotta", "Y", "1E+24")
    ZETTA = ("zetta", "Z", "1E+21")
    EXA = ("exa", "E", "1E+18")
    PETA = ("peta", "P", "1E+15")
    TERA = ("tera", "T", "1E+12")
    GIGA = ("giga", "G", "1E+9")
    MEGA = ("mega", "M", "1E+6")
    KILO = ("kilo", "k", "1E+3")
    HECTO = ("hecto", "h", "1E+2")
    DEKA = ("deka", "da", "1E+1")
    DECI = ("deci", "d", "1E-1")
    CENTI = ("centi", "c", "1E-2")
    MILLI = ("milli", "m", "1E-3")
    MICRO = ("micro", "µ", "1E-6")
    NANO = ("nano", "n", "1E-9")
    PICO = ("pico", "p", "1E-12")
    FEMTO = ("femto", "f", "1E-15")
    ATTO = ("atto", "a", "1E-18")
    ZEPTO = ("zepto", "z", "1E-21")
    YOCTO = ("yocto", "y", "1E-24")

    # IEC binary prefixes (1998)
    KIBI = ("kibi", "Ki", "1024")
    MEBI = ("mebi", "Mi", "1048576")
    GIBI = ("gibi", "Gi", "1073741824")

    def __init__(self, prefix_name: str, symbol: str, factor: str) -> None:
        self.prefix_name = prefix_name
        self.symbol = symbol
        self.factor = Decimal(factor)

    @classmethod
    def from_symbol(cls, symbol: str) -> Optional["Prefix"]:
        """Look a prefix up by symbol; ASCII 'u' is accepted for micro."""
        if symbol == "u":
            symbol = "µ"
        for prefix in cls:
            if prefix.symbol == symbol:
                return prefix
        return None

    @classmethod
    def from_factor(cls, factor: Decimal) -> Optional["Prefix"]:
        for prefix in cls:
            if prefix.factor == factor:
                return prefix
        return None


PREFIXES = tuple(Prefix)


__all__ = ["Prefix", "PREFIXES"]

"""
caliper.units.registry
======================

A thread-safe cache of units of measure.

- `UnitsRegistry` indexes units by symbol (unique), by canonical base symbol
  (first registered wins) and by catalog enumeration tag.
- Factories (`create_scalar`, `create_product`, `create_quotient`,
  `create_power`, `create_prefixed`) build a unit and register it in one step,
  returning the canonical instance for the symbol.
- `UnitNamespace` exposes a registry as attributes (``u.m``, ``u("kg")``).
- `DEFAULT_REGISTRY` is bootstrapped with a compact SI and International
  Customary catalog. Independent registries are isolated from it.

The registry does *not* parse compound expressions (like "m/s^2"); compose
units with ``*``, ``/`` and ``**`` instead.
"""
from __future__ import annotations

import logging
import threading
from typing import ClassVar, Dict, Hashable, List, Mapping, Optional, Union

from caliper.core.errors import InvalidDefinition
from caliper.core.unit import SCALAR, Power, Product, Quotient, Shape, Unit
from caliper.core.unit_types import UnitType
from caliper.core.utils import Number, divide_amounts
from caliper.units.enumerations import CatalogUnit
from caliper.units.prefixes import Prefix

logger = logging.getLogger(__name__)


class UnitsRegistry:
    """Thread-safe registry of `Unit` objects.

    Every registry owns a unity unit ``"1"`` (see `one`), registered on
    construction. Units created through a registry remember it, so unit
    algebra on them de-duplicates against this registry only.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._units: Dict[str, Unit] = {}
        self._base_units: Dict[str, Unit] = {}
        self._enumerations: Dict[Hashable, Unit] = {}

        self._one = self.create_scalar(
            UnitType.UNITY, "one", "1", "unity", enumeration=CatalogUnit.ONE
        )

    @property
    def one(self) -> Unit:
        """The unity unit of this registry."""
        return self._one

    def __contains__(self, key: Union[str, Hashable]) -> bool:
        return self.get(key) is not None

    def __repr__(self) -> str:
        with self._lock:
            count = len(self._units)
        return f"<UnitsRegistry: {count} units>"

    # -------------------------- public API ---------------------------------
    def register(self, unit: Unit) -> Unit:
        """Cache ``unit`` and return the canonical instance for its symbol.

        Registering a symbol that already exists is a no-op: the first
        registered unit wins and is returned. A catalog enumeration may only
        be registered once.
        """
        if unit is None:
            raise InvalidDefinition("unit.cannot.be.null", "Cannot register a null unit")

        # reduction is pure, compute it before taking the lock
        base_symbol = unit.base_symbol

        with self._lock:
            current = self._units.get(unit.symbol)
            if current is not None:
                logger.debug("Unit %s is already registered, keeping %r", unit.symbol, current)
                return current

            if unit.enumeration is not None:
                tagged = self._enumerations.get(unit.enumeration)
                if tagged is not None:
                    raise InvalidDefinition(
                        "already.registered",
                        f"Cannot register unit '{unit.symbol}': enumeration {unit.enumeration} "
                        f"is already registered for '{tagged.symbol}'",
                    )
                self._enumerations[unit.enumeration] = unit

            self._units[unit.symbol] = unit
            self._base_units.setdefault(base_symbol, unit)

            if unit.registry is None:
                unit.registry = self

        logger.debug("Registered unit %s (base %s)", unit.symbol, base_symbol)
        return unit

    def unregister(self, unit: Unit) -> None:
        """Remove ``unit`` from every index it is present in."""
        if unit is None:
            return

        with self._lock:
            if self._units.get(unit.symbol) is unit:
                del self._units[unit.symbol]
            if unit.enumeration is not None and self._enumerations.get(unit.enumeration) is unit:
                del self._enumerations[unit.enumeration]
            for key in [k for k, v in self._base_units.items() if v is unit]:
                del self._base_units[key]

        logger.debug("Unregistered unit %s", unit.symbol)

    def clear(self) -> None:
        """Remove all cached units, including unity."""
        with self._lock:
            self._units.clear()
            self._base_units.clear()
            self._enumerations.clear()
        logger.debug("Cleared units registry")

    def reindex(self, unit: Unit) -> None:
        """Refresh the base symbol entry of a registered unit after its conversion changed."""
        with self._lock:
            if self._units.get(unit.symbol) is not unit:
                return

        base_symbol = unit.base_symbol

        with self._lock:
            for key in [k for k, v in self._base_units.items() if v is unit and k != base_symbol]:
                del self._base_units[key]
            self._base_units.setdefault(base_symbol, unit)

    def has(self, key: Union[str, Hashable]) -> bool:
        return self.get(key) is not None

    def get(self, key: Union[str, Hashable]) -> Optional[Unit]:
        """Lookup a unit by symbol or by catalog enumeration."""
        with self._lock:
            if isinstance(key, str):
                return self._units.get(key)
            return self._enumerations.get(key)

    def get_base(self, base_symbol: str) -> Optional[Unit]:
        """The first registered unit whose base symbol is ``base_symbol``."""
        with self._lock:
            return self._base_units.get(base_symbol)

    def all(self) -> Mapping[str, Unit]:
        """Snapshot of the symbol index, ordered by symbol."""
        with self._lock:
            return {symbol: self._units[symbol] for symbol in sorted(self._units)}

    def as_namespace(self) -> UnitNamespace:
        return UnitNamespace(self)

    # -------------------------- factories ----------------------------------
    def create_scalar(
        self,
        unit_type: UnitType,
        name: Optional[str],
        symbol: str,
        description: Optional[str] = None,
        *,
        enumeration: Optional[Hashable] = None,
        unified_symbol: Optional[str] = None,
    ) -> Unit:
        return self._create(unit_type, name, symbol, description, SCALAR, enumeration, unified_symbol)

    def create_product(
        self,
        unit_type: UnitType,
        name: Optional[str],
        symbol: str,
        description: Optional[str],
        multiplier: Unit,
        multiplicand: Unit,
        *,
        enumeration: Optional[Hashable] = None,
        unified_symbol: Optional[str] = None,
    ) -> Unit:
        shape = Product(multiplier, multiplicand)
        return self._create(unit_type, name, symbol, description, shape, enumeration, unified_symbol)

    def create_quotient(
        self,
        unit_type: UnitType,
        name: Optional[str],
        symbol: str,
        description: Optional[str],
        dividend: Unit,
        divisor: Unit,
        *,
        enumeration: Optional[Hashable] = None,
        unified_symbol: Optional[str] = None,
    ) -> Unit:
        shape = Quotient(dividend, divisor)
        return self._create(unit_type, name, symbol, description, shape, enumeration, unified_symbol)

    def create_power(
        self,
        unit_type: UnitType,
        name: Optional[str],
        symbol: str,
        description: Optional[str],
        base: Unit,
        exponent: int,
        *,
        enumeration: Optional[Hashable] = None,
        unified_symbol: Optional[str] = None,
    ) -> Unit:
        shape = Power(base, exponent)
        return self._create(unit_type, name, symbol, description, shape, enumeration, unified_symbol)

    def create_prefixed(self, prefix: Prefix, unit: Unit) -> Unit:
        """Create (or fetch) ``prefix`` applied to ``unit``, e.g. kilo + m → km."""
        if prefix is None or unit is None:
            raise InvalidDefinition("prefix.cannot.be.null", "Both a prefix and a unit are required")

        symbol = f"{prefix.symbol}{unit.symbol}"
        existing = self.get(symbol)
        if existing is not None:
            return existing

        name = f"{prefix.prefix_name}{unit.name or unit.symbol}"
        prefixed = Unit(unit.unit_type, name, symbol, None, SCALAR, registry=self)
        prefixed.set_conversion(prefix.factor, unit)
        return self.register(prefixed)

    # ------------------------- internals -----------------------------------
    def _create(
        self,
        unit_type: UnitType,
        name: Optional[str],
        symbol: str,
        description: Optional[str],
        shape: Shape,
        enumeration: Optional[Hashable],
        unified_symbol: Optional[str],
    ) -> Unit:
        existing = self.get(symbol) if symbol else None
        if existing is not None:
            return _same_definition(existing, unit_type, shape)

        unit = Unit(
            unit_type,
            name,
            symbol,
            description,
            shape,
            enumeration=enumeration,
            unified_symbol=unified_symbol,
            registry=self,
        )
        # another thread may have registered the symbol in between
        return _same_definition(self.register(unit), unit_type, shape)


def _same_definition(unit: Unit, unit_type: UnitType, shape: Shape) -> Unit:
    """Return the registered ``unit`` if it matches the requested definition."""
    current = unit.shape
    if type(current) is not type(shape):
        raise InvalidDefinition(
            "already.created",
            f"The symbol '{unit.symbol}' is already registered as a "
            f"{type(current).__name__.lower()} unit",
        )

    if isinstance(shape, Product):
        same = current.multiplier is shape.multiplier and current.multiplicand is shape.multiplicand
    elif isinstance(shape, Quotient):
        same = current.dividend is shape.dividend and current.divisor is shape.divisor
    elif isinstance(shape, Power):
        same = current.base is shape.base and current.exponent == shape.exponent
    else:
        same = True

    if not same or unit.unit_type is not unit_type:
        raise InvalidDefinition(
            "already.created",
            f"The symbol '{unit.symbol}' is already registered with a different definition",
        )
    logger.debug("Unit %s is already created, keeping %r", unit.symbol, unit)
    return unit


class UnitNamespace:
    """Attribute access to a registry: ``u.m``, ``u("°C")``, ``"ft" in u``."""

    _reserved_names: ClassVar[set[str]] = set()

    def __init__(self, reg: "UnitsRegistry") -> None:
        self._reg = reg

    def __contains__(self, symbol: str) -> bool:
        return self._reg.has(symbol)

    def define(
        self,
        symbol: str,
        scale: Number,
        reference: Unit,
        unit_type: Optional[UnitType] = None,
    ) -> Unit:
        """Register ``symbol`` as ``scale × reference`` and return it.

        An already registered symbol is returned unchanged.
        """
        if symbol in UnitNamespace._reserved_names:
            raise InvalidDefinition(
                "symbol.reserved",
                f"Cannot define unit '{symbol}': name conflicts with UnitNamespace attribute/method.",
            )

        existing = self._reg.get(symbol)
        if existing is not None:
            logger.debug("Unit %s is already defined, keeping %r", symbol, existing)
            return existing

        unit = Unit(unit_type or reference.unit_type, symbol, symbol, registry=self._reg)
        unit.set_conversion(scale, reference)
        return self._reg.register(unit)

    def __call__(self, key: Union[str, Hashable]) -> Unit:
        unit = self._reg.get(key)
        if unit is None:
            raise InvalidDefinition("unit.not.found", f"Unknown unit: {key}")
        return unit

    def __getattr__(self, name: str) -> Unit:
        unit = self._reg.get(name)
        if unit is None:
            # unknown symbol should look like a missing attribute
            raise AttributeError(name)
        return unit

    def __dir__(self) -> List[str]:
        """List all available unit symbols for autocomplete."""
        return sorted(set(super().__dir__()) | set(self._reg.all().keys()))


UnitNamespace._reserved_names = set(dir(UnitNamespace))


# ---------------------------------------------------------------------------
# Bootstrap a default registry
# ---------------------------------------------------------------------------

def _bootstrap_default_registry() -> UnitsRegistry:
    reg = UnitsRegistry()
    one = reg.one

    # SI fundamental units
    m = reg.create_scalar(UnitType.LENGTH, "metre", "m", "SI length", enumeration=CatalogUnit.METRE)
    kg = reg.create_scalar(UnitType.MASS, "kilogram", "kg", "SI mass", enumeration=CatalogUnit.KILOGRAM)
    s = reg.create_scalar(UnitType.TIME, "second", "s", "SI time", enumeration=CatalogUnit.SECOND)
    a = reg.create_scalar(
        UnitType.ELECTRIC_CURRENT, "ampere", "A", "SI electric current", enumeration=CatalogUnit.AMPERE
    )
    k = reg.create_scalar(UnitType.TEMPERATURE, "kelvin", "K", "SI temperature", enumeration=CatalogUnit.KELVIN)
    reg.create_scalar(
        UnitType.SUBSTANCE_AMOUNT, "mole", "mol", "SI amount of substance", enumeration=CatalogUnit.MOLE
    )
    reg.create_scalar(UnitType.LUMINOSITY, "candela", "cd", "SI luminosity", enumeration=CatalogUnit.CANDELA)

    # angles
    reg.create_scalar(UnitType.PLANE_ANGLE, "radian", "rad", "plane angle", enumeration=CatalogUnit.RADIAN)
    reg.create_scalar(UnitType.SOLID_ANGLE, "steradian", "sr", "solid angle", enumeration=CatalogUnit.STERADIAN)

    # powers and quotients of fundamentals
    m2 = reg.create_power(UnitType.AREA, "square metre", "m²", "area", m, 2, enumeration=CatalogUnit.SQUARE_METRE)
    m3 = reg.create_power(
        UnitType.VOLUME, "cubic metre", "m³", "volume", m, 3, enumeration=CatalogUnit.CUBIC_METRE
    )
    s2 = reg.create_power(
        UnitType.TIME_SQUARED, "square second", "s²", "time squared", s, 2, enumeration=CatalogUnit.SQUARE_SECOND
    )
    reg.create_quotient(
        UnitType.VELOCITY, "metre per second", "m/s", "velocity", m, s, enumeration=CatalogUnit.METRE_PER_SEC
    )
    mps2 = reg.create_quotient(
        UnitType.ACCELERATION,
        "metre per second squared",
        "m/s²",
        "acceleration",
        m,
        s2,
        enumeration=CatalogUnit.METRE_PER_SEC_SQUARED,
    )

    # named derived SI units
    reg.create_quotient(UnitType.FREQUENCY, "hertz", "Hz", "frequency", one, s, enumeration=CatalogUnit.HERTZ)
    n = reg.create_product(UnitType.FORCE, "newton", "N", "force", kg, mps2, enumeration=CatalogUnit.NEWTON)
    reg.create_quotient(UnitType.PRESSURE, "pascal", "Pa", "pressure", n, m2, enumeration=CatalogUnit.PASCAL)
    j = reg.create_product(UnitType.ENERGY, "joule", "J", "energy", n, m, enumeration=CatalogUnit.JOULE)
    w = reg.create_quotient(UnitType.POWER, "watt", "W", "power", j, s, enumeration=CatalogUnit.WATT)
    reg.create_product(UnitType.ELECTRIC_CHARGE, "coulomb", "C", "electric charge", a, s, enumeration=CatalogUnit.COULOMB)
    v = reg.create_quotient(
        UnitType.ELECTROMOTIVE_FORCE, "volt", "V", "electromotive force", w, a, enumeration=CatalogUnit.VOLT
    )
    reg.create_quotient(
        UnitType.ELECTRICAL_RESISTANCE, "ohm", "Ω", "electrical resistance", v, a, enumeration=CatalogUnit.OHM
    )

    # scaled SI units
    g = reg.create_scalar(UnitType.MASS, "gram", "g", "mass", enumeration=CatalogUnit.GRAM)
    g.set_conversion("0.001", kg)
    litre = reg.create_scalar(UnitType.VOLUME, "litre", "L", "volume", enumeration=CatalogUnit.LITRE)
    litre.set_conversion("0.001", m3)

    minute = reg.create_scalar(UnitType.TIME, "minute", "min", "time", enumeration=CatalogUnit.MINUTE)
    minute.set_conversion(60, s)
    hour = reg.create_scalar(UnitType.TIME, "hour", "h", "time", enumeration=CatalogUnit.HOUR)
    hour.set_conversion(60, minute)

    celsius = reg.create_scalar(UnitType.TEMPERATURE, "celsius", "°C", "temperature", enumeration=CatalogUnit.CELSIUS)
    celsius.set_conversion(1, k, "273.15")

    # International customary, bridged onto SI
    ft = reg.create_scalar(UnitType.LENGTH, "foot", "ft", "foot is 12 inches", enumeration=CatalogUnit.FOOT)
    ft.set_bridge_conversion("0.3048", m)
    inch = reg.create_scalar(UnitType.LENGTH, "inch", "in", "length", enumeration=CatalogUnit.INCH)
    inch.set_conversion(divide_amounts(1, 12), ft)
    yd = reg.create_scalar(UnitType.LENGTH, "yard", "yd", "yard is 3 feet", enumeration=CatalogUnit.YARD)
    yd.set_conversion(3, ft)
    mi = reg.create_scalar(UnitType.LENGTH, "mile", "mi", "mile is 5280 feet", enumeration=CatalogUnit.MILE)
    mi.set_conversion(5280, ft)

    reg.create_power(UnitType.AREA, "square foot", "ft²", "area", ft, 2, enumeration=CatalogUnit.SQUARE_FOOT)
    reg.create_quotient(
        UnitType.VELOCITY, "feet per second", "ft/sec", "velocity", ft, s, enumeration=CatalogUnit.FEET_PER_SEC
    )
    ftps2 = reg.create_quotient(
        UnitType.ACCELERATION,
        "feet per second squared",
        "ft/sec²",
        "acceleration",
        ft,
        s2,
        enumeration=CatalogUnit.FEET_PER_SEC_SQUARED,
    )

    lbm = reg.create_scalar(UnitType.MASS, "pound mass", "lbm", "mass", enumeration=CatalogUnit.POUND_MASS)
    lbm.set_bridge_conversion("0.45359237", kg)

    # standard gravity in ft/sec²
    lbf = reg.create_product(
        UnitType.FORCE, "pound force", "lbf", "force", lbm, ftps2, enumeration=CatalogUnit.POUND_FORCE
    )
    lbf.set_conversion("32.174")

    rankine = reg.create_scalar(UnitType.TEMPERATURE, "rankine", "°R", "temperature", enumeration=CatalogUnit.RANKINE)
    rankine.set_bridge_conversion(divide_amounts(5, 9), k)
    fahrenheit = reg.create_scalar(
        UnitType.TEMPERATURE, "fahrenheit", "°F", "temperature", enumeration=CatalogUnit.FAHRENHEIT
    )
    fahrenheit.set_conversion(1, rankine, "459.67")

    return reg


# Public, shared default registry
DEFAULT_REGISTRY: UnitsRegistry = _bootstrap_default_registry()


__all__ = [
    "UnitsRegistry",
    "UnitNamespace",
    "DEFAULT_REGISTRY",
]

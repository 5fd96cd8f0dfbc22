from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Hashable, Optional, Union

from caliper.core.conversion import Conversion
from caliper.core.errors import InvalidDefinition, UnitError, UnsupportedOffset
from caliper.core.unit_types import UnitType
from caliper.core.utils import MULT, ONE, ZERO, Number, create_amount

if TYPE_CHECKING:  # pragma: no cover - imported only for type checking
    from caliper.core.quantity import Quantity
    from caliper.units.registry import UnitsRegistry


# --- Shapes ---------------------------------------------------------------
# A unit is exactly one of these. The reducer and resolver dispatch on them.

@dataclass(frozen=True, slots=True)
class Scalar:
    """A named unit with no algebraic structure of its own (metre, foot, °C)."""


@dataclass(frozen=True, slots=True, eq=False)
class Product:
    multiplier: "Unit"
    multiplicand: "Unit"


@dataclass(frozen=True, slots=True, eq=False)
class Quotient:
    dividend: "Unit"
    divisor: "Unit"


@dataclass(frozen=True, slots=True, eq=False)
class Power:
    base: "Unit"
    exponent: int


Shape = Union[Scalar, Product, Quotient, Power]

SCALAR = Scalar()


class Unit:
    """
    A unit of measure.

    Every unit owns a ``Conversion`` to an abscissa unit (itself by default)
    and may own a one-way ``bridge`` to the equivalent unit of another
    measurement system. Units are normally created through the factories of
    ``caliper.units.registry.UnitsRegistry`` and are logically immutable
    afterwards, except for their conversion and bridge.

    Attributes
    ----------
    unit_type : UnitType
        Dimensional classification, e.g. ``UnitType.LENGTH``.
    name, symbol, description : str
        ``symbol`` is the unique registry key and must be non-empty.
    shape : Scalar | Product | Quotient | Power
        Algebraic structure of the unit.
    enumeration : Hashable, optional
        Catalog tag (see ``caliper.units.enumerations.CatalogUnit``).
    unified_symbol : str, optional
        Interoperability symbol (e.g. UCUM).
    registry : UnitsRegistry, optional
        Owning registry, used for unity and structural de-duplication.
    """

    __slots__ = (
        "unit_type",
        "name",
        "symbol",
        "description",
        "shape",
        "enumeration",
        "unified_symbol",
        "registry",
        "_conversion",
        "_bridge",
        "_base_symbol",
    )

    def __init__(
        self,
        unit_type: UnitType,
        name: Optional[str],
        symbol: str,
        description: Optional[str] = None,
        shape: Shape = SCALAR,
        *,
        enumeration: Optional[Hashable] = None,
        unified_symbol: Optional[str] = None,
        registry: Optional["UnitsRegistry"] = None,
    ) -> None:
        if not symbol:
            raise InvalidDefinition("symbol.cannot.be.null", "The unit symbol cannot be null or empty")
        if not isinstance(unit_type, UnitType):
            raise InvalidDefinition(
                "unit.type.cannot.be.null", f"A unit type is required for unit '{symbol}'"
            )
        _check_shape(symbol, shape)

        self.unit_type = unit_type
        self.name = name
        self.symbol = symbol
        self.description = description
        self.shape = shape
        self.enumeration = enumeration
        self.unified_symbol = unified_symbol
        self.registry = registry

        # a unit can always be converted to itself
        self._conversion = Conversion(self)
        self._bridge: Optional[Conversion] = None
        self._base_symbol: Optional[str] = None

    # ------------------------------------------------------------------
    # Conversion & bridge
    # ------------------------------------------------------------------
    @property
    def conversion(self) -> Conversion:
        return self._conversion

    @property
    def bridge(self) -> Optional[Conversion]:
        return self._bridge

    @property
    def abscissa_unit(self) -> "Unit":
        return self._conversion.abscissa_unit

    @property
    def scaling_factor(self) -> Decimal:
        return self._conversion.scaling_factor

    @property
    def offset(self) -> Decimal:
        return self._conversion.offset

    @property
    def is_scalar(self) -> bool:
        return isinstance(self.shape, Scalar)

    @property
    def is_terminal(self) -> bool:
        """A fundamental unit: a scalar that is its own abscissa."""
        return self.is_scalar and self.abscissa_unit is self

    @property
    def is_unity(self) -> bool:
        return self.unit_type is UnitType.UNITY and self.is_terminal

    def set_conversion(
        self,
        scaling_factor: Number = ONE,
        abscissa_unit: Optional["Unit"] = None,
        offset: Number = ZERO,
    ) -> None:
        """Define this unit as ``scaling_factor × abscissa_unit + offset``.

        With ``abscissa_unit`` omitted (or ``self``) the factor multiplies the
        unit's own product, quotient or power definition, e.g. pound force as
        32.174 lbm·ft/s². Scalars cannot scale themselves.
        """
        target = self if abscissa_unit is None else abscissa_unit
        factor = create_amount(scaling_factor)
        shift = create_amount(offset)

        if shift != ZERO and not self.is_scalar:
            raise UnsupportedOffset(self.symbol)
        if target is self and self.is_scalar and (factor != ONE or shift != ZERO):
            raise InvalidDefinition(
                "conversion.not.identity",
                f"A scalar unit's conversion to itself must be the identity: {self.symbol}",
            )

        previous = (self._conversion, self._base_symbol)
        self._conversion = Conversion(target, factor, shift)
        self.clear_base_symbol()

        # the new definition must reduce, otherwise the old one is restored
        try:
            _ = self.base_symbol
            if self.registry is not None:
                self.registry.reindex(self)
        except UnitError:
            self._conversion, self._base_symbol = previous
            raise

    def set_bridge_conversion(
        self,
        scaling_factor: Number,
        abscissa_unit: "Unit",
        offset: Number = ZERO,
    ) -> None:
        """Set the one-way conversion to a unit in another measurement system."""
        if abscissa_unit is None:
            raise InvalidDefinition(
                "unit.cannot.be.null", f"The bridge target of '{self.symbol}' cannot be null"
            )
        self._bridge = Conversion(abscissa_unit, create_amount(scaling_factor), create_amount(offset))

    def clear_bridge(self) -> None:
        self._bridge = None

    # ------------------------------------------------------------------
    # Base symbol
    # ------------------------------------------------------------------
    @property
    def base_symbol(self) -> str:
        """Canonical symbol in fundamental units, e.g. '(kg·m)/s²' for newton."""
        cached = self._base_symbol
        if cached is None:
            from caliper.core.reducer import reduce_unit

            cached = reduce_unit(self).build_string()
            self._base_symbol = cached
        return cached

    def clear_base_symbol(self) -> None:
        self._base_symbol = None

    def get_base_uom(self) -> "Unit":
        """The registered unit whose base symbol matches this unit's."""
        registry = registry_of(self)
        base = registry.get_base(self.base_symbol)
        if base is None:
            raise InvalidDefinition(
                "base.uom.not.found", f"No unit is registered for base symbol '{self.base_symbol}'"
            )
        return base

    # ------------------------------------------------------------------
    # Unit algebra
    # ------------------------------------------------------------------
    def multiply(self, multiplicand: "Unit") -> "Unit":
        from caliper.core.resolver import combine

        return combine(self, multiplicand, invert=False)

    def divide(self, divisor: "Unit") -> "Unit":
        from caliper.core.resolver import combine

        return combine(self, divisor, invert=True)

    def invert(self) -> "Unit":
        if isinstance(self.shape, Quotient):
            return self.shape.divisor.divide(self.shape.dividend)
        registry = registry_of(self)
        return registry.one.divide(self)

    def power(self, exponent: int) -> "Unit":
        from caliper.core.resolver import raise_to_power

        return raise_to_power(self, exponent)

    def get_conversion_factor(self, target: "Unit") -> Decimal:
        """Factor ``k`` such that ``amount_in_target = k × amount_in_self``."""
        from caliper.core.resolver import conversion_factor

        return conversion_factor(self, target)

    # operators
    def __mul__(self, other: "Unit") -> "Unit":
        if not isinstance(other, Unit):
            return NotImplemented
        return self.multiply(other)

    def __rmul__(self, value: Number) -> "Quantity":
        from caliper.core.quantity import Quantity

        return Quantity(value, self)

    def __truediv__(self, other: "Unit") -> "Unit":
        if not isinstance(other, Unit):
            return NotImplemented
        return self.divide(other)

    def __rtruediv__(self, n: Any) -> "Unit":
        if n != 1:
            raise TypeError(
                f"Invalid operation: cannot divide {n} by a Unit ({self.symbol}). "
                "Only 1/unit (reciprocal) is supported."
            )
        return self.invert()

    def __pow__(self, n: int) -> "Unit":
        return self.power(n)

    # ------------------------------------------------------------------
    # Identity
    # ------------------------------------------------------------------
    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, Unit):
            return NotImplemented

        # different catalog entries are never equal
        if (
            self.enumeration is not None
            and other.enumeration is not None
            and self.enumeration != other.enumeration
        ):
            return False

        return (
            self.abscissa_unit.symbol == other.abscissa_unit.symbol
            and self.scaling_factor == other.scaling_factor
            and self.offset == other.offset
        )

    def __hash__(self) -> int:
        """Hash of the abscissa symbol, consistent with ``__eq__``.

        Equality follows the conversion, so the hash changes with
        ``set_conversion``. Re-key sets and dicts holding a unit after
        redefining it.
        """
        return hash(self.abscissa_unit.symbol)

    def __repr__(self) -> str:
        return f"Unit({self.symbol!r}, {self.unit_type.name})"

    def __str__(self) -> str:
        parts = []
        if self.enumeration is not None:
            parts.append(f"enumeration: {getattr(self.enumeration, 'name', self.enumeration)}")
        parts.append(f"symbol: {self.symbol}")

        conversion = ""
        if self.scaling_factor != ONE:
            conversion = f"{self.scaling_factor}{MULT}"
        conversion += self.abscissa_unit.symbol
        if self.offset != ZERO:
            conversion += f" + {self.offset}"
        parts.append(f"conversion: {conversion}")

        # display only; an unreducible unit still prints
        try:
            parts.append(f"base: {self.base_symbol}")
        except UnitError:
            parts.append("base: ?")
        return ", ".join(parts)


def _check_shape(symbol: str, shape: Shape) -> None:
    if isinstance(shape, Scalar):
        return
    if isinstance(shape, Product):
        if shape.multiplier is None:
            raise InvalidDefinition("multiplier.cannot.be.null", f"The multiplier of '{symbol}' cannot be null")
        if shape.multiplicand is None:
            raise InvalidDefinition(
                "multiplicand.cannot.be.null", f"The multiplicand of '{symbol}' cannot be null"
            )
        return
    if isinstance(shape, Quotient):
        if shape.dividend is None:
            raise InvalidDefinition("dividend.cannot.be.null", f"The dividend of '{symbol}' cannot be null")
        if shape.divisor is None:
            raise InvalidDefinition("divisor.cannot.be.null", f"The divisor of '{symbol}' cannot be null")
        return
    if isinstance(shape, Power):
        if shape.base is None:
            raise InvalidDefinition("base.cannot.be.null", f"The base of '{symbol}' cannot be null")
        if isinstance(shape.exponent, bool) or not isinstance(shape.exponent, int):
            raise InvalidDefinition(
                "exponent.not.integer", f"The exponent of '{symbol}' must be an integer"
            )
        return
    raise InvalidDefinition("unsupported.shape", f"Unsupported unit shape for '{symbol}': {shape!r}")


def registry_of(unit: Unit) -> "UnitsRegistry":
    """The registry owning ``unit``, or the default registry for an orphan."""
    if unit.registry is not None:
        return unit.registry
    # Import here to avoid circular imports.
    from caliper.units.registry import DEFAULT_REGISTRY

    return DEFAULT_REGISTRY


__all__ = ["Unit", "Shape", "Scalar", "Product", "Quotient", "Power", "SCALAR", "registry_of"]

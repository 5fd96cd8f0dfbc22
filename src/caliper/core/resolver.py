"""
caliper.core.resolver
=====================

Conversion-factor resolution and unit composition.

- ``traverse_path`` walks a scalar's abscissa chain to its fundamental unit.
- ``bridge_factor`` crosses between measurement systems using one-way bridges.
- ``scalar_factor`` converts between two scalars (same chain or bridged).
- ``conversion_factor`` handles arbitrary products, quotients and powers by
  reducing both units and matching their fundamental terms.
- ``combine`` and ``raise_to_power`` build new units from existing ones and
  de-duplicate them against the registry by base symbol.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING, Optional

from caliper.core.errors import (
    DimensionMismatch,
    InvalidDefinition,
    NoConversionPath,
    RecursionLimitExceeded,
    UnsupportedOffset,
)
from caliper.core.reducer import Reducer, reduce_unit
from caliper.core.unit import Power, Product, Quotient, Unit, registry_of
from caliper.core.unit_types import UnitType
from caliper.core.utils import (
    DIV,
    MULT,
    ONE,
    ZERO,
    decimal_divide,
    decimal_multiply,
    decimal_power,
    power_suffix,
)

if TYPE_CHECKING:  # pragma: no cover - imported only for type checking
    from caliper.units.registry import UnitsRegistry

logger = logging.getLogger(__name__)

MAX_PATH_HOPS = 10


@dataclass(frozen=True, slots=True)
class PathParameters:
    """Fundamental unit at the end of a conversion path and the factor to reach it."""

    unit: Unit
    factor: Decimal


def traverse_path(unit: Unit) -> PathParameters:
    path_unit = unit
    path_factor = ONE
    hops = 0

    while True:
        hops += 1
        if hops > MAX_PATH_HOPS:
            logger.warning("Conversion path of %s exceeded %d hops", unit.symbol, MAX_PATH_HOPS)
            raise RecursionLimitExceeded(unit.symbol, MAX_PATH_HOPS)

        if path_unit.scaling_factor != ONE:
            path_factor = decimal_multiply(path_factor, path_unit.scaling_factor)

        abscissa = path_unit.abscissa_unit
        if abscissa is path_unit and path_unit.is_scalar:
            break

        path_unit = abscissa
        if not path_unit.is_scalar:
            raise DimensionMismatch(
                "must.be.scalar", f"The unit {path_unit.symbol} must be a scalar on the path of {unit.symbol}"
            )

    return PathParameters(path_unit, path_factor)


def _same_fundamental(a: Unit, b: Unit) -> bool:
    return a is b or (a.symbol == b.symbol and a.enumeration == b.enumeration)


def _bridge_reaches(source: Unit, target: Unit) -> Optional[Decimal]:
    """Factor of ``source``'s bridge when it lands (via its abscissa chain) on ``target``."""
    bridge = source.bridge
    if bridge is None:
        return None
    landing = traverse_path(bridge.abscissa_unit)
    if not _same_fundamental(landing.unit, target):
        return None
    return decimal_multiply(bridge.scaling_factor, landing.factor)


def bridge_factor(from_base: Unit, to_base: Unit) -> Optional[Decimal]:
    """Factor converting ``from_base`` to ``to_base`` across systems, or ``None``."""
    # common units have a factor of 1
    if _same_fundamental(from_base, to_base):
        return ONE

    factor = _bridge_reaches(from_base, to_base)
    if factor is not None:
        return factor

    # bridges are one-way; go back along the other side's bridge
    reverse = _bridge_reaches(to_base, from_base)
    if reverse is not None:
        return decimal_divide(ONE, reverse)
    return None


def scalar_factor(from_unit: Unit, to_unit: Unit) -> Decimal:
    """Factor between two scalar units through their fundamental units."""
    if from_unit is to_unit:
        return ONE

    # direct neighbours need no walk
    if from_unit.abscissa_unit is to_unit:
        return from_unit.scaling_factor
    if to_unit.abscissa_unit is from_unit:
        return decimal_divide(ONE, to_unit.scaling_factor)

    source = traverse_path(from_unit)
    target = traverse_path(to_unit)

    path_factor = source.factor
    if not _same_fundamental(source.unit, target.unit):
        bridge = bridge_factor(source.unit, target.unit)
        if bridge is None:
            raise NoConversionPath(from_unit.symbol, to_unit.symbol)
        path_factor = decimal_multiply(path_factor, bridge)

    return decimal_divide(path_factor, target.factor)


def _check_types(from_unit: Unit, to_unit: Unit) -> None:
    from_type = from_unit.unit_type
    to_type = to_unit.unit_type
    if from_type.is_wildcard or to_type.is_wildcard or from_type is to_type:
        return
    raise DimensionMismatch(
        "must.be.same.as",
        f"{from_unit.symbol} of type {from_type.name} must be the same as "
        f"{to_unit.symbol} of type {to_type.name}",
    )


def conversion_factor(from_unit: Unit, to_unit: Unit) -> Decimal:
    """Factor ``k`` with ``amount_in_to = k × amount_in_from`` (offsets excluded)."""
    if to_unit is None:
        raise InvalidDefinition("unit.cannot.be.null", "The target unit cannot be null")
    if from_unit is to_unit or from_unit == to_unit:
        return ONE

    _check_types(from_unit, to_unit)

    source = reduce_unit(from_unit)
    target = reduce_unit(to_unit)

    if len(source.terms) != len(target.terms):
        raise DimensionMismatch(
            "maps.not.equal",
            f"The reduced units of {from_unit.symbol} ({len(source.terms)} terms) and "
            f"{to_unit.symbol} ({len(target.terms)} terms) do not have the same number of terms",
        )

    target_terms = target.sorted_terms()
    factor = ONE

    for from_term, from_power in source.sorted_terms():
        # first target term of the same type is the partner
        match = next(
            ((u, p) for u, p in target_terms if u.unit_type is from_term.unit_type),
            None,
        )
        if match is None:
            raise DimensionMismatch(
                "no.matching.term",
                f"No term of type {from_term.unit_type.name} in {to_unit.symbol} "
                f"to match {from_term.symbol} in {from_unit.symbol}",
            )
        to_term, to_power = match

        if from_power != to_power:
            raise DimensionMismatch(
                "powers.not.equal",
                f"The power of {from_term.symbol} ({from_power}) is not equal to "
                f"the power of {to_term.symbol} ({to_power})",
            )
        for term in (from_term, to_term):
            if not term.is_scalar:
                raise DimensionMismatch("must.be.scalar", f"The unit {term.symbol} must be a scalar")

        term_factor = scalar_factor(from_term, to_term)
        if term_factor != ONE:
            if from_power != 1:
                term_factor = decimal_power(term_factor, from_power)
            factor = decimal_multiply(factor, term_factor)

    scaling = decimal_divide(source.scaling_factor, target.scaling_factor)
    return decimal_multiply(factor, scaling)


# ---------------------------------------------------------------------------
# Composition
# ---------------------------------------------------------------------------

def _check_offset(unit: Unit) -> None:
    if unit.offset != ZERO:
        raise UnsupportedOffset(unit.symbol)


def _owning_registry(*units: Unit) -> Optional["UnitsRegistry"]:
    for unit in units:
        if unit.registry is not None:
            return unit.registry
    return None


def _link_to_registered(unit: Unit, reduced: Reducer) -> None:
    """Point ``unit`` at the registered unit with the same base symbol, if any."""
    if unit.registry is None:
        return

    symbol = reduced.build_string()
    existing = unit.registry.get_base(symbol)
    if existing is None or existing is unit:
        return

    existing_factor = reduce_unit(existing).scaling_factor
    factor = decimal_divide(reduced.scaling_factor, existing_factor)
    unit.set_conversion(factor, existing)
    if unit.unit_type is UnitType.UNCLASSIFIED:
        unit.unit_type = existing.unit_type
    logger.debug("Linked %s to registered unit %s (factor %s)", unit.symbol, existing.symbol, factor)


def combine(left: Unit, right: Unit, invert: bool) -> Unit:
    """``left × right`` (or ``left / right`` when ``invert``) as a new unit."""
    if left is None or right is None:
        raise InvalidDefinition("unit.cannot.be.null", "The unit cannot be null")

    if right.is_unity:
        return left

    _check_offset(left)
    _check_offset(right)

    if invert:
        symbol = f"{left.symbol}{DIV}{right.symbol}"
        shape = Quotient(left, right)
    else:
        if left == right:
            symbol = f"{left.symbol}{power_suffix(2)}"
        else:
            symbol = f"{left.symbol}{MULT}{right.symbol}"
        shape = Product(left, right)

    unit = Unit(
        UnitType.UNCLASSIFIED,
        None,
        symbol,
        None,
        shape,
        registry=_owning_registry(left, right),
    )

    reduced = reduce_unit(left).merged(reduce_unit(right), invert=invert)
    _link_to_registered(unit, reduced)
    return unit


def raise_to_power(base: Unit, exponent: int) -> Unit:
    """``base ** exponent`` as a new, unregistered power unit."""
    if base is None:
        raise InvalidDefinition("base.cannot.be.null", "The base unit cannot be null")
    if isinstance(exponent, bool) or not isinstance(exponent, int):
        raise InvalidDefinition("exponent.not.integer", f"The exponent must be an integer, got {exponent!r}")

    if exponent == 1:
        return base
    if exponent == 0:
        return registry_of(base).one

    _check_offset(base)

    suffix = power_suffix(exponent) if exponent > 0 else f"^{exponent}"
    unit = Unit(
        UnitType.UNCLASSIFIED,
        None,
        f"{base.symbol}{suffix}",
        None,
        Power(base, exponent),
        registry=base.registry,
    )
    _link_to_registered(unit, reduce_unit(unit))
    return unit


__all__ = [
    "MAX_PATH_HOPS",
    "PathParameters",
    "traverse_path",
    "bridge_factor",
    "scalar_factor",
    "conversion_factor",
    "combine",
    "raise_to_power",
]

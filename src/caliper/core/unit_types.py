# caliper.core.unit_types

from __future__ import annotations

from enum import Enum, auto


class UnitType(Enum):
    """Dimensional classification of a unit (e.g. LENGTH, FORCE)."""

    # dimension-less "1"
    UNITY = auto()

    # SI fundamental
    LENGTH = auto()
    MASS = auto()
    TIME = auto()
    ELECTRIC_CURRENT = auto()
    TEMPERATURE = auto()
    SUBSTANCE_AMOUNT = auto()
    LUMINOSITY = auto()

    # derived
    AREA = auto()
    VOLUME = auto()
    DENSITY = auto()
    VELOCITY = auto()
    VOLUMETRIC_FLOW = auto()
    MASS_FLOW = auto()
    FREQUENCY = auto()
    ACCELERATION = auto()
    FORCE = auto()
    PRESSURE = auto()
    ENERGY = auto()
    POWER = auto()
    ELECTRIC_CHARGE = auto()
    ELECTROMOTIVE_FORCE = auto()
    ELECTRICAL_RESISTANCE = auto()
    CAPACITANCE = auto()
    MAGNETIC_FLUX = auto()
    MAGNETIC_FLUX_DENSITY = auto()
    INDUCTANCE = auto()
    ELECTRICAL_CONDUCTANCE = auto()
    LUMINOUS_FLUX = auto()
    ILLUMINANCE = auto()
    RADIATION_DOSE = auto()
    CATALYTIC_ACTIVITY = auto()
    DYNAMIC_VISCOSITY = auto()
    KINEMATIC_VISCOSITY = auto()
    RECIPROCAL_LENGTH = auto()
    TIME_SQUARED = auto()

    # angle
    PLANE_ANGLE = auto()
    SOLID_ANGLE = auto()

    # intensity (power)
    INTENSITY = auto()

    # other custom
    CUSTOM = auto()

    # results of unit algebra that have not been classified
    UNCLASSIFIED = auto()

    @property
    def is_wildcard(self) -> bool:
        """True for types that are compatible with any other type."""
        return self in (UnitType.UNITY, UnitType.UNCLASSIFIED)


__all__ = ["UnitType"]

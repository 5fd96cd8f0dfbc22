"""
Caliper: units of measure, unit algebra and exact decimal conversions.

Caliper defines scalar, product, quotient and power units, reduces them to
canonical fundamental terms, and converts quantities between compatible units,
including across measurement systems joined by one-way bridge conversions.
The registry of predefined units is imported lazily to avoid import-time side
effects and circular imports.
"""

from importlib import metadata as _metadata


__license__ = "MIT"

# Try to read the installed package version first; fall back to pyproject.toml for local dev.
try:
    __version__ = _metadata.version("caliper")
except _metadata.PackageNotFoundError:
    import tomllib
    from pathlib import Path

    with open(Path(__file__).resolve().parents[2] / "pyproject.toml", "rb") as f:
        __version__ = tomllib.load(f)["project"]["version"]

from caliper.core.errors import (
    DimensionMismatch,
    InvalidDefinition,
    NoConversionPath,
    RecursionLimitExceeded,
    UnitError,
    UnsupportedOffset,
)
from caliper.core.quantity import NamedQuantity, Quantity
from caliper.core.unit import Unit
from caliper.core.unit_types import UnitType

# Public names exposed by the package. Keep this minimal and stable.
__all__ = [
    "__version__",
    "__license__",
    "Quantity",
    "NamedQuantity",
    "Unit",
    "UnitType",
    "UnitError",
    "InvalidDefinition",
    "UnsupportedOffset",
    "DimensionMismatch",
    "NoConversionPath",
    "RecursionLimitExceeded",
]

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:  # pragma: no cover - typing aid only
    from caliper.units.registry import UnitsRegistry
# Lazy access helpers -------------------------------------------------------

def _get_default_registry() -> "UnitsRegistry":
    # Import here to avoid import-time side-effects / circular imports.
    from caliper.units.registry import DEFAULT_REGISTRY  # local import
    return DEFAULT_REGISTRY

def __getattr__(name: str) -> Any:
    """
    Lazy attribute access. Accessing 'u' will construct a namespace from the
    package's default registry on first use.
    """
    if name == "u":
        return _get_default_registry().as_namespace()
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

def __dir__() -> list[str]:
    # Improve discoverability in REPL / autocomplete.
    return sorted(list(globals().keys()) + ["u"])

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
    Lazy attribute access. ``u`` is a namespace over the default registry;
    ``one`` is its unity unit.
    """
    if name == "u":
        return _get_default_registry().as_namespace()
    if name == "one":
        return _get_default_registry().one
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

def __dir__() -> list[str]:
    # Improve discoverability in REPL / autocomplete.
    return sorted(list(globals().keys()) + ["u", "one"])

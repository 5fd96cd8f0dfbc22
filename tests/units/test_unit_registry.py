# pytest tests for caliper.units.registry
#
# These tests exercise the three indices, first-writer-wins registration,
# the factories, prefixes, re-indexing after a conversion change and
# thread-safety. They use an isolated registry instance for anything that
# mutates state.

import threading
from decimal import Decimal

import pytest

import caliper.units.registry as regmod
from caliper.core.errors import InvalidDefinition
from caliper.core.quantity import Quantity
from caliper.core.reducer import reduce_unit
from caliper.core.unit import Quotient, Unit
from caliper.core.unit_types import UnitType
from caliper.units.enumerations import CatalogUnit
from caliper.units.prefixes import Prefix
from caliper.units.registry import UnitsRegistry


# ---------------------------------------------------------------------------
# Bootstrap
# ---------------------------------------------------------------------------

@pytest.mark.parametrize(
    "symbol",
    ["1", "m", "kg", "s", "A", "K", "mol", "cd", "rad", "sr", "N", "J", "W", "Pa",
     "C", "V", "Ω", "Hz", "g", "L", "min", "h", "°C", "ft", "in", "yd", "mi",
     "lbm", "lbf", "°R", "°F"],
)
def test_default_registry_has_catalog(ureg, symbol):
    assert symbol in ureg
    assert ureg.get(symbol).registry is ureg


def test_every_registry_owns_unity(bare):
    one = bare.one
    assert one.symbol == "1"
    assert one.unit_type is UnitType.UNITY
    assert one.is_unity
    assert bare.get("1") is one
    assert bare.get(CatalogUnit.ONE) is one
    assert bare.get_base("1") is one


def test_registries_are_isolated(reg, ureg):
    reg.create_scalar(UnitType.LENGTH, "furlong", "fur")
    assert "fur" in reg
    assert "fur" not in ureg
    assert reg.get("m") is not ureg.get("m")


# ---------------------------------------------------------------------------
# Indices
# ---------------------------------------------------------------------------

def test_lookup_by_enumeration(reg):
    assert reg.get(CatalogUnit.FOOT) is reg.get("ft")
    assert reg.get(CatalogUnit.NEWTON) is reg.get("N")


def test_lookup_by_base_symbol(reg):
    assert reg.get_base("(kg·m)/s²") is reg.get("N")
    assert reg.get_base("1/s") is reg.get("Hz")
    # first registered wins
    assert reg.get_base("ft") is reg.get("ft")
    assert reg.get_base("K") is reg.get("K")


def test_missing_lookups_return_none(reg):
    assert reg.get("nope") is None
    assert reg.get_base("nope") is None
    assert not reg.has("nope")


def test_all_is_sorted_snapshot(reg):
    snapshot = reg.all()
    assert list(snapshot) == sorted(snapshot)
    snapshot.clear()
    assert reg.get("m") is not None


# ---------------------------------------------------------------------------
# Registration
# ---------------------------------------------------------------------------

def test_first_registration_wins(reg):
    first = reg.create_scalar(UnitType.LENGTH, "first", "xyz")
    second = reg.create_scalar(UnitType.LENGTH, "second", "xyz")
    third = reg.register(Unit(UnitType.TIME, "third", "xyz"))

    assert second is first
    assert third is first
    assert reg.get("xyz").name == "first"


def test_symbol_reused_for_other_type(reg):
    reg.create_scalar(UnitType.LENGTH, "first", "xyz")
    with pytest.raises(InvalidDefinition) as exc:
        reg.create_scalar(UnitType.MASS, "second", "xyz")
    assert exc.value.key == "already.created"
    assert reg.get("xyz").unit_type is UnitType.LENGTH


def test_symbol_reused_with_other_operands(reg):
    m, s, ft = reg.get("m"), reg.get("s"), reg.get("ft")
    speed = reg.create_quotient(UnitType.VELOCITY, "speed", "spd", None, m, s)
    assert reg.create_quotient(UnitType.VELOCITY, "speed", "spd", None, m, s) is speed

    with pytest.raises(InvalidDefinition) as exc:
        reg.create_quotient(UnitType.VELOCITY, "speed", "spd", None, ft, s)
    assert exc.value.key == "already.created"
    with pytest.raises(InvalidDefinition):
        reg.create_power(UnitType.AREA, "square metre", "m²", None, m, 3)


def test_symbol_reused_for_other_shape(reg):
    reg.create_scalar(UnitType.LENGTH, "first", "xyz")
    with pytest.raises(InvalidDefinition) as exc:
        reg.create_quotient(UnitType.VELOCITY, "bad", "xyz", None, reg.get("m"), reg.get("s"))
    assert exc.value.key == "already.created"


def test_enumeration_registered_once(reg):
    with pytest.raises(InvalidDefinition):
        reg.register(Unit(UnitType.LENGTH, "other metre", "m2", enumeration=CatalogUnit.METRE))
    assert reg.get("m2") is None


def test_register_adopts_orphan_unit(bare):
    unit = Unit(UnitType.LENGTH, "metre", "m")
    assert unit.registry is None
    assert bare.register(unit) is unit
    assert unit.registry is bare


def test_register_none(bare):
    with pytest.raises(InvalidDefinition):
        bare.register(None)


def test_unregister_removes_from_every_index(reg):
    ft = reg.get("ft")
    reg.unregister(ft)

    assert reg.get("ft") is None
    assert reg.get(CatalogUnit.FOOT) is None
    assert reg.get_base("ft") is None
    # other units are untouched
    assert reg.get("in") is not None


def test_unregister_unknown_is_harmless(reg):
    stranger = Unit(UnitType.LENGTH, "metre", "m")
    reg.unregister(stranger)
    reg.unregister(None)
    assert reg.get("m") is not None


def test_clear(reg):
    one = reg.one
    reg.clear()
    assert reg.all() == {}
    assert reg.get("m") is None
    assert reg.get(CatalogUnit.METRE) is None
    assert reg.get_base("m") is None
    assert reg.one is one


def test_set_conversion_reindexes_base_symbol(reg):
    furlong = reg.create_scalar(UnitType.LENGTH, "furlong", "fur")
    assert reg.get_base("fur") is furlong

    furlong.set_conversion(660, reg.get("ft"))
    assert reg.get_base("fur") is None
    assert reg.get_base("ft") is reg.get("ft")
    assert furlong.base_symbol == "ft"


def test_composed_unit_links_to_registered(reg):
    area = reg.get("ft") * reg.get("ft")
    assert area.abscissa_unit is reg.get("ft²")
    assert area.unit_type is UnitType.AREA
    # composed units are not registered implicitly
    assert area is not reg.get("ft²")


def test_composed_unit_factor_against_representative(reg):
    inch_squared = reg.get("in") * reg.get("in")
    assert inch_squared.abscissa_unit is reg.get("ft²")
    assert float(inch_squared.scaling_factor) == pytest.approx(1 / 144)


# ---------------------------------------------------------------------------
# Prefixes
# ---------------------------------------------------------------------------

def test_create_prefixed(reg):
    km = reg.create_prefixed(Prefix.KILO, reg.get("m"))
    assert km.symbol == "km"
    assert km.name == "kilometre"
    assert km.unit_type is UnitType.LENGTH
    assert km.abscissa_unit is reg.get("m")
    assert km.scaling_factor == Decimal(1000)
    assert reg.get("km") is km
    assert reg.create_prefixed(Prefix.KILO, reg.get("m")) is km

    assert Quantity(1, km).convert(reg.get("m")).amount == 1000


def test_micro_prefix_symbol(reg):
    um = reg.create_prefixed(Prefix.MICRO, reg.get("m"))
    assert um.symbol == "µm"
    assert um.base_symbol == "m"


def test_create_prefixed_requires_operands(reg):
    with pytest.raises(InvalidDefinition):
        reg.create_prefixed(None, reg.get("m"))


# ---------------------------------------------------------------------------
# Thread-safety
# ---------------------------------------------------------------------------

def test_thread_safe_same_symbol_creation(reg):
    created = []
    errs = []

    def worker(i):
        try:
            created.append(reg.create_scalar(UnitType.LENGTH, f"race{i}", "race"))
        except Exception as e:
            errs.append(e)

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(16)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert not errs
    # All returned the exact same Unit object
    first = created[0]
    assert all(u is first for u in created)
    assert reg.get("race") is first


def test_thread_safe_concurrent_registration(bare):
    errs = []

    def worker(i):
        try:
            unit = bare.create_scalar(UnitType.LENGTH, f"unit {i}", f"u{i}")
            assert bare.get(f"u{i}") is unit
            assert bare.get_base(f"u{i}") is unit
        except Exception as e:
            errs.append(e)

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(32)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert not errs
    assert all(f"u{i}" in bare for i in range(32))
    assert len(bare.all()) == 33


def test_unregister_while_reading(reg):
    ft = reg.get("ft")
    done = threading.Event()
    errs = []

    def writer():
        try:
            for _ in range(200):
                reg.unregister(ft)
                reg.register(ft)
        except Exception as e:
            errs.append(e)
        finally:
            done.set()

    def reader():
        try:
            while not done.is_set():
                found = reg.get("ft")
                assert found is None or found is ft
                base = reg.get_base("ft")
                assert base is None or base is ft
                tagged = reg.get(CatalogUnit.FOOT)
                assert tagged is None or tagged is ft
                assert reg.get("m") is not None
        except Exception as e:
            errs.append(e)

    threads = [threading.Thread(target=writer)] + [threading.Thread(target=reader) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert not errs
    assert reg.get("ft") is ft
    assert reg.get_base("ft") is ft
    assert reg.get(CatalogUnit.FOOT) is ft


def test_clear_while_reading(bare):
    done = threading.Event()
    errs = []

    def writer():
        try:
            for i in range(100):
                bare.create_scalar(UnitType.LENGTH, f"unit {i}", f"c{i}")
                bare.clear()
        except Exception as e:
            errs.append(e)
        finally:
            done.set()

    def reader():
        try:
            while not done.is_set():
                for i in range(100):
                    found = bare.get(f"c{i}")
                    assert found is None or found.symbol == f"c{i}"
                    bare.get_base(f"c{i}")
                list(bare.all().items())
        except Exception as e:
            errs.append(e)

    threads = [threading.Thread(target=writer)] + [threading.Thread(target=reader) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert not errs
    assert bare.all() == {}


def test_base_symbol_concurrent_first_access(bare):
    m = bare.create_scalar(UnitType.LENGTH, "metre", "m")
    s = bare.create_scalar(UnitType.TIME, "second", "s")
    kg = bare.create_scalar(UnitType.MASS, "kilogram", "kg")
    composed = Unit(UnitType.UNCLASSIFIED, None, "kg·m/s", None, Quotient(kg * m, s))
    expected = reduce_unit(composed).build_string()

    barrier = threading.Barrier(16)
    seen = []
    errs = []

    def worker():
        try:
            barrier.wait()
            seen.append(composed.base_symbol)
        except Exception as e:
            errs.append(e)

    threads = [threading.Thread(target=worker) for _ in range(16)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert not errs
    assert len(seen) == 16
    assert all(symbol == expected for symbol in seen)
    assert composed.base_symbol == expected


# ---------------------------------------------------------------------------
# Default registry
# ---------------------------------------------------------------------------

def test_bootstrap_builds_new_instance():
    a = regmod._bootstrap_default_registry()
    b = regmod._bootstrap_default_registry()
    assert a is not b
    assert isinstance(a, UnitsRegistry)
    assert a.get("m") is not b.get("m")


def test_unit_without_registry_uses_default(ureg):
    orphan = Unit(UnitType.LENGTH, "metre", "m")
    assert orphan.invert().registry is ureg

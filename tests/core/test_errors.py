import pytest

from caliper.core.errors import (
    DimensionMismatch,
    InvalidDefinition,
    NoConversionPath,
    RecursionLimitExceeded,
    UnitError,
    UnsupportedOffset,
)


@pytest.mark.parametrize(
    "err, key",
    [
        (InvalidDefinition("symbol.cannot.be.null", "msg"), "symbol.cannot.be.null"),
        (DimensionMismatch("maps.not.equal", "msg"), "maps.not.equal"),
        (UnsupportedOffset("°C"), "offset.not.supported"),
        (NoConversionPath("a", "b"), "no.factor"),
        (RecursionLimitExceeded("x", 10), "conversion.depth.exceeded"),
    ],
)
def test_errors_carry_message_key(err, key):
    assert isinstance(err, UnitError)
    assert isinstance(err, ValueError)
    assert err.key == key


def test_messages_name_the_units():
    assert "°C" in str(UnsupportedOffset("°C"))
    msg = str(NoConversionPath("ft", "kg"))
    assert "ft" in msg and "kg" in msg
    assert "10" in str(RecursionLimitExceeded("x", 10))

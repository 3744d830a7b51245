import pytest

from linkshort.base62 import decode_base62, encode_base62


@pytest.mark.parametrize(
    "number, expected",
    [
        (0, "0"),
        (1, "1"),
        (61, "Z"),
        (62, "10"),
        (12345, "3d7"),
        (987654321, "14Q60p"),
    ],
)
def test_encode_decode(number, expected):
    encoded = encode_base62(number)
    assert encoded == expected
    assert decode_base62(encoded) == number


@pytest.mark.parametrize("text", ["~", "@", "123abc#", "xyz!"])
def test_decode_invalid(text):
    with pytest.raises(ValueError, match="invalid character"):
        decode_base62(text)


def test_encode_rejects_negative():
    with pytest.raises(ValueError):
        encode_base62(-1)


def test_counter_hash_unique():
    million = 1_000_000
    assert len({encode_base62(i) for i in range(million)}) == million


def test_service_counter_value():
    assert encode_base62(100) == "1C"
"""Base62 encoding of counter values."""

from __future__ import annotations

BASE62_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"
_INDEX = {char: pos for pos, char in enumerate(BASE62_ALPHABET)}
_UINT64_MASK = (1 << 64) - 1


def encode_base62(num: int) -> str:
    """Encode an unsigned 64-bit integer as a Base62 string."""
    if num < 0 or num > _UINT64_MASK:
        raise ValueError("number must fit in an unsigned 64-bit integer")
    if num == 0:
        return "0"
    digits = []
    while num:
        num, rem = divmod(num, 62)
        digits.append(BASE62_ALPHABET[rem])
    return "".join(reversed(digits))


def decode_base62(text: str) -> int:
    """Decode a Base62 string; wraps at 64 bits like an unsigned integer."""
    decoded = 0
    for char in text:
        pos = _INDEX.get(char)
        if pos is None:
            raise ValueError("invalid character in base62 string")
        decoded = (decoded * 62 + pos) & _UINT64_MASK
    return decoded
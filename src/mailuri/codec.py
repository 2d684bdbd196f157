"""Percent-encoding helpers used by the URI parser and serializer."""

from __future__ import annotations

import string
from typing import Final

from .errors import EncodingOverflowError, MalformedUriError

RESERVED: Final = frozenset("/:&%=")
_HEX_DIGITS: Final = frozenset(string.hexdigits)
_TEXT_ENCODING: Final = "utf-8"
_TEXT_ERRORS: Final = "surrogateescape"


def pct_decode(text: str) -> str:
    """Decode ``%XX`` escapes, e.g. ``hello%20world`` -> ``hello world``.

    Every ``%`` must introduce exactly two hex digits. Anything else is a
    :class:`MalformedUriError` and no partial result is returned.
    """

    if "%" not in text:
        return text

    decoded = bytearray()
    idx = 0
    length = len(text)
    while idx < length:
        char = text[idx]
        if char != "%":
            decoded.extend(char.encode(_TEXT_ENCODING, _TEXT_ERRORS))
            idx += 1
            continue
        digits = text[idx + 1 : idx + 3]
        if len(digits) != 2 or not all(digit in _HEX_DIGITS for digit in digits):
            raise MalformedUriError(f"Invalid percent-escape at offset {idx}: {text[idx:idx + 3]!r}")
        decoded.append(int(digits, 16))
        idx += 3
    return decoded.decode(_TEXT_ENCODING, _TEXT_ERRORS)


def pct_encode(text: str, capacity: int | None = None, *, strict: bool = False) -> str:
    """Escape the reserved characters ``/ : & % =`` as uppercase ``%XX``.

    ``capacity`` bounds the output length. An escape that would not fit is
    dropped along with the rest of the input, unless ``strict`` is set, in
    which case :class:`EncodingOverflowError` is raised instead.
    """

    parts: list[str] = []
    used = 0
    for char in text:
        piece = f"%{ord(char):02X}" if char in RESERVED else char
        if capacity is not None and used + len(piece) > capacity:
            if strict:
                raise EncodingOverflowError(
                    f"Encoded value exceeds {capacity} characters."
                )
            break
        parts.append(piece)
        used += len(piece)
    return "".join(parts)


__all__ = ["RESERVED", "pct_decode", "pct_encode"]

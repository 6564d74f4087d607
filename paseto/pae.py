"""
PASETO v1/v2 - Pre-Authentication Encoding

PAE turns an ordered list of byte strings into a single unambiguous buffer.
It is used verbatim as AEAD associated data, as MAC input and as the
message that gets signed.

Encoding:
    LE64(count) || for each piece: LE64(len(piece)) || piece

Each LE64 is an unsigned 64-bit little-endian integer whose most
significant bit must be clear. Length prefixes, not separators, are what
keep ["ab", "c"] and ["a", "bc"] apart.

SPDX-License-Identifier: AGPL-3.0-or-later
"""

import struct
from typing import Union

from .exceptions import EncodingError


# Top bit of every LE64 must stay zero
MAX_LE64 = (1 << 63) - 1


def to_bytes(value: Union[bytes, bytearray, str, None]) -> bytes:
    """Normalize a payload, footer or PAE piece to bytes (str is UTF-8)."""
    if value is None:
        return b""
    if isinstance(value, str):
        return value.encode("utf-8")
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    raise TypeError(f"Expected bytes or str, got {type(value).__name__}")


def le64(n: int) -> bytes:
    """Encode n as 8 little-endian bytes."""
    if n < 0 or n > MAX_LE64:
        raise EncodingError("Message too long to encode")
    return struct.pack("<Q", n)


def pae(*pieces: Union[bytes, str]) -> bytes:
    """
    Pre-authentication encode the given pieces.

    >>> pae().hex()
    '0000000000000000'
    """
    parts = [to_bytes(piece) for piece in pieces]

    output = [le64(len(parts))]
    for part in parts:
        output.append(le64(len(part)))
        output.append(part)

    return b"".join(output)

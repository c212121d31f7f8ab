"""Little-endian integer codec for RIFF fields.

WHY: Every multi-byte integer in a RIFF file is little-endian, whatever
the host byte order is.

HOW: ``struct`` with an explicit ``<`` prefix always means little-endian
with standard sizes, so no host probe is needed.

RULES:
- Decoders take exactly 2 or 4 bytes
- Encoders accept 0 <= value <= 0xFFFF / 0xFFFFFFFF
"""

from __future__ import annotations

import struct

_U16 = struct.Struct("<H")
_U32 = struct.Struct("<I")


def to_host_u16(data: bytes) -> int:
    """Decode a 2-byte little-endian unsigned integer."""
    return _U16.unpack(data)[0]


def to_host_u32(data: bytes) -> int:
    """Decode a 4-byte little-endian unsigned integer."""
    return _U32.unpack(data)[0]


def from_host_u16(value: int) -> bytes:
    """Encode an unsigned integer as 2 little-endian bytes."""
    return _U16.pack(value)


def from_host_u32(value: int) -> bytes:
    """Encode an unsigned integer as 4 little-endian bytes."""
    return _U32.pack(value)

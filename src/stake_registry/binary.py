"""Bounds-checked little-endian readers for raw account data."""

from __future__ import annotations

import base64
import binascii
import struct
from typing import Any, Mapping, Optional

import base58

from .errors import DecodeError

ADDRESS_LENGTH = 32


def _check_span(buffer: bytes, offset: int, width: int) -> None:
    if offset < 0 or offset + width > len(buffer):
        raise DecodeError(f"read of {width} bytes at offset {offset} overruns buffer of {len(buffer)} bytes")


def read_u8(buffer: bytes, offset: int) -> int:
    _check_span(buffer, offset, 1)
    return buffer[offset]


def read_u32_le(buffer: bytes, offset: int) -> int:
    _check_span(buffer, offset, 4)
    return struct.unpack_from("<I", buffer, offset)[0]


def read_u64_le(buffer: bytes, offset: int) -> int:
    """Unsigned 64-bit little-endian integer at ``offset``.

    Read as low and high 32-bit words and combined as ``high * 2**32 + low``.
    Python ints do not overflow, so the full 64-bit range is exact.
    """
    _check_span(buffer, offset, 8)
    low, high = struct.unpack_from("<II", buffer, offset)
    return high * 0x1_0000_0000 + low


def read_address(buffer: bytes, offset: int, length: int = ADDRESS_LENGTH) -> str:
    """Base-58 text of ``length`` bytes at ``offset`` (no checksum, no version byte)."""
    _check_span(buffer, offset, length)
    return base58.b58encode(bytes(buffer[offset:offset + length])).decode("ascii")


def account_data(account: Optional[Mapping[str, Any]]) -> Optional[bytes]:
    """Raw bytes of an RPC account object (``{"data": [b64, "base64"], ...}``).

    Returns ``None`` for a missing account and raises ``DecodeError`` when the
    data field is not a base64 pair.
    """
    if account is None:
        return None
    if not isinstance(account, Mapping):
        raise DecodeError("account is not an object")
    data = account.get("data")
    if not isinstance(data, (list, tuple)) or len(data) < 1 or not isinstance(data[0], str):
        raise DecodeError("account data is not an encoded [payload, encoding] pair")
    if len(data) > 1 and data[1] != "base64":
        raise DecodeError(f"unexpected account encoding {data[1]!r}")
    try:
        return base64.b64decode(data[0], validate=True)
    except (binascii.Error, ValueError) as exc:
        raise DecodeError("account data is not valid base64") from exc

"""Fixed-offset account layouts for the staking program (schema v1).

Each layout is a table of ``Field`` entries evaluated by ``decode_fields``;
a schema change only touches the table.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple

from .binary import read_address, read_u8, read_u32_le, read_u64_le
from .errors import DecodeError


@dataclass(frozen=True)
class Field:
    name: str
    offset: int
    width: int
    kind: str

    @property
    def end(self) -> int:
        return self.offset + self.width


def _read_bytes(buffer: bytes, field: Field) -> bytes:
    if field.end > len(buffer):
        raise DecodeError(f"field {field.name} overruns buffer of {len(buffer)} bytes")
    return bytes(buffer[field.offset:field.end])


_READERS: Dict[str, Callable[[bytes, Field], Any]] = {
    "u8": lambda buf, f: read_u8(buf, f.offset),
    "u32": lambda buf, f: read_u32_le(buf, f.offset),
    "u64": lambda buf, f: read_u64_le(buf, f.offset),
    "bool": lambda buf, f: read_u8(buf, f.offset) != 0,
    "address": lambda buf, f: read_address(buf, f.offset, f.width),
    "bytes": _read_bytes,
}

# Present in the layout but never decoded.
SKIP = "skip"


@dataclass(frozen=True)
class AccountLayout:
    name: str
    fields: Tuple[Field, ...]

    @property
    def min_length(self) -> int:
        return max(field.end for field in self.fields)

    def field(self, name: str) -> Field:
        for field in self.fields:
            if field.name == name:
                return field
        raise KeyError(name)


def decode_fields(buffer: bytes, layout: AccountLayout) -> Dict[str, Any]:
    """Decode every non-skipped field of ``layout`` or raise ``DecodeError``.

    The length check runs first, so a short buffer never yields a partial
    mapping.
    """
    if len(buffer) < layout.min_length:
        raise DecodeError(f"{layout.name} needs {layout.min_length} bytes, got {len(buffer)}")

    decoded: Dict[str, Any] = {}
    for field in layout.fields:
        if field.kind == SKIP:
            continue
        reader = _READERS.get(field.kind)
        if reader is None:
            raise DecodeError(f"unknown field kind {field.kind!r} for {layout.name}.{field.name}")
        decoded[field.name] = reader(buffer, field)
    return decoded


POOL_LAYOUT = AccountLayout(
    name="StakePool",
    fields=(
        Field("discriminator", 0, 8, "bytes"),
        Field("bump", 8, 1, "u8"),
        Field("nonce", 9, 1, "u8"),
        Field("mint", 10, 32, "address"),
        Field("creator", 42, 32, "address"),
        Field("authority", 74, 32, "address"),
        Field("min_weight", 106, 8, "u64"),
        Field("max_weight", 114, 8, "u64"),
        Field("min_duration", 122, 8, "u64"),
        Field("max_duration", 130, 8, "u64"),
        Field("permissionless", 138, 1, "bool"),
        Field("vault", 139, 32, "address"),
        Field("stake_mint", 171, 32, "address"),
        Field("total_stake", 203, 8, "u64"),
    ),
)

STAKE_ENTRY_LAYOUT = AccountLayout(
    name="StakeEntry",
    fields=(
        Field("discriminator", 0, 8, "bytes"),
        Field("nonce", 8, 4, "u32"),
        Field("stake_pool", 12, 32, SKIP),
        Field("payer", 44, 32, "address"),
        Field("authority", 76, 32, "address"),
        Field("amount", 108, 8, "u64"),
        Field("duration", 116, 8, "u64"),
        Field("effective_amount", 124, 16, SKIP),
        Field("created_ts", 140, 8, "u64"),
        Field("closed_ts", 148, 8, "u64"),
    ),
)

# Offset of the pool address inside a stake entry, used by the server-side filter.
STAKE_ENTRY_POOL_OFFSET = STAKE_ENTRY_LAYOUT.field("stake_pool").offset

DISCRIMINATOR_LENGTH = POOL_LAYOUT.field("discriminator").width


def matches_discriminator(found: bytes, expected: Optional[bytes]) -> bool:
    """True when no discriminator is expected or the account carries exactly it."""
    return expected is None or found == expected

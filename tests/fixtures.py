import base64
import struct
from typing import Any, Dict, Optional

import base58

ENTRY_DISCRIMINATOR = "YMx1BScecEs"
POOL_ADDRESS = "2uBHsavcfVQAgs8nMuMwogaap9BV1MwQuADearz1e6Kg"


def pool_bytes(
    total_stake: int = 0,
    min_duration: int = 0,
    max_duration: int = 0,
    mint: bytes = bytes(32),
    discriminator: bytes = bytes(8),
    permissionless: int = 0,
) -> bytes:
    buf = bytearray(211)
    buf[0:8] = discriminator
    buf[8] = 254
    buf[9] = 3
    buf[10:42] = mint
    buf[42:74] = bytes([2]) * 32
    buf[74:106] = bytes([3]) * 32
    struct.pack_into("<QQQQ", buf, 106, 1, 4, min_duration, max_duration)
    buf[138] = permissionless
    buf[139:171] = bytes([4]) * 32
    buf[171:203] = bytes([5]) * 32
    struct.pack_into("<Q", buf, 203, total_stake)
    return bytes(buf)


def entry_bytes(
    amount: int,
    duration: int = 0,
    created_ts: int = 1_700_000_000,
    closed_ts: int = 0,
    authority: bytes = bytes([9]) * 32,
    nonce: int = 0,
    discriminator: Optional[bytes] = None,
) -> bytes:
    disc = base58.b58decode(ENTRY_DISCRIMINATOR) if discriminator is None else discriminator
    buf = bytearray(156)
    buf[0:len(disc)] = disc
    struct.pack_into("<I", buf, 8, nonce)
    buf[12:44] = base58.b58decode(POOL_ADDRESS)
    buf[44:76] = bytes([8]) * 32
    buf[76:108] = authority
    struct.pack_into("<QQ", buf, 108, amount, duration)
    buf[124:140] = bytes([0xAB]) * 16
    struct.pack_into("<QQ", buf, 140, created_ts, closed_ts)
    return bytes(buf)


def account(data: bytes) -> Dict[str, Any]:
    return {"data": [base64.b64encode(data).decode("ascii"), "base64"], "executable": False, "lamports": 1}


def program_account(data: bytes, pubkey: str = "entry") -> Dict[str, Any]:
    return {"pubkey": pubkey, "account": account(data)}


def address(data: bytes) -> str:
    return base58.b58encode(data).decode("ascii")

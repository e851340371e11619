from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, Tuple

ZERO_ADDRESS = "1" * 32


def isoformat_z(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(frozen=True)
class PoolRecord:
    bump: int
    nonce: int
    mint: str
    creator: str
    authority: str
    min_weight: int
    max_weight: int
    min_duration: int
    max_duration: int
    permissionless: bool
    vault: str
    stake_mint: str
    total_stake: int

    @classmethod
    def empty(cls) -> "PoolRecord":
        return cls(
            bump=0,
            nonce=0,
            mint=ZERO_ADDRESS,
            creator=ZERO_ADDRESS,
            authority=ZERO_ADDRESS,
            min_weight=0,
            max_weight=0,
            min_duration=0,
            max_duration=0,
            permissionless=False,
            vault=ZERO_ADDRESS,
            stake_mint=ZERO_ADDRESS,
            total_stake=0,
        )


@dataclass(frozen=True)
class StakeEntryRecord:
    nonce: int
    payer: str
    authority: str
    amount: int
    duration: int
    created_ts: int
    closed_ts: int

    @property
    def is_open(self) -> bool:
        return self.closed_ts == 0


@dataclass(frozen=True)
class StakerView:
    address: str
    amount: Decimal
    duration: int
    created_ts: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "address": self.address,
            "amount": float(self.amount),
            "duration": self.duration,
            "createdTs": self.created_ts,
        }


@dataclass(frozen=True)
class PoolView:
    total_staked: Decimal
    min_duration: int
    max_duration: int
    staker_count: int
    expiry: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalStaked": float(self.total_staked),
            "minDuration": self.min_duration,
            "maxDuration": self.max_duration,
            "stakerCount": self.staker_count,
            "expiry": self.expiry,
        }


@dataclass(frozen=True)
class Snapshot:
    pool: PoolView
    stakers: Tuple[StakerView, ...]
    fetched_at: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pool": self.pool.to_dict(),
            "stakers": [staker.to_dict() for staker in self.stakers],
            "fetchedAt": isoformat_z(self.fetched_at),
        }

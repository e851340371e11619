from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, List, Optional

from .models import PoolRecord, PoolView, Snapshot, StakeEntryRecord, StakerView

SECONDS_PER_DAY = 86_400


def to_display_units(raw: int, decimals: int) -> Decimal:
    return Decimal(raw) / (Decimal(10) ** decimals)


def seconds_to_days(seconds: int) -> int:
    # Halves round up: 43200 seconds is one day.
    days = Decimal(seconds) / Decimal(SECONDS_PER_DAY)
    return int(days.quantize(Decimal(1), rounding=ROUND_HALF_UP))


class StakeAggregator:
    def __init__(self, decimals: int, expiry: str) -> None:
        self.decimals = decimals
        self.expiry = expiry

    def staker_view(self, entry: StakeEntryRecord) -> StakerView:
        return StakerView(
            address=entry.authority,
            amount=to_display_units(entry.amount, self.decimals),
            duration=seconds_to_days(entry.duration),
            created_ts=entry.created_ts,
        )

    def rank(self, entries: Iterable[StakeEntryRecord]) -> List[StakerView]:
        """Open entries as stakers, largest amount first.

        Equal amounts have no guaranteed relative order.
        """
        stakers = [self.staker_view(entry) for entry in entries if entry.is_open]
        stakers.sort(key=lambda staker: staker.amount, reverse=True)
        return stakers

    def build(
        self,
        pool: PoolRecord,
        entries: Iterable[StakeEntryRecord],
        now: Optional[datetime] = None,
    ) -> Snapshot:
        if now is not None and now.utcoffset() is None:
            raise ValueError("now must be timezone-aware")
        stakers = self.rank(entries)
        pool_view = PoolView(
            total_staked=to_display_units(pool.total_stake, self.decimals),
            min_duration=seconds_to_days(pool.min_duration),
            max_duration=seconds_to_days(pool.max_duration),
            staker_count=len(stakers),
            expiry=self.expiry,
        )
        return Snapshot(
            pool=pool_view,
            stakers=tuple(stakers),
            fetched_at=now or datetime.now(timezone.utc),
        )


def build_snapshot(
    pool: PoolRecord,
    entries: Iterable[StakeEntryRecord],
    decimals: int,
    expiry: str,
    now: Optional[datetime] = None,
) -> Snapshot:
    return StakeAggregator(decimals=decimals, expiry=expiry).build(pool, entries, now=now)

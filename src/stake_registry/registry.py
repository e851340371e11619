import logging
from datetime import datetime
from typing import List, Optional

from .aggregator import StakeAggregator
from .config import RegistryConfig
from .entries import decode_stake_entries
from .http_client import HttpClient
from .models import PoolRecord, Snapshot, StakeEntryRecord
from .pool import decode_pool_account
from .rpc import StakeRpcClient, stake_entry_filters

logger = logging.getLogger(__name__)


class StakeRegistry:
    """Builds a fresh staking snapshot for one pool per call."""

    def __init__(self, config: RegistryConfig, rpc: Optional[StakeRpcClient] = None) -> None:
        self.config = config
        self._owns_rpc = rpc is None
        self.rpc = rpc or StakeRpcClient(
            config.rpc.endpoint,
            HttpClient(timeout=config.rpc.timeout, user_agent=config.rpc.user_agent),
        )
        self.aggregator = StakeAggregator(decimals=config.pool.decimals, expiry=config.pool.expiry)

    def __enter__(self) -> "StakeRegistry":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_rpc:
            self.rpc.close()

    def fetch_pool(self) -> PoolRecord:
        pool_config = self.config.pool
        value = self.rpc.get_account_info(pool_config.pool_address)
        return decode_pool_account(value, pool_config.pool_discriminator_bytes())

    def fetch_entries(self) -> List[StakeEntryRecord]:
        pool_config = self.config.pool
        filters = stake_entry_filters(pool_config.pool_address, pool_config.entry_discriminator)
        accounts = self.rpc.get_program_accounts(pool_config.stake_program, filters)
        return decode_stake_entries(accounts, pool_config.entry_discriminator_bytes())

    def snapshot(self, now: Optional[datetime] = None) -> Snapshot:
        """Fetch, decode and aggregate.

        Raises ``TransportError`` or ``RpcProtocolError`` if either call fails;
        no partial snapshot is returned in that case.
        """
        pool = self.fetch_pool()
        entries = self.fetch_entries()
        snapshot = self.aggregator.build(pool, entries, now=now)
        logger.info(
            "snapshot for %s: %d stakers, %s staked",
            self.config.pool.pool_address,
            snapshot.pool.staker_count,
            snapshot.pool.total_staked,
        )
        return snapshot

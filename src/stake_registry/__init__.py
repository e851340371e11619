from .aggregator import StakeAggregator, build_snapshot, seconds_to_days, to_display_units
from .config import PoolConfig, RegistryConfig, RpcConfig
from .errors import DecodeError, RpcProtocolError, StakeRegistryError, TransportError
from .models import PoolRecord, PoolView, Snapshot, StakeEntryRecord, StakerView
from .registry import StakeRegistry

__all__ = [
    "DecodeError",
    "PoolConfig",
    "PoolRecord",
    "PoolView",
    "RegistryConfig",
    "RpcConfig",
    "RpcProtocolError",
    "Snapshot",
    "StakeAggregator",
    "StakeEntryRecord",
    "StakeRegistry",
    "StakeRegistryError",
    "StakerView",
    "TransportError",
    "build_snapshot",
    "seconds_to_days",
    "to_display_units",
]

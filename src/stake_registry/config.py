import math
import os
from dataclasses import dataclass, field, fields
from typing import Any, Mapping, Optional

import base58
from solders.pubkey import Pubkey

from .layout import DISCRIMINATOR_LENGTH

RPC_URL_ENV = "STAKE_REGISTRY_RPC_URL"


@dataclass(frozen=True)
class RpcConfig:
    endpoint: str = "https://api.mainnet-beta.solana.com"
    timeout: float = 10.0
    user_agent: str = "stake-registry/1.0"

    def __post_init__(self) -> None:
        _require_str("endpoint", self.endpoint)
        if not self.endpoint.startswith(("http://", "https://")):
            raise ValueError(f"endpoint must be an http(s) URL: {self.endpoint!r}")
        _require_str("user_agent", self.user_agent)
        timeout = _as_float("timeout", self.timeout)
        if timeout <= 0:
            raise ValueError("timeout must be positive")
        object.__setattr__(self, "timeout", timeout)


@dataclass(frozen=True)
class PoolConfig:
    pool_address: str = "2uBHsavcfVQAgs8nMuMwogaap9BV1MwQuADearz1e6Kg"
    stake_program: str = "STAKEvGqQTtzJZH6BWDcbpzXXn2BBerPAgQ3EGLN2GH"
    entry_discriminator: str = "YMx1BScecEs"
    pool_discriminator: Optional[str] = None
    decimals: int = 9
    expiry: str = "2027-01-26T05:00:00Z"

    def __post_init__(self) -> None:
        for name in ("pool_address", "stake_program"):
            value = getattr(self, name)
            _require_str(name, value)
            try:
                Pubkey.from_string(value)
            except ValueError as exc:
                raise ValueError(f"{name} is not a valid address: {value!r}") from exc
        _require_str("entry_discriminator", self.entry_discriminator)
        if self.pool_discriminator is not None:
            _require_str("pool_discriminator", self.pool_discriminator)
        _require_str("expiry", self.expiry)
        decimals = _as_int("decimals", self.decimals)
        if decimals < 0:
            raise ValueError("decimals must be non-negative")
        object.__setattr__(self, "decimals", decimals)
        self.entry_discriminator_bytes()
        self.pool_discriminator_bytes()

    def entry_discriminator_bytes(self) -> bytes:
        return _discriminator_bytes("entry_discriminator", self.entry_discriminator)

    def pool_discriminator_bytes(self) -> Optional[bytes]:
        if self.pool_discriminator is None:
            return None
        return _discriminator_bytes("pool_discriminator", self.pool_discriminator)


@dataclass(frozen=True)
class RegistryConfig:
    rpc: RpcConfig = field(default_factory=RpcConfig)
    pool: PoolConfig = field(default_factory=PoolConfig)

    @classmethod
    def from_mapping(cls, raw: Optional[Mapping[str, Any]], environ: Optional[Mapping[str, str]] = None) -> "RegistryConfig":
        raw = raw or {}
        if not isinstance(raw, Mapping):
            raise ValueError("config must be a mapping")
        environ = os.environ if environ is None else environ
        unknown = set(raw) - {"rpc", "pool"}
        if unknown:
            raise ValueError(f"unknown config sections: {sorted(unknown)}")

        rpc_values = dict(_section(raw, "rpc", RpcConfig))
        if environ.get(RPC_URL_ENV):
            rpc_values["endpoint"] = environ[RPC_URL_ENV]
        return cls(
            rpc=RpcConfig(**rpc_values),
            pool=PoolConfig(**_section(raw, "pool", PoolConfig)),
        )


def _section(raw: Mapping[str, Any], name: str, kind: type) -> Mapping[str, Any]:
    section = raw.get(name) or {}
    if not isinstance(section, Mapping):
        raise ValueError(f"config section {name!r} must be a mapping")
    allowed = {f.name for f in fields(kind)}
    unknown = set(section) - allowed
    if unknown:
        raise ValueError(f"unknown keys in {name!r}: {sorted(unknown)}")
    return section


def _require_str(name: str, value: Any) -> None:
    if not isinstance(value, str) or not value:
        raise ValueError(f"{name} must be a non-empty string, got {value!r}")


def _as_int(name: str, value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError(f"{name} must be an integer, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value)
    raise ValueError(f"{name} must be an integer, got {value!r}")


def _as_float(name: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise ValueError(f"{name} must be a number, got {value!r}")
    try:
        number = float(value)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {value!r}") from exc
    if not math.isfinite(number):
        raise ValueError(f"{name} must be finite, got {value!r}")
    return number


def _discriminator_bytes(name: str, value: str) -> bytes:
    try:
        decoded = base58.b58decode(value)
    except ValueError as exc:
        raise ValueError(f"{name} is not valid base58: {value!r}") from exc
    if len(decoded) != DISCRIMINATOR_LENGTH:
        raise ValueError(f"{name} must decode to {DISCRIMINATOR_LENGTH} bytes, got {len(decoded)}")
    return decoded

"""Error taxonomy for snapshot builds."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


class StakeRegistryError(Exception):
    """Base class for everything raised by this package."""


@dataclass
class TransportError(StakeRegistryError):
    """The RPC endpoint could not be reached or answered with garbage."""

    message: str
    http_status: Optional[int] = None
    body: Optional[str] = None
    cause: Optional[BaseException] = None

    def __str__(self) -> str:
        text = self.message
        if self.http_status is not None:
            text = f"{text}: HTTP {self.http_status}"
        if self.cause is not None:
            text = f"{text}: {self.cause!r}"
        if self.body:
            text = f"{text} [{self.body[:200]}]"
        return text


@dataclass
class RpcProtocolError(StakeRegistryError):
    """The RPC response carried an ``error`` envelope."""

    message: str
    code: Optional[int] = None
    data: Any = None

    def __str__(self) -> str:
        if self.code is not None:
            return f"{self.message} (code={self.code})"
        return self.message


class DecodeError(StakeRegistryError, ValueError):
    """A byte buffer could not be decoded against its layout."""

"""JSON-RPC client for the two account queries a snapshot needs."""

from __future__ import annotations

import itertools
import logging
from typing import Any, Dict, List, Optional

import requests

from .errors import RpcProtocolError, TransportError
from .http_client import HttpClient
from .layout import STAKE_ENTRY_POOL_OFFSET

logger = logging.getLogger(__name__)


def memcmp(offset: int, data: str) -> Dict[str, Any]:
    return {"memcmp": {"offset": offset, "bytes": data}}


def stake_entry_filters(pool_address: str, discriminator: str) -> List[Dict[str, Any]]:
    """Server-side filters selecting the stake entries of one pool.

    Evaluated by the RPC node; a wrong value yields an empty or unrelated
    result set, never an error.
    """
    return [
        memcmp(0, discriminator),
        memcmp(STAKE_ENTRY_POOL_OFFSET, pool_address),
    ]


class StakeRpcClient:
    def __init__(self, endpoint: str, http: HttpClient) -> None:
        self.endpoint = endpoint
        self.http = http
        self._ids = itertools.count(1)

    def close(self) -> None:
        self.http.close()

    def call(self, method: str, params: List[Any]) -> Any:
        payload = {"jsonrpc": "2.0", "id": next(self._ids), "method": method, "params": params}
        logger.debug("rpc %s -> %s", method, self.endpoint)
        try:
            response = self.http.post(self.endpoint, payload)
        except (requests.Timeout, requests.ConnectionError) as exc:
            raise TransportError(f"{method} request failed", cause=exc) from exc
        except requests.RequestException as exc:
            raise TransportError(f"{method} request could not be sent", cause=exc) from exc

        status = response.status_code
        try:
            envelope = response.json()
        except ValueError as exc:
            if status != 200:
                raise TransportError(f"{method} returned non-200 status", http_status=status, body=response.text) from exc
            raise TransportError(
                f"{method} response was not valid JSON",
                http_status=status,
                body=response.text,
                cause=exc,
            ) from exc

        # Providers report rate limits and similar failures as error envelopes on non-200 replies.
        if isinstance(envelope, dict) and envelope.get("error") is not None:
            error = envelope["error"]
            if isinstance(error, dict):
                raise RpcProtocolError(str(error.get("message", error)), code=error.get("code"), data=error.get("data"))
            raise RpcProtocolError(str(error))

        if status != 200:
            raise TransportError(f"{method} returned non-200 status", http_status=status, body=response.text)
        if not isinstance(envelope, dict):
            raise TransportError(f"{method} response was not a JSON-RPC envelope", http_status=status, body=response.text)

        return envelope.get("result")

    def get_account_info(self, address: str) -> Optional[Dict[str, Any]]:
        result = self.call("getAccountInfo", [address, {"encoding": "base64"}])
        if not isinstance(result, dict):
            return None
        return result.get("value")

    def get_program_accounts(self, program: str, filters: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        result = self.call("getProgramAccounts", [program, {"encoding": "base64", "filters": filters}])
        return list(result or [])

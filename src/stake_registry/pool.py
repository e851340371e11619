"""Stake pool account decoding.

A pool that is missing or cannot be decoded degrades to ``PoolRecord.empty()``
so the rest of the snapshot can still be built.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from .binary import account_data
from .errors import DecodeError
from .layout import POOL_LAYOUT, decode_fields, matches_discriminator
from .models import PoolRecord

logger = logging.getLogger(__name__)


def decode_pool(data: Optional[bytes], discriminator: Optional[bytes] = None) -> PoolRecord:
    if data is None:
        logger.warning("pool account not found, using empty pool")
        return PoolRecord.empty()

    try:
        fields = decode_fields(data, POOL_LAYOUT)
    except DecodeError as exc:
        logger.warning("pool account undecodable, using empty pool: %s", exc)
        return PoolRecord.empty()

    found = fields.pop("discriminator")
    if not matches_discriminator(found, discriminator):
        logger.warning("pool discriminator %s does not match expected %s", found.hex(), discriminator.hex())
        return PoolRecord.empty()

    return PoolRecord(**fields)


def decode_pool_account(value: Optional[Mapping[str, Any]], discriminator: Optional[bytes] = None) -> PoolRecord:
    """Decode the ``value`` of a ``getAccountInfo`` response."""
    try:
        data = account_data(value)
    except DecodeError as exc:
        logger.warning("pool account envelope malformed, using empty pool: %s", exc)
        return PoolRecord.empty()
    return decode_pool(data, discriminator)

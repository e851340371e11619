"""Stake entry decoding for accounts returned by ``getProgramAccounts``.

Accounts arrive already narrowed by the server-side filters. Each account is
decoded on its own: a malformed one is logged and skipped, and closed entries
are dropped.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Mapping, Optional

from .binary import account_data
from .errors import DecodeError
from .layout import STAKE_ENTRY_LAYOUT, decode_fields, matches_discriminator
from .models import StakeEntryRecord

logger = logging.getLogger(__name__)


def decode_stake_entry(data: bytes, discriminator: Optional[bytes] = None) -> StakeEntryRecord:
    fields = decode_fields(data, STAKE_ENTRY_LAYOUT)
    found = fields.pop("discriminator")
    if not matches_discriminator(found, discriminator):
        raise DecodeError(f"stake entry discriminator {found.hex()} does not match {discriminator.hex()}")
    return StakeEntryRecord(**fields)


def decode_stake_entries(
    accounts: Iterable[Mapping[str, Any]],
    discriminator: Optional[bytes] = None,
) -> List[StakeEntryRecord]:
    entries: List[StakeEntryRecord] = []
    skipped = 0
    for index, item in enumerate(accounts):
        pubkey = item.get("pubkey", f"#{index}") if isinstance(item, Mapping) else f"#{index}"
        try:
            if not isinstance(item, Mapping):
                raise DecodeError("program account is not an object")
            data = account_data(item.get("account"))
            if data is None:
                raise DecodeError("program account has no account object")
            entry = decode_stake_entry(data, discriminator)
        except DecodeError as exc:
            skipped += 1
            logger.warning("skipping stake entry %s: %s", pubkey, exc)
            continue

        if entry.is_open:
            entries.append(entry)

    logger.debug("decoded %d open stake entries, skipped %d", len(entries), skipped)
    return entries

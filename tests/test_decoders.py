import unittest

import base58

from stake_registry.entries import decode_stake_entries, decode_stake_entry
from stake_registry.errors import DecodeError
from stake_registry.models import PoolRecord
from stake_registry.pool import decode_pool, decode_pool_account

from .fixtures import account, address, entry_bytes, pool_bytes, program_account

ENTRY_DISC = base58.b58decode("YMx1BScecEs")


class PoolDecoderTests(unittest.TestCase):
    def test_decodes_every_field(self) -> None:
        data = pool_bytes(
            total_stake=5_000_000_000,
            min_duration=864_000,
            max_duration=90_000,
            mint=bytes([1]) * 32,
            permissionless=1,
        )

        pool = decode_pool(data)

        self.assertEqual(pool.bump, 254)
        self.assertEqual(pool.nonce, 3)
        self.assertEqual(pool.mint, address(bytes([1]) * 32))
        self.assertEqual(pool.creator, address(bytes([2]) * 32))
        self.assertEqual(pool.authority, address(bytes([3]) * 32))
        self.assertEqual(pool.min_weight, 1)
        self.assertEqual(pool.max_weight, 4)
        self.assertEqual(pool.min_duration, 864_000)
        self.assertEqual(pool.max_duration, 90_000)
        self.assertTrue(pool.permissionless)
        self.assertEqual(pool.vault, address(bytes([4]) * 32))
        self.assertEqual(pool.stake_mint, address(bytes([5]) * 32))
        self.assertEqual(pool.total_stake, 5_000_000_000)

    def test_short_buffer_yields_empty_pool(self) -> None:
        data = pool_bytes(total_stake=10)[:210]
        self.assertEqual(decode_pool(data), PoolRecord.empty())

    def test_missing_account_yields_empty_pool(self) -> None:
        self.assertEqual(decode_pool(None), PoolRecord.empty())
        self.assertEqual(decode_pool_account(None), PoolRecord.empty())

    def test_malformed_envelope_yields_empty_pool(self) -> None:
        self.assertEqual(decode_pool_account({"data": ["%%%", "base64"]}), PoolRecord.empty())

    def test_empty_pool_is_all_zero(self) -> None:
        empty = PoolRecord.empty()
        self.assertEqual(empty.total_stake, 0)
        self.assertFalse(empty.permissionless)
        self.assertEqual(empty.mint, "1" * 32)

    def test_discriminator_mismatch_yields_empty_pool(self) -> None:
        data = pool_bytes(total_stake=10, discriminator=b"\x01" * 8)
        self.assertEqual(decode_pool(data, discriminator=b"\x02" * 8), PoolRecord.empty())
        self.assertEqual(decode_pool(data, discriminator=b"\x01" * 8).total_stake, 10)

    def test_decodes_from_account_envelope(self) -> None:
        pool = decode_pool_account(account(pool_bytes(total_stake=42)))
        self.assertEqual(pool.total_stake, 42)


class StakeEntryDecoderTests(unittest.TestCase):
    def test_decodes_entry_fields(self) -> None:
        entry = decode_stake_entry(
            entry_bytes(amount=1_500, duration=864_000, created_ts=1_700_000_123, nonce=7),
            discriminator=ENTRY_DISC,
        )

        self.assertEqual(entry.nonce, 7)
        self.assertEqual(entry.payer, address(bytes([8]) * 32))
        self.assertEqual(entry.authority, address(bytes([9]) * 32))
        self.assertEqual(entry.amount, 1_500)
        self.assertEqual(entry.duration, 864_000)
        self.assertEqual(entry.created_ts, 1_700_000_123)
        self.assertEqual(entry.closed_ts, 0)
        self.assertTrue(entry.is_open)

    def test_rejects_foreign_discriminator(self) -> None:
        with self.assertRaises(DecodeError):
            decode_stake_entry(entry_bytes(amount=1, discriminator=b"\xee" * 8), discriminator=ENTRY_DISC)

    def test_discriminators_compare_exactly_in_both_decoders(self) -> None:
        with self.assertRaises(DecodeError):
            decode_stake_entry(entry_bytes(amount=1), discriminator=ENTRY_DISC[:7])
        self.assertEqual(decode_stake_entries([program_account(entry_bytes(amount=1))], ENTRY_DISC + b"\x00"), [])

        pool_data = pool_bytes(total_stake=10, discriminator=b"\x01" * 8)
        self.assertEqual(decode_pool(pool_data, discriminator=b"\x01" * 7), PoolRecord.empty())

    def test_truncated_account_is_skipped(self) -> None:
        accounts = [
            program_account(entry_bytes(amount=100), pubkey="good"),
            program_account(entry_bytes(amount=200)[:155], pubkey="short"),
        ]

        entries = decode_stake_entries(accounts, ENTRY_DISC)

        self.assertEqual(len(entries), 1)
        self.assertEqual(entries[0].amount, 100)

    def test_closed_entries_are_dropped(self) -> None:
        accounts = [
            program_account(entry_bytes(amount=10**15, closed_ts=1_700_100_000)),
            program_account(entry_bytes(amount=5)),
        ]

        entries = decode_stake_entries(accounts)

        self.assertEqual([entry.amount for entry in entries], [5])

    def test_malformed_items_do_not_abort_batch(self) -> None:
        accounts = [
            "not-an-object",
            {"pubkey": "no-account"},
            {"pubkey": "bad-b64", "account": {"data": ["@@", "base64"]}},
            program_account(entry_bytes(amount=3, discriminator=b"\x00" * 8)),
            program_account(entry_bytes(amount=7)),
        ]

        entries = decode_stake_entries(accounts, ENTRY_DISC)

        self.assertEqual([entry.amount for entry in entries], [7])

    def test_empty_input(self) -> None:
        self.assertEqual(decode_stake_entries([]), [])


if __name__ == "__main__":
    unittest.main()

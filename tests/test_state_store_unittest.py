from __future__ import annotations

import json
import unittest
from datetime import datetime, timedelta, timezone

from redis.exceptions import ConnectionError as RedisConnectionError

from jackpot_watch.services.jackpots.state_store import PersistedFeedState, StateStore


class _FakeRedis:
    def __init__(self, data=None, fail_reads=False, fail_writes=False):
        self.data = dict(data or {})
        self.fail_reads = fail_reads
        self.fail_writes = fail_writes
        self.closed = False

    async def get(self, key):
        if self.fail_reads:
            raise RedisConnectionError("redis down")
        return self.data.get(key)

    async def set(self, key, value):
        if self.fail_writes:
            raise RedisConnectionError("redis down")
        self.data[key] = value
        return True

    async def aclose(self):
        self.closed = True


class StateStoreTestCase(unittest.IsolatedAsyncioTestCase):
    async def test_missing_key_reads_as_zero(self):
        store = StateStore(_FakeRedis())
        self.assertEqual(await store.get_previous_amount("Powerball"), 0.0)
        self.assertIsNone(await store.get_state("Powerball"))

    async def test_round_trip_uses_literal_feed_name(self):
        redis = _FakeRedis()
        store = StateStore(redis)
        observed = datetime(2025, 12, 26, 20, 0, tzinfo=timezone.utc)
        self.assertTrue(await store.put_amount("Mega Millions", 1700, observed))

        self.assertIn("Mega Millions", redis.data)
        self.assertEqual(
            json.loads(redis.data["Mega Millions"]),
            {"amountMillions": 1700, "observedAt": "2025-12-26T20:00:00.000Z"},
        )
        self.assertEqual(await store.get_previous_amount("Mega Millions"), 1700)
        self.assertEqual(
            await store.get_state("Mega Millions"),
            PersistedFeedState(amount_millions=1700, observed_at="2025-12-26T20:00:00.000Z"),
        )

    async def test_observed_at_is_utc_milliseconds_with_z(self):
        redis = _FakeRedis()
        store = StateStore(redis)
        cases = [
            ("Mega Millions", datetime(2025, 12, 26, 15, 0, 0, 123456, tzinfo=timezone(timedelta(hours=-5)))),
            ("Powerball", datetime(2025, 12, 26, 20, 0, 0, 123456)),
        ]
        for feed_id, observed in cases:
            await store.put_amount(feed_id, 1500, observed)
            with self.subTest(feed_id=feed_id):
                self.assertEqual(json.loads(redis.data[feed_id])["observedAt"], "2025-12-26T20:00:00.123Z")

    async def test_key_prefix(self):
        redis = _FakeRedis()
        store = StateStore(redis, key_prefix="jackpot:")
        await store.put_amount("Powerball", 0)
        self.assertEqual(list(redis.data), ["jackpot:Powerball"])

    async def test_read_failure_degrades_to_zero(self):
        store = StateStore(_FakeRedis({"Powerball": json.dumps({"amountMillions": 900})}, fail_reads=True))
        with self.assertLogs("jackpot_watch.services.jackpots.state_store", level="WARNING") as cm:
            self.assertEqual(await store.get_previous_amount("Powerball"), 0.0)
        self.assertTrue(any("state_read_failed" in line and "code=STATE_ERROR" in line for line in cm.output))

    async def test_malformed_records_degrade_to_zero(self):
        records = [
            "not json",
            json.dumps([1, 2]),
            json.dumps({"amountMillions": "1700"}),
            json.dumps({"amountMillions": True}),
            json.dumps({"amountMillions": -5}),
            '{"amountMillions": NaN}',
            json.dumps({}),
        ]
        for raw in records:
            with self.subTest(raw=raw):
                store = StateStore(_FakeRedis({"Powerball": raw}))
                self.assertEqual(await store.get_previous_amount("Powerball"), 0.0)

    async def test_write_failure_is_swallowed(self):
        store = StateStore(_FakeRedis(fail_writes=True))
        with self.assertLogs("jackpot_watch.services.jackpots.state_store", level="WARNING") as cm:
            self.assertFalse(await store.put_amount("Powerball", 1500))
        self.assertTrue(any("state_write_failed" in line for line in cm.output))

    async def test_aclose_closes_client(self):
        redis = _FakeRedis()
        await StateStore(redis).aclose()
        self.assertTrue(redis.closed)


if __name__ == "__main__":
    unittest.main()

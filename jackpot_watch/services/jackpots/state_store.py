"""Last-observed jackpot per feed, kept in Redis as small JSON records."""
from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass
from datetime import datetime

from redis.asyncio import Redis

from ...contracts.errors import ErrorCode
from .timestamps import utc_timestamp


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PersistedFeedState:
    amount_millions: float
    observed_at: str | None = None

    def to_json(self) -> str:
        return json.dumps({"amountMillions": self.amount_millions, "observedAt": self.observed_at})

    @classmethod
    def from_json(cls, raw: str) -> "PersistedFeedState":
        payload = json.loads(raw)
        if not isinstance(payload, dict):
            raise ValueError("state record is not an object")
        amount = payload.get("amountMillions")
        if isinstance(amount, bool) or not isinstance(amount, (int, float)):
            raise ValueError(f"amountMillions is not a number: {amount!r}")
        if not math.isfinite(amount) or amount < 0:
            raise ValueError(f"amountMillions out of range: {amount!r}")
        observed_at = payload.get("observedAt")
        return cls(amount_millions=float(amount), observed_at=observed_at if isinstance(observed_at, str) else None)


def build_redis_client(redis_url: str) -> Redis:
    return Redis.from_url(redis_url, decode_responses=True)


class StateStore:
    """Per-feed get/put over Redis. Keys are the literal feed name plus an optional prefix."""

    def __init__(self, client: Redis, *, key_prefix: str = ""):
        self._client = client
        self._key_prefix = key_prefix

    def _key(self, feed_id: str) -> str:
        return f"{self._key_prefix}{feed_id}"

    async def get_state(self, feed_id: str) -> PersistedFeedState | None:
        raw = await self._client.get(self._key(feed_id))
        if raw is None:
            return None
        return PersistedFeedState.from_json(raw)

    async def get_previous_amount(self, feed_id: str) -> float:
        """Previous amount in millions; missing, unreadable or malformed state reads as 0."""
        try:
            state = await self.get_state(feed_id)
        except Exception as exc:  # noqa: BLE001
            logger.warning(
                "jackpots.state_read_failed feed=%s code=%s err=%s", feed_id, ErrorCode.STATE_ERROR.value, exc
            )
            return 0.0
        if state is None:
            logger.info("jackpots.state_missing feed=%s", feed_id)
            return 0.0
        return state.amount_millions

    async def put_amount(
        self,
        feed_id: str,
        amount_millions: float,
        observed_at: datetime | None = None,
    ) -> bool:
        observed = utc_timestamp(observed_at)
        record = PersistedFeedState(amount_millions=amount_millions, observed_at=observed)
        try:
            await self._client.set(self._key(feed_id), record.to_json())
        except Exception as exc:  # noqa: BLE001
            logger.warning(
                "jackpots.state_write_failed feed=%s code=%s err=%s", feed_id, ErrorCode.STATE_ERROR.value, exc
            )
            return False
        logger.info("jackpots.state_written feed=%s amount_millions=%s", feed_id, amount_millions)
        return True

    async def aclose(self) -> None:
        await self._client.aclose()

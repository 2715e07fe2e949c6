from __future__ import annotations

import logging

from ....contracts.errors import ErrorCode, SourceUnavailableError, SourceUnparseableError
from ....contracts.schemas.jackpots import FeedResult
from ...http.client import AsyncHttpClient

logger = logging.getLogger(__name__)

ERROR_LABEL = "Error"
NOT_FOUND_LABEL = "Not found"


def unavailable_result(feed_id: str, message: str) -> FeedResult:
    return FeedResult(
        feed_id=feed_id,
        display_amount=ERROR_LABEL,
        amount_millions=0,
        next_event_label=ERROR_LABEL,
        error_message=message,
    )


def unparseable_result(
    feed_id: str,
    message: str,
    next_event_label: str | None = None,
) -> FeedResult:
    return FeedResult(
        feed_id=feed_id,
        display_amount=NOT_FOUND_LABEL,
        amount_millions=0,
        next_event_label=next_event_label or NOT_FOUND_LABEL,
        error_message=message,
    )


class FeedAdapter:
    """Base class for jackpot feeds.

    Subclasses implement ``_fetch``. ``fetch`` never raises: transport errors
    become an "Error" result and parse misses a "Not found" result.
    """

    FEED_ID: str = ""

    def __init__(self, http_client: AsyncHttpClient):
        self.http_client = http_client

    @property
    def feed_id(self) -> str:
        return self.FEED_ID

    async def fetch(self) -> FeedResult:
        try:
            return await self._fetch()
        except SourceUnparseableError as exc:
            logger.warning("feed.unparseable feed=%s code=%s err=%s", self.feed_id, exc.code.value, exc)
            return unparseable_result(
                self.feed_id, str(exc), getattr(exc, "next_event_label", None)
            )
        except SourceUnavailableError as exc:
            logger.warning("feed.unavailable feed=%s code=%s err=%s", self.feed_id, exc.code.value, exc)
            return unavailable_result(self.feed_id, str(exc))
        except Exception as exc:  # noqa: BLE001
            logger.warning(
                "feed.fetch_failed feed=%s code=%s err=%r", self.feed_id, ErrorCode.UPSTREAM_ERROR.value, exc
            )
            return unavailable_result(self.feed_id, str(exc) or exc.__class__.__name__)

    async def _fetch(self) -> FeedResult:
        raise NotImplementedError

from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Any

import httpx

from ....contracts.errors import SourceUnavailableError, SourceUnparseableError
from ....contracts.schemas.jackpots import FeedResult
from ...jackpots.amount import dollars_to_millions, format_jackpot_display
from .feed_base import NOT_FOUND_LABEL, FeedAdapter

logger = logging.getLogger(__name__)


def format_drawing_date(value: datetime) -> str:
    """``Fri, Dec 26, 2025``"""
    return f"{value:%a, %b} {value.day}, {value.year}"


def parse_drawing_date(raw: Any) -> str | None:
    if not raw or not isinstance(raw, str):
        return None
    try:
        return format_drawing_date(datetime.fromisoformat(raw.strip()))
    except ValueError:
        return None


class MegaMillionsApiAdapter(FeedAdapter):
    """Read the next Mega Millions jackpot from the megamillions.com draw-data service.

    The service wraps its payload twice: the response body is JSON whose ``d``
    field is itself a JSON string.
    """

    API_URL = "https://www.megamillions.com/cmspages/utilservice.asmx/GetLatestDrawData"
    FEED_ID = "Mega Millions"

    async def _fetch(self) -> FeedResult:
        try:
            body = await self.http_client.post_json(self.API_URL, {})
        except (httpx.HTTPError, ValueError) as exc:
            raise SourceUnavailableError(str(exc) or exc.__class__.__name__) from exc

        data = self._unwrap(body)
        try:
            prize_pool = float(data["Jackpot"]["NextPrizePool"])
        except (KeyError, TypeError, ValueError) as exc:
            raise SourceUnparseableError(f"Jackpot.NextPrizePool missing: {exc!r}") from exc

        jackpot_millions = dollars_to_millions(prize_pool)
        next_drawing = parse_drawing_date(data.get("NextDrawingDate"))
        logger.info("megamillions.parsed jackpot_millions=%s next=%s", jackpot_millions, next_drawing)

        return FeedResult(
            feed_id=self.FEED_ID,
            display_amount=format_jackpot_display(jackpot_millions),
            amount_millions=jackpot_millions,
            next_event_label=next_drawing or NOT_FOUND_LABEL,
        )

    @staticmethod
    def _unwrap(body: Any) -> dict[str, Any]:
        try:
            inner = body["d"]
            data = json.loads(inner) if isinstance(inner, str) else inner
        except (KeyError, TypeError, ValueError) as exc:
            raise SourceUnparseableError(f"Unexpected draw data payload: {exc!r}") from exc
        if not isinstance(data, dict):
            raise SourceUnparseableError("Unexpected draw data payload: not an object")
        return data

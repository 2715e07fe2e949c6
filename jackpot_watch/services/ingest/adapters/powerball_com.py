from __future__ import annotations

import logging
import re

import httpx

from ....contracts.errors import SourceUnavailableError, SourceUnparseableError
from ....contracts.schemas.jackpots import FeedResult
from ...jackpots.amount import BILLION_IN_MILLIONS, format_jackpot_display
from .feed_base import NOT_FOUND_LABEL, FeedAdapter
from .http_utils import first_match, page_text

logger = logging.getLogger(__name__)

# Most specific first; the bare "$N Million" fallback can hit secondary prizes.
JACKPOT_PATTERNS = (
    re.compile(r"Estimated Jackpot:\s*\$([0-9,.]+)\s*(Million|Billion)", re.IGNORECASE),
    re.compile(r"Jackpot:\s*\$([0-9,.]+)\s*(Million|Billion)", re.IGNORECASE),
    re.compile(r"\$([0-9,.]+)\s*(Million|Billion)", re.IGNORECASE),
)

DRAWING_PATTERNS = (
    re.compile(r"Next Drawing[^:]*:\s*([A-Za-z]+,\s*[A-Za-z]+\s*\d+,\s*\d{4})", re.IGNORECASE),
    re.compile(r"([A-Za-z]+,\s*[A-Za-z]+\s*\d+,\s*\d{4})", re.IGNORECASE),
)


def parse_jackpot_millions(text: str) -> float | None:
    match = first_match(text, JACKPOT_PATTERNS)
    if match is None:
        return None
    try:
        amount = float(match.group(1).replace(",", ""))
    except ValueError:
        return None
    if match.group(2).lower() == "billion":
        return amount * BILLION_IN_MILLIONS
    return amount


def parse_next_drawing(text: str) -> str | None:
    match = first_match(text, DRAWING_PATTERNS)
    if match is None:
        return None
    return match.group(1).strip()


class PowerballComAdapter(FeedAdapter):
    """Scrape the current Powerball jackpot from the powerball.com home page."""

    PAGE_URL = "https://www.powerball.com/"
    FEED_ID = "Powerball"

    async def _fetch(self) -> FeedResult:
        try:
            html = await self.http_client.get_text(self.PAGE_URL)
        except httpx.HTTPError as exc:
            raise SourceUnavailableError(str(exc) or exc.__class__.__name__) from exc
        text = page_text(html)

        next_drawing = parse_next_drawing(text)
        jackpot_millions = parse_jackpot_millions(text)
        if jackpot_millions is None:
            raise SourceUnparseableError(
                "Failed to parse jackpot from HTML",
                next_event_label=next_drawing,
            )

        logger.info("powerball.parsed jackpot_millions=%s next=%s", jackpot_millions, next_drawing)
        return FeedResult(
            feed_id=self.FEED_ID,
            display_amount=format_jackpot_display(jackpot_millions),
            amount_millions=jackpot_millions,
            next_event_label=next_drawing or NOT_FOUND_LABEL,
        )

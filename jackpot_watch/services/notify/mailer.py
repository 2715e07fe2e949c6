"""Crossing alerts sent through an HTTP email API (MailChannels-style JSON payload).

Missing sender/recipient is a valid "notifications disabled" state, checked with
``is_configured`` before anything is built or sent. ``Mailer.send`` never raises
for transport problems; it reports them in ``SendResult``.
"""
from __future__ import annotations

import html
import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from ...contracts.errors import ErrorCode, InvalidInputError
from ...settings.monitor import MonitorConfig
from ..http.client import AsyncHttpClient
from ..jackpots.amount import format_jackpot_display
from ..jackpots.crossing import require_finite

logger = logging.getLogger(__name__)

UNREADABLE_BODY = "<unreadable body>"


@dataclass(frozen=True, slots=True)
class SendResult:
    success: bool
    error_detail: Optional[str] = None


def is_configured(config: MonitorConfig) -> bool:
    return bool((config.email_from or "").strip() and (config.email_to or "").strip())


def _require_label(name: str, value: object) -> str:
    if not isinstance(value, str) or not value.strip():
        raise InvalidInputError(f"{name} must be a non-empty string")
    return value


def build_subject(feed_label: str, threshold_millions: float) -> str:
    _require_label("feed_label", feed_label)
    threshold_millions = require_finite("threshold_millions", threshold_millions)
    return f"{feed_label} jackpot crossed {format_jackpot_display(threshold_millions)}"


def build_message(
    feed_label: str,
    previous_amount_millions: float,
    current_amount_millions: float,
    threshold_millions: float,
    next_event_label: str,
) -> str:
    """HTML body for a threshold crossing alert.

    Raises:
        InvalidInputError: for blank labels or non-finite amounts.
    """
    feed_label = _require_label("feed_label", feed_label)
    next_event_label = _require_label("next_event_label", next_event_label)
    previous = require_finite("previous_amount_millions", previous_amount_millions)
    current = require_finite("current_amount_millions", current_amount_millions)
    threshold = require_finite("threshold_millions", threshold_millions)

    rows = [
        ("Lottery", feed_label),
        ("Previous jackpot", format_jackpot_display(previous)),
        ("Current jackpot", format_jackpot_display(current)),
        ("Threshold", format_jackpot_display(threshold)),
        ("Next drawing", next_event_label),
    ]
    table = "\n".join(
        f"    <tr><th align=\"left\">{html.escape(k)}</th><td>{html.escape(v)}</td></tr>"
        for k, v in rows
    )
    return (
        f"<h2>{html.escape(feed_label)} jackpot alert</h2>\n"
        f"<p>The {html.escape(feed_label)} jackpot has reached "
        f"{html.escape(format_jackpot_display(current))}, crossing your threshold of "
        f"{html.escape(format_jackpot_display(threshold))}.</p>\n"
        "<table>\n"
        f"{table}\n"
        "</table>\n"
    )


class Mailer:
    def __init__(
        self,
        http_client: AsyncHttpClient,
        *,
        api_url: str,
        api_key: Optional[str] = None,
    ) -> None:
        self.http_client = http_client
        self.api_url = api_url
        self.api_key = api_key

    def _payload(self, sender: str, recipient: str, subject: str, body: str) -> dict:
        return {
            "personalizations": [{"to": [{"email": recipient}]}],
            "from": {"email": sender},
            "subject": subject,
            "content": [{"type": "text/html", "value": body}],
        }

    async def send(self, sender: str, recipient: str, subject: str, body: str) -> SendResult:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["X-Api-Key"] = self.api_key
        try:
            resp = await self.http_client.request(
                "POST",
                self.api_url,
                json=self._payload(sender, recipient, subject, body),
                headers=headers,
            )
        except httpx.HTTPError as exc:
            detail = str(exc) or exc.__class__.__name__
            logger.warning(
                "mailer.send_failed to=%s code=%s err=%s", recipient, ErrorCode.TRANSPORT_ERROR.value, detail
            )
            return SendResult(success=False, error_detail=detail)

        if resp.is_success:
            return SendResult(success=True)

        try:
            text = resp.text
        except Exception:  # noqa: BLE001
            text = UNREADABLE_BODY
        detail = f"{resp.status_code} {resp.reason_phrase}: {text}"
        logger.warning(
            "mailer.send_rejected to=%s code=%s detail=%s", recipient, ErrorCode.TRANSPORT_ERROR.value, detail
        )
        return SendResult(success=False, error_detail=detail)

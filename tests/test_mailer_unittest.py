from __future__ import annotations

import json
import math
import unittest

import httpx

from jackpot_watch.contracts.errors import InvalidInputError
from jackpot_watch.services.http.client import AsyncHttpClient
from jackpot_watch.services.notify.mailer import (
    UNREADABLE_BODY,
    Mailer,
    build_message,
    build_subject,
    is_configured,
)
from jackpot_watch.settings.monitor import MonitorConfig

API_URL = "https://mail.example.test/send"


class _UndecodableResponse(httpx.Response):
    @property
    def text(self) -> str:
        raise UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte")


class BuildMessageTestCase(unittest.TestCase):
    def test_renders_all_amounts_through_formatter(self):
        body = build_message("Powerball", 1000, 1700, 1500, "Wed, Dec 25, 2024")
        self.assertIn("Powerball", body)
        self.assertIn("$1.00 Billion", body)
        self.assertIn("$1.70 Billion", body)
        self.assertIn("$1.50 Billion", body)
        self.assertIn("Wed, Dec 25, 2024", body)
        self.assertIn("<table>", body)

    def test_labels_are_escaped(self):
        body = build_message("Mega <Millions>", 0, 1500, 1500, "Fri & Sat")
        self.assertIn("Mega &lt;Millions&gt;", body)
        self.assertIn("Fri &amp; Sat", body)

    def test_rejects_bad_inputs(self):
        good = ["Powerball", 1000, 1700, 1500, "Wed, Dec 25, 2024"]
        bad_cases = [
            (0, ""),
            (0, "   "),
            (0, None),
            (1, math.nan),
            (2, "1700"),
            (3, math.inf),
            (4, ""),
            (4, 12),
        ]
        for position, bad in bad_cases:
            args = list(good)
            args[position] = bad
            with self.subTest(position=position, bad=bad):
                with self.assertRaises(InvalidInputError):
                    build_message(*args)

    def test_subject(self):
        self.assertEqual(build_subject("Mega Millions", 1500), "Mega Millions jackpot crossed $1.50 Billion")


class IsConfiguredTestCase(unittest.TestCase):
    def test_requires_sender_and_recipient(self):
        self.assertTrue(is_configured(MonitorConfig(email_from="a@example.com", email_to="b@example.com")))
        self.assertFalse(is_configured(MonitorConfig(email_from="a@example.com")))
        self.assertFalse(is_configured(MonitorConfig(email_to="b@example.com")))
        self.assertFalse(is_configured(MonitorConfig(email_from=" ", email_to="b@example.com")))
        self.assertFalse(is_configured(MonitorConfig()))


class MailerSendTestCase(unittest.IsolatedAsyncioTestCase):
    async def _send(self, handler, api_key=None):
        async with AsyncHttpClient(transport=httpx.MockTransport(handler)) as client:
            mailer = Mailer(client, api_url=API_URL, api_key=api_key)
            return await mailer.send("alerts@example.com", "me@example.com", "subject", "<p>body</p>")

    async def test_success_posts_payload(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["payload"] = json.loads(request.content)
            seen["api_key"] = request.headers.get("X-Api-Key")
            return httpx.Response(202)

        result = await self._send(handler, api_key="secret")
        self.assertTrue(result.success)
        self.assertIsNone(result.error_detail)
        self.assertEqual(seen["url"], API_URL)
        self.assertEqual(seen["api_key"], "secret")
        payload = seen["payload"]
        self.assertEqual(payload["from"], {"email": "alerts@example.com"})
        self.assertEqual(payload["personalizations"], [{"to": [{"email": "me@example.com"}]}])
        self.assertEqual(payload["subject"], "subject")
        self.assertEqual(payload["content"], [{"type": "text/html", "value": "<p>body</p>"}])

    async def test_no_api_key_header_when_unset(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["has_key"] = "X-Api-Key" in request.headers
            return httpx.Response(200)

        result = await self._send(handler)
        self.assertTrue(result.success)
        self.assertFalse(seen["has_key"])

    async def test_rejection_reports_status_and_body(self):
        result = await self._send(lambda request: httpx.Response(401, text="bad credentials"))
        self.assertFalse(result.success)
        self.assertIn("401", result.error_detail)
        self.assertIn("Unauthorized", result.error_detail)
        self.assertIn("bad credentials", result.error_detail)

    async def test_unreadable_rejection_body_uses_placeholder(self):
        result = await self._send(lambda request: _UndecodableResponse(500, content=b"\xff\xfe"))
        self.assertFalse(result.success)
        self.assertEqual(result.error_detail, f"500 Internal Server Error: {UNREADABLE_BODY}")

    async def test_transport_error_is_reported_not_raised(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectTimeout("timed out", request=request)

        result = await self._send(handler)
        self.assertFalse(result.success)
        self.assertEqual(result.error_detail, "timed out")


if __name__ == "__main__":
    unittest.main()

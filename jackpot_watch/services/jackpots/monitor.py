"""Jackpot run orchestration.

One run fetches both feeds, reads the last persisted amounts, evaluates the
threshold, detects upward crossings, then schedules e-mail dispatch and state
writes as tracked background tasks. The caller (celery task, FastAPI
BackgroundTasks, CLI) owns draining those tasks with ``drain``.
"""
from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, AsyncIterator, Awaitable, Iterable, Sequence

from prometheus_client import Counter
from pydantic.alias_generators import to_camel

from ...contracts.errors import InvalidInputError
from ...contracts.schemas.jackpots import FeedResult, SnapshotResponse
from ...settings.config import Settings
from ...settings.monitor import MonitorConfig
from ..http.client import AsyncHttpClient
from ..ingest.adapters import FeedAdapter, MegaMillionsApiAdapter, PowerballComAdapter
from ..notify.mailer import Mailer, build_message, build_subject, is_configured
from .crossing import CrossingDecision, detect_crossing
from .state_store import StateStore, build_redis_client
from .threshold import ThresholdEvaluation, evaluate, resolve_threshold
from .timestamps import utc_timestamp

logger = logging.getLogger(__name__)

RUN_COUNT = Counter(
    "jackpot_runs_total",
    "Scheduled jackpot check runs",
    ["outcome"],
)
CROSSING_COUNT = Counter(
    "jackpot_crossings_total",
    "Upward threshold crossings detected",
    ["feed"],
)
NOTIFICATION_COUNT = Counter(
    "jackpot_notifications_total",
    "Crossing notifications dispatched",
    ["feed", "status"],
)


def feed_key(feed_id: str) -> str:
    """Response key for a feed: "Mega Millions" -> "megaMillions"."""
    return to_camel("_".join(feed_id.lower().split()))


@dataclass(slots=True)
class PendingNotification:
    feed_id: str
    subject: str
    body: str


@dataclass(slots=True)
class RunSummary:
    timestamp: str
    evaluation: ThresholdEvaluation
    decisions: list[CrossingDecision]
    notified_feed_ids: list[str] = field(default_factory=list)
    background_tasks: list[asyncio.Task] = field(default_factory=list)

    @property
    def crossed_feed_ids(self) -> list[str]:
        return [d.feed_id for d in self.decisions if d.crossed]

    def to_payload(self) -> dict[str, Any]:
        return {
            "status": "ok",
            "timestamp": self.timestamp,
            "feeds": {feed_key(r.feed_id): r.to_payload() for r in self.evaluation.results},
            "threshold": self.evaluation.threshold.to_payload(),
            "crossings": self.crossed_feed_ids,
            "notifications": list(self.notified_feed_ids),
        }


async def drain(tasks: Iterable[Awaitable[Any]]) -> list[Any]:
    """Wait for tracked background work; failures are returned, not raised."""
    return await asyncio.gather(*tasks, return_exceptions=True)


class JackpotMonitor:
    def __init__(
        self,
        adapters: Sequence[FeedAdapter],
        state_store: StateStore,
        mailer: Mailer,
        config: MonitorConfig,
    ) -> None:
        self.adapters = list(adapters)
        self.state_store = state_store
        self.mailer = mailer
        self.config = config

    @property
    def feed_ids(self) -> list[str]:
        return [a.feed_id for a in self.adapters]

    async def fetch_feeds(self) -> list[FeedResult]:
        return list(await asyncio.gather(*(a.fetch() for a in self.adapters)))

    async def load_previous(self, feed_ids: Sequence[str]) -> list[float]:
        return list(
            await asyncio.gather(*(self.state_store.get_previous_amount(f) for f in feed_ids))
        )

    def _evaluate(self, results: Sequence[FeedResult]) -> ThresholdEvaluation:
        threshold = resolve_threshold(
            self.config.threshold_raw,
            self.config.default_threshold_millions,
        )
        return evaluate(results, threshold)

    async def snapshot(self, now: datetime | None = None) -> dict[str, Any]:
        """Current annotated readings; no state is read or written, nothing is sent."""
        results = await self.fetch_feeds()
        evaluation = self._evaluate(results)
        payload: dict[str, Any] = {"timestamp": utc_timestamp(now)}
        for result in evaluation.results:
            payload[feed_key(result.feed_id)] = result.to_payload()
        payload["threshold"] = evaluation.threshold.to_payload()
        return SnapshotResponse.model_validate(payload).to_payload()

    async def run(self, now: datetime | None = None) -> RunSummary | None:
        """Full scheduled check.

        Returns None when the run failed before scheduling any side effect.
        ``InvalidInputError`` is a caller bug and propagates.
        """
        try:
            summary = await self._run(now)
        except InvalidInputError:
            RUN_COUNT.labels("invalid_input").inc()
            raise
        except Exception:  # noqa: BLE001
            logger.exception("jackpots.run_failed")
            RUN_COUNT.labels("failed").inc()
            return None
        RUN_COUNT.labels("ok").inc()
        return summary

    async def _run(self, now: datetime | None) -> RunSummary:
        observed_at = now or datetime.now(timezone.utc)
        logger.info("jackpots.run_started at=%s", utc_timestamp(observed_at))

        results = await self.fetch_feeds()
        previous = await self.load_previous([r.feed_id for r in results])
        evaluation = self._evaluate(results)
        threshold = evaluation.config.amount_millions

        decisions: list[CrossingDecision] = []
        for result, prev in zip(results, previous):
            # A failed fetch is observed as 0 so it can never cross
            current = 0.0 if result.has_error else result.amount_millions
            decisions.append(detect_crossing(prev, current, threshold, feed_id=result.feed_id))

        pending = self._prepare_notifications(results, decisions)
        self._log_summary(evaluation, decisions)

        summary = RunSummary(
            timestamp=utc_timestamp(observed_at),
            evaluation=evaluation,
            decisions=decisions,
            notified_feed_ids=[p.feed_id for p in pending],
        )
        for note in pending:
            summary.background_tasks.append(
                asyncio.create_task(self._notify(note), name=f"notify:{note.feed_id}")
            )
        for result in results:
            amount = 0.0 if result.has_error else result.amount_millions
            summary.background_tasks.append(
                asyncio.create_task(
                    self._persist(result.feed_id, amount, observed_at),
                    name=f"persist:{result.feed_id}",
                )
            )
        return summary

    def _prepare_notifications(
        self,
        results: Sequence[FeedResult],
        decisions: Sequence[CrossingDecision],
    ) -> list[PendingNotification]:
        enabled = is_configured(self.config)
        pending: list[PendingNotification] = []
        for result, decision in zip(results, decisions):
            if not decision.crossed or result.has_error:
                continue
            CROSSING_COUNT.labels(decision.feed_id).inc()
            if not enabled:
                logger.info(
                    "jackpots.notify_skipped feed=%s reason=transport_not_configured",
                    decision.feed_id,
                )
                continue
            pending.append(
                PendingNotification(
                    feed_id=decision.feed_id,
                    subject=build_subject(decision.feed_id, decision.threshold_millions),
                    body=build_message(
                        decision.feed_id,
                        decision.previous_amount_millions,
                        decision.current_amount_millions,
                        decision.threshold_millions,
                        result.next_event_label,
                    ),
                )
            )
        return pending

    async def _notify(self, note: PendingNotification) -> bool:
        try:
            outcome = await self.mailer.send(
                self.config.email_from or "",
                self.config.email_to or "",
                note.subject,
                note.body,
            )
        except Exception:  # noqa: BLE001
            logger.exception("jackpots.notify_crashed feed=%s", note.feed_id)
            NOTIFICATION_COUNT.labels(note.feed_id, "error").inc()
            return False
        if outcome.success:
            logger.info("jackpots.notify_sent feed=%s to=%s", note.feed_id, self.config.email_to)
            NOTIFICATION_COUNT.labels(note.feed_id, "sent").inc()
        else:
            logger.error("jackpots.notify_failed feed=%s detail=%s", note.feed_id, outcome.error_detail)
            NOTIFICATION_COUNT.labels(note.feed_id, "failed").inc()
        return outcome.success

    async def _persist(self, feed_id: str, amount_millions: float, observed_at: datetime) -> bool:
        try:
            return await self.state_store.put_amount(feed_id, amount_millions, observed_at)
        except Exception:  # noqa: BLE001
            logger.exception("jackpots.persist_crashed feed=%s", feed_id)
            return False

    def _log_summary(
        self,
        evaluation: ThresholdEvaluation,
        decisions: Sequence[CrossingDecision],
    ) -> None:
        for result in evaluation.results:
            logger.info("%s: %s", result.feed_id, result.to_payload())
        logger.info("Threshold: %s", evaluation.threshold.to_payload())
        for decision in decisions:
            if decision.crossed:
                logger.info(
                    "CROSSING: %s rose from %s to %s (threshold %s)",
                    decision.feed_id,
                    decision.previous_amount_millions,
                    decision.current_amount_millions,
                    decision.threshold_millions,
                )
        if evaluation.exceeded_any:
            logger.info(
                "ALERT: %s exceeded threshold of %s",
                " and ".join(evaluation.exceeding_feed_ids),
                evaluation.threshold.display,
            )

    async def aclose(self) -> None:
        await self.mailer.http_client.aclose()
        await self.state_store.aclose()


def build_monitor(settings: Settings) -> JackpotMonitor:
    http_client = AsyncHttpClient(timeout=settings.http_timeout)
    adapters = [
        MegaMillionsApiAdapter(http_client),
        PowerballComAdapter(http_client),
    ]
    state_store = StateStore(
        build_redis_client(settings.redis_url),
        key_prefix=settings.state_key_prefix,
    )
    mailer = Mailer(
        http_client,
        api_url=settings.mail_api_url,
        api_key=settings.mail_api_key,
    )
    return JackpotMonitor(adapters, state_store, mailer, MonitorConfig.from_settings(settings))


@asynccontextmanager
async def monitor_session(settings: Settings) -> AsyncIterator[JackpotMonitor]:
    monitor = build_monitor(settings)
    try:
        yield monitor
    finally:
        await monitor.aclose()

from __future__ import annotations

import asyncio
import logging

from ..celery_app import celery_app
from ..settings.config import settings
from .jackpots.monitor import drain, monitor_session

logger = logging.getLogger(__name__)


async def check_jackpots() -> dict:
    """Run one scheduled check and wait for its background work before returning."""
    async with monitor_session(settings) as monitor:
        summary = await monitor.run()
        if summary is None:
            return {"status": "failed"}
        outcomes = await drain(summary.background_tasks)
        failures = [o for o in outcomes if isinstance(o, BaseException)]
        if failures:
            logger.warning("jackpots.background_failures count=%d", len(failures))
        return summary.to_payload()


@celery_app.task(name="jackpot_watch.services.tasks.task_check_jackpots")
def task_check_jackpots() -> dict:
    return asyncio.run(check_jackpots())

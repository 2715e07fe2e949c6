#!/usr/bin/env python3
from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from dataclasses import asdict
from typing import Any

from .settings.config import reload_settings
from .services.jackpots.monitor import drain, monitor_session


async def _snapshot(args: argparse.Namespace) -> dict[str, Any]:
    async with monitor_session(reload_settings()) as monitor:
        return await monitor.snapshot()


async def _run(args: argparse.Namespace) -> dict[str, Any]:
    async with monitor_session(reload_settings()) as monitor:
        summary = await monitor.run()
        if summary is None:
            return {"status": "failed"}
        await drain(summary.background_tasks)
        return summary.to_payload()


async def _state(args: argparse.Namespace) -> dict[str, Any]:
    async with monitor_session(reload_settings()) as monitor:
        out: dict[str, Any] = {}
        for feed_id in monitor.feed_ids:
            state = await monitor.state_store.get_state(feed_id)
            out[feed_id] = asdict(state) if state else None
        return out


COMMANDS = {
    "snapshot": _snapshot,
    "run": _run,
    "state": _state,
}


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Check lottery jackpots against the alert threshold.")
    parser.add_argument(
        "command",
        choices=sorted(COMMANDS),
        help="snapshot: read-only check; run: full check with alerts and state; state: show stored amounts",
    )
    parser.add_argument("--log-level", default="INFO")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        stream=sys.stderr,
    )
    result = asyncio.run(COMMANDS[args.command](args))
    print(json.dumps(result, indent=2, ensure_ascii=False))
    return 1 if result.get("status") == "failed" else 0


if __name__ == "__main__":
    raise SystemExit(main())

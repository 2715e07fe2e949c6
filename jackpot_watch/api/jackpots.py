from __future__ import annotations

import logging

from fastapi import APIRouter, BackgroundTasks, Request
from fastapi.responses import JSONResponse

from ..contracts.errors import ErrorCode, InvalidInputError, JackpotWatchError
from ..contracts.schemas.jackpots import ErrorResponse, SnapshotResponse
from ..services.jackpots.monitor import JackpotMonitor, drain

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/jackpots", tags=["jackpots"])


def _get_monitor(request: Request) -> JackpotMonitor:
    return request.app.state.monitor


def _error_response(message: str) -> JSONResponse:
    return JSONResponse(status_code=500, content=ErrorResponse(error=message).model_dump())


@router.get(
    "",
    response_model=SnapshotResponse,
    response_model_by_alias=True,
    response_model_exclude_none=True,
    responses={500: {"model": ErrorResponse}},
)
async def jackpot_snapshot(request: Request):
    """Current jackpots with threshold flags. Feed failures show up per feed, not as errors."""
    try:
        return await _get_monitor(request).snapshot()
    except Exception as exc:  # noqa: BLE001
        code = exc.code if isinstance(exc, JackpotWatchError) else ErrorCode.INTERNAL_ERROR
        logger.exception("jackpots.snapshot_failed code=%s", code.value)
        return _error_response(str(exc) or exc.__class__.__name__)


@router.post("/check", responses={500: {"model": ErrorResponse}})
async def jackpot_check(request: Request, background_tasks: BackgroundTasks):
    """Full check on demand: notifications and state writes finish after the response."""
    try:
        summary = await _get_monitor(request).run()
    except InvalidInputError as exc:
        logger.error("jackpots.check_rejected code=%s err=%s", exc.code.value, exc)
        return _error_response(str(exc) or exc.__class__.__name__)
    if summary is None:
        return _error_response("jackpot check failed")
    background_tasks.add_task(drain, summary.background_tasks)
    return summary.to_payload()

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST

from . import __version__
from .api import router as api_router
from .services.jackpots.monitor import build_monitor
from .settings.config import settings

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.monitor = build_monitor(settings)
    try:
        yield
    finally:
        await app.state.monitor.aclose()


app = FastAPI(title="Jackpot Watch API", version=__version__, lifespan=lifespan)
app.include_router(api_router, prefix="/api/v1")


REQUEST_COUNT = Counter(
    "jackpot_api_requests_total",
    "API request count",
    ["method", "endpoint", "status"],
)
REQUEST_LATENCY = Histogram(
    "jackpot_api_request_latency_seconds",
    "API request latency",
    ["endpoint"],
)


@app.middleware("http")
async def metrics_middleware(request: Request, call_next):
    start = time.perf_counter()
    response: Response = await call_next(request)
    elapsed = time.perf_counter() - start
    endpoint = request.url.path
    REQUEST_COUNT.labels(request.method, endpoint, response.status_code).inc()
    REQUEST_LATENCY.labels(endpoint).observe(elapsed)
    logging.getLogger("jackpot_watch").info(
        "request", extra={"method": request.method, "path": endpoint, "status": response.status_code, "latency": elapsed}
    )
    return response


@app.get("/api/v1/health")
def health_check() -> dict:
    return {
        "status": "ok",
        "env": settings.env,
    }


@app.get("/metrics")
def metrics():
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

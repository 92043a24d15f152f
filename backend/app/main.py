"""
MODA Production Core API
FastAPI service for shop-drawing matching (BLM codes) and heat-map
difficulty scoring. Stateless: every request carries the data it needs.
"""
import time
import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.config import APP_NAME, APP_VERSION, CORS_ORIGINS, JSON_LOGS, LOG_LEVEL
from app.services.logging_config import setup_logging
from app.services.middleware import RequestTimingMiddleware
from app.services.perf_monitor import tracker as perf_tracker
from app.api.drawing_routes import router as drawing_router
from app.api.heat_map_routes import router as heat_map_router

setup_logging(level=LOG_LEVEL, json_output=JSON_LOGS)
logger = logging.getLogger("moda-api")

# Record process start time for uptime calculation
_PROCESS_START = time.monotonic()

app = FastAPI(
    title=APP_NAME,
    version=APP_VERSION,
    description="BLM drawing matching and station difficulty scoring for modular production",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "Accept", "X-Request-ID"],
)
# Request timing + X-Request-ID must be outermost so it wraps all other middleware
app.add_middleware(RequestTimingMiddleware)

app.include_router(drawing_router)
app.include_router(heat_map_router)


@app.get("/health")
async def health_check():
    return {"status": "active", "version": APP_VERSION}


@app.get("/metrics")
async def metrics():
    """
    Core operation metrics from the in-process PerformanceTracker:
    call counts, average and slowest durations, errors per operation.
    """
    snapshot = perf_tracker.get_metrics()
    return {
        "uptime_seconds": round(time.monotonic() - _PROCESS_START, 1),
        **snapshot,
    }


logger.info(f"{APP_NAME} v{APP_VERSION} ready")

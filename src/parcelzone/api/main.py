"""parcelzone API — FastAPI application for parcel and zoning lookup.

Run:
    uvicorn parcelzone.api.main:app --reload
    # or
    parcelzone-api
"""

import logging
import uuid
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from parcelzone import __version__
from parcelzone.api.routes import router
from parcelzone.config import settings
from parcelzone.observability.logging import bound_correlation_id, setup_logging
from parcelzone.observability.tracing import configure_tracing
from parcelzone.rules.catalog import get_catalog

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Configure logging and tracing, load the rules catalog once at startup."""
    setup_logging(json_format=settings.log_json, level=settings.log_level)
    configure_tracing(settings.mlflow_tracking_uri, settings.mlflow_experiment_name)

    rules = get_catalog()
    logger.info("parcelzone API ready (%d zoning rules)", len(rules))
    yield
    logger.info("Shutting down")


class CorrelationIDMiddleware(BaseHTTPMiddleware):
    """Set correlation ID from X-Request-ID header or generate a new one."""

    async def dispatch(self, request: Request, call_next):
        cid = request.headers.get("x-request-id", str(uuid.uuid4()))
        with bound_correlation_id(cid):
            response = await call_next(request)
        response.headers["x-request-id"] = cid
        return response


app = FastAPI(
    title="parcelzone",
    description="What can be built here? Parcel, zoning district, height/bulk district "
    "and zoning rules for San Francisco addresses.",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(CorrelationIDMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router)


@app.get("/health")
async def health():
    """Health check — verifies the zoning rules catalog is loaded."""
    checks = {}
    try:
        checks["rules_catalog"] = len(get_catalog())
    except Exception as e:
        checks["rules_catalog"] = f"error: {e}"

    status = "healthy" if isinstance(checks["rules_catalog"], int) and checks["rules_catalog"] else "degraded"
    return {"status": status, "version": __version__, "checks": checks}


def main() -> None:
    """Entry point for the parcelzone-api console script."""
    uvicorn.run("parcelzone.api.main:app", host="0.0.0.0", port=8000)

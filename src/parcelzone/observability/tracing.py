"""Thin MLflow tracing helpers used across the lookup pipeline.

Usage:

    from parcelzone.observability.tracing import trace, start_span

    @trace(name="geocode", span_type="TOOL")
    async def geocode(...): ...

    with start_span("decode_row") as span:
        span.set_inputs({...})
"""

import logging
from contextlib import contextmanager

import mlflow

logger = logging.getLogger(__name__)


def trace(name: str | None = None, **kwargs):
    """Decorator: wraps a sync or async function in an MLflow trace span."""
    return mlflow.trace(name=name, **kwargs) if name else mlflow.trace(**kwargs)


@contextmanager
def start_span(name: str = "span", **kwargs):
    """Context manager: MLflow span. Yields a no-op span while tracing is disabled."""
    with mlflow.start_span(name=name, **kwargs) as span:
        yield span


def configure_tracing(tracking_uri: str, experiment_name: str) -> None:
    """Point MLflow at the tracking server and experiment for this process."""
    mlflow.set_tracking_uri(tracking_uri)
    mlflow.set_experiment(experiment_name)
    logger.info("MLflow tracing enabled: %s", tracking_uri)


def disable_tracing() -> None:
    mlflow.tracing.disable()


def enable_tracing() -> None:
    mlflow.tracing.enable()

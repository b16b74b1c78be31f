"""Shared test fixtures."""

from unittest.mock import AsyncMock, MagicMock

import mlflow
import pytest

from parcelzone.observability.tracing import disable_tracing, enable_tracing


@pytest.fixture(scope="session")
def mlflow_tracking_uri(tmp_path_factory):
    """Tracking store for the test session, kept out of the working directory."""
    return f"sqlite:///{tmp_path_factory.mktemp('mlruns') / 'mlflow.db'}"


@pytest.fixture(autouse=True)
def _disable_mlflow_tracing(mlflow_tracking_uri):
    """Disable MLflow tracing during tests; anything MLflow does write lands in a temp dir."""
    previous = mlflow.get_tracking_uri()
    mlflow.set_tracking_uri(mlflow_tracking_uri)
    disable_tracing()
    yield
    enable_tracing()
    mlflow.set_tracking_uri(previous)


def make_response(payload=None, status_code: int = 200, text: str = "") -> MagicMock:
    """Fake httpx.Response with a JSON body."""
    resp = MagicMock()
    resp.status_code = status_code
    resp.is_success = 200 <= status_code < 300
    resp.text = text
    if isinstance(payload, Exception):
        resp.json.side_effect = payload
    else:
        resp.json.return_value = payload
    return resp


def make_client(response=None, side_effect=None) -> AsyncMock:
    """Fake httpx.AsyncClient usable as an async context manager."""
    client = AsyncMock()
    if side_effect is not None:
        client.get.side_effect = side_effect
    else:
        client.get.return_value = response
    client.__aenter__ = AsyncMock(return_value=client)
    client.__aexit__ = AsyncMock(return_value=False)
    return client


@pytest.fixture
def fake_response():
    return make_response


@pytest.fixture
def fake_client():
    return make_client

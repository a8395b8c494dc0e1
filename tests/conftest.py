"""Shared pytest fixtures for Prodia client tests."""

from __future__ import annotations

import json
from typing import Callable

import httpx
import pytest

from prodia.client import ProdiaClient
from prodia.config import ProdiaConfig


BASE_URL = "https://api.prodia.test/v1"


@pytest.fixture
def test_config() -> ProdiaConfig:
    """Configuration pointing at a fake host with no poll delay."""
    return ProdiaConfig(
        base_url=BASE_URL,
        timeout_seconds=5.0,
        poll_interval_seconds=0.0,
        key_file="missing/prodia.key",
    )


@pytest.fixture
def recorded_requests() -> list[httpx.Request]:
    """Requests seen by the mock transport, in order."""
    return []


@pytest.fixture
def make_client(
    test_config: ProdiaConfig, recorded_requests: list[httpx.Request]
) -> Callable[..., ProdiaClient]:
    """Build a client whose HTTP calls are answered by `handler`.

    Args:
        handler: Callable taking an `httpx.Request` and returning an
            `httpx.Response`.

    Returns:
        Factory producing `ProdiaClient` instances bound to a mock transport.
    """

    def factory(handler, api_key: str = "test-key") -> ProdiaClient:
        def recording_handler(request: httpx.Request) -> httpx.Response:
            recorded_requests.append(request)
            return handler(request)

        transport = httpx.MockTransport(recording_handler)
        return ProdiaClient(api_key, config=test_config, transport=transport)

    return factory


def _json_response(payload, status_code: int = 200) -> httpx.Response:
    return httpx.Response(status_code, content=json.dumps(payload).encode("utf-8"))


@pytest.fixture
def json_response():
    """Factory building a JSON response with the given status."""
    return _json_response


@pytest.fixture
def job_sequence():
    """Factory for handlers answering successive `/job/{id}` calls.

    Each call pops the next status; a `succeeded` payload carries `imageUrl`.
    """

    def factory(*statuses: str, job_id: str = "job-1"):
        remaining = list(statuses)

        def handler(request: httpx.Request) -> httpx.Response:
            status = remaining.pop(0)
            payload = {"job": job_id, "status": status}
            if status == "succeeded":
                payload["imageUrl"] = f"https://images.prodia.test/{job_id}.png"
            return _json_response(payload)

        return handler

    return factory

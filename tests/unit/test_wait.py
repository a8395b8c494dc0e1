"""Tests for ProdiaClient.wait — poll-until-complete behaviour."""

from __future__ import annotations

import asyncio

import pytest

from prodia.errors import ProdiaJobFailedError, ProdiaPollingTimeout, ProdiaRequestError
from prodia.job_types import Job, JobResult, JobStatus


@pytest.fixture
def sleeps(monkeypatch) -> list[float]:
    """Record poll delays instead of sleeping."""
    recorded: list[float] = []

    async def fake_sleep(delay):
        recorded.append(delay)

    monkeypatch.setattr("prodia.client.asyncio.sleep", fake_sleep)
    return recorded


class TestWaitSuccess:
    """Polling that ends in `succeeded`."""

    def test_returns_after_each_status_fetch(self, make_client, recorded_requests, job_sequence, sleeps):
        client = make_client(job_sequence("generating", "succeeded"))
        job = Job(job="job-1", status=JobStatus.QUEUED)

        result = asyncio.run(client.wait(job))

        assert isinstance(result, JobResult)
        assert result.status is JobStatus.SUCCEEDED
        assert result.image_url == "https://images.prodia.test/job-1.png"
        assert len(recorded_requests) == 2
        assert all(r.url.path == "/v1/job/job-1" for r in recorded_requests)

    def test_sleeps_poll_interval_between_fetches(self, make_client, job_sequence, sleeps, test_config):
        client = make_client(job_sequence("queued", "generating", "succeeded"))
        asyncio.run(client.wait(Job(job="job-1", status=JobStatus.QUEUED)))
        assert sleeps == [test_config.poll_interval_seconds] * 3

    def test_already_succeeded_job_is_returned_without_fetch(self, make_client, recorded_requests, json_response, sleeps):
        client = make_client(lambda request: json_response({}))
        job = JobResult(
            job="job-2",
            status=JobStatus.SUCCEEDED,
            raw={"job": "job-2", "status": "succeeded", "imageUrl": "https://x.test/2.png"},
            image_url="https://x.test/2.png",
        )

        result = asyncio.run(client.wait(job))

        assert result is job
        assert recorded_requests == []
        assert sleeps == []

    def test_succeeded_plain_job_is_promoted_to_result(self, make_client, sleeps):
        client = make_client(lambda request: None)
        job = Job.from_payload({"job": "job-3", "status": "succeeded", "imageUrl": "https://x.test/3.png"})

        result = asyncio.run(client.wait(job))

        assert isinstance(result, JobResult)
        assert result.image_url == "https://x.test/3.png"


class TestWaitFailure:
    """Polling that ends in `failed` or exhausts a cap."""

    def test_failed_status_raises(self, make_client, recorded_requests, job_sequence, sleeps):
        client = make_client(job_sequence("generating", "failed"))

        with pytest.raises(ProdiaJobFailedError, match="Failed to generate image.") as excinfo:
            asyncio.run(client.wait(Job(job="job-1", status=JobStatus.QUEUED)))

        assert excinfo.value.job_id == "job-1"
        assert len(recorded_requests) == 2

    def test_initially_failed_job_raises_without_fetch(self, make_client, recorded_requests, sleeps):
        client = make_client(lambda request: None)
        with pytest.raises(ProdiaJobFailedError):
            asyncio.run(client.wait(Job(job="job-1", status=JobStatus.FAILED)))
        assert recorded_requests == []

    def test_max_attempts_caps_polling(self, make_client, recorded_requests, job_sequence, sleeps):
        client = make_client(job_sequence("queued", "generating", "generating"))

        with pytest.raises(ProdiaPollingTimeout):
            asyncio.run(client.wait(Job(job="job-1", status=JobStatus.QUEUED), max_attempts=3))

        assert len(recorded_requests) == 3

    def test_cap_not_hit_when_job_finishes_in_time(self, make_client, job_sequence, sleeps):
        client = make_client(job_sequence("generating", "succeeded"))
        result = asyncio.run(client.wait(Job(job="job-1", status=JobStatus.QUEUED), max_attempts=2))
        assert result.status is JobStatus.SUCCEEDED

    def test_unrecognised_status_while_polling_raises_request_error(self, make_client, json_response, sleeps):
        client = make_client(lambda request: json_response({"job": "job-1", "status": "processing"}))
        with pytest.raises(ProdiaRequestError, match="Failed to receive a valid response."):
            asyncio.run(client.wait(Job(job="job-1", status=JobStatus.QUEUED)))

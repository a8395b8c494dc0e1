"""Asynchronous transport client for the Prodia image-generation API.

Architectural role:
    Wraps every remote endpoint in one coroutine. Each wrapper builds a
    `ProdiaRequest`, hands it to the shared dispatcher, validates that a body
    came back, and returns a typed job handle or the decoded list.

Request flow:
    `generate(params)` -> `send_request(ProdiaRequest)` -> `httpx.AsyncClient`
    -> status mapping -> decoded JSON -> `Job`.

Retry behavior:
    None. Each HTTP call is attempted once with the configured timeout.

Polling:
    `wait` re-fetches `/job/{id}` on a fixed interval until the job succeeds or
    fails. Without `max_attempts` the loop is unbounded; callers wanting a time
    budget should pass a cap or cancel the awaiting task.

Error handling strategy:
    Status codes map onto the `prodia.errors` taxonomy and are raised to the
    caller, as are 200 bodies that are not JSON or not job-shaped. `httpx`
    transport errors propagate unchanged.

Security considerations:
    The API key is sent as a header and never logged. Request/response bodies
    are logged only when `DEBUG=true`.
"""

from __future__ import annotations

import asyncio
import logging
import os
from typing import Any, Mapping
from urllib.parse import quote

import httpx

from prodia.config import API_KEY_HEADER, ProdiaConfig, load_key
from prodia.errors import (
    ProdiaEmptyResponseError,
    ProdiaInvalidKeyError,
    ProdiaInvalidParametersError,
    ProdiaJobFailedError,
    ProdiaKeyNotEnabledError,
    ProdiaPollingTimeout,
    ProdiaRequestError,
)
from prodia.job_types import Job, JobResult, JobStatus, ProdiaRequest


logger = logging.getLogger(__name__)

# Sensitive request/response debug logging is opt-in.
DEBUG = os.getenv("DEBUG") == "true"

_INVALID_RESPONSE = "Failed to receive a valid response."

_STATUS_ERRORS = {
    400: (ProdiaInvalidParametersError, "The provided parameters are invalid."),
    401: (ProdiaInvalidKeyError, "The provided API key is invalid."),
    402: (ProdiaKeyNotEnabledError, "The API key is not enabled."),
}


def _parse_job(job_cls, data):
    """Build a job object, rejecting payloads that are not job-shaped."""
    try:
        return job_cls.from_payload(data)
    except (KeyError, TypeError, ValueError) as e:
        logger.warning("Prodia returned a malformed job payload: %r", e)
        raise ProdiaRequestError(_INVALID_RESPONSE, status_code=200) from e


class ProdiaClient:
    """Typed wrapper over the Prodia REST endpoints.

    Args:
        api_key: Static key sent as `X-Prodia-Key`.
        config: Network/polling configuration; environment defaults when omitted.
        transport: Optional `httpx` transport, e.g. `httpx.MockTransport` in tests.
    """

    def __init__(
        self,
        api_key: str,
        config: ProdiaConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not api_key:
            raise ValueError("api_key must be a non-empty string")
        self.config = config or ProdiaConfig()
        self._transport = transport
        self._headers = {
            "accept": "application/json",
            "content-type": "application/json",
            API_KEY_HEADER: api_key,
        }

    @classmethod
    def from_env(cls, config: ProdiaConfig | None = None) -> "ProdiaClient":
        """Build a client from `PRODIA_API_KEY` or the configured key file.

        Raises:
            RuntimeError: If no key can be resolved.
        """
        config = config or ProdiaConfig()
        api_key = load_key(config.key_file)
        if not api_key:
            raise RuntimeError(
                f"Prodia API key missing: set PRODIA_API_KEY or create {config.key_file}"
            )
        return cls(api_key, config=config)

    # ------------------------------------------------------------
    # Dispatcher
    # ------------------------------------------------------------

    async def send_request(self, request: ProdiaRequest) -> Any:
        """Send one request and map the HTTP status to a result.

        Args:
            request: Endpoint, method and optional JSON body.

        Returns:
            Decoded JSON body for status 200, unchanged. `None` when the body
            is empty.

        Raises:
            ProdiaInvalidParametersError: Status 400.
            ProdiaInvalidKeyError: Status 401.
            ProdiaKeyNotEnabledError: Status 402.
            ProdiaRequestError: Any other non-200 status.
            httpx.RequestError: Transport failures.
        """
        url = f"{self.config.base_url}{request.endpoint}"
        if DEBUG:
            logger.debug("Prodia request body for %s: %r", request.endpoint, request.body)

        async with httpx.AsyncClient(
            timeout=self.config.timeout_seconds,
            headers=self._headers,
            transport=self._transport,
        ) as client:
            response = await client.request(
                request.method,
                url,
                json=request.body,
            )

        status = response.status_code
        logger.debug("Prodia %s %s -> %s", request.method, request.endpoint, status)

        if status in _STATUS_ERRORS:
            error_cls, message = _STATUS_ERRORS[status]
            logger.warning("Prodia rejected %s %s with %s", request.method, request.endpoint, status)
            raise error_cls(message, status_code=status)

        if status != 200:
            logger.warning("Prodia %s %s failed with status %s", request.method, request.endpoint, status)
            raise ProdiaRequestError(_INVALID_RESPONSE, status_code=status)

        if not response.content.strip():
            return None

        try:
            data = response.json()
        except ValueError as e:
            logger.warning("Prodia %s %s returned a non-JSON body", request.method, request.endpoint)
            raise ProdiaRequestError(_INVALID_RESPONSE, status_code=status) from e

        if DEBUG:
            logger.debug("Prodia response body for %s: %r", request.endpoint, data)
        return data

    async def _call(self, endpoint: str, method: str, body: Any = None) -> Any:
        """Dispatch and reject responses that carry no body."""
        response = await self.send_request(
            ProdiaRequest(endpoint=endpoint, method=method, body=body)
        )
        if response is None:
            raise ProdiaEmptyResponseError(_INVALID_RESPONSE)
        return response

    async def _submit(self, endpoint: str, params: Mapping[str, Any]) -> Job:
        data = await self._call(endpoint, "POST", dict(params))
        return _parse_job(Job, data)

    # ------------------------------------------------------------
    # SD endpoints
    # ------------------------------------------------------------

    async def generate(self, params: Mapping[str, Any]) -> Job:
        """Text-to-image generation with an SD model."""
        return await self._submit("/sd/generate", params)

    async def transform(self, params: Mapping[str, Any]) -> Job:
        """Image-to-image generation with an SD model."""
        return await self._submit("/sd/transform", params)

    async def inpaint(self, params: Mapping[str, Any]) -> Job:
        """Masked inpainting with an SD model."""
        return await self._submit("/sd/inpaint", params)

    async def controlnet(self, params: Mapping[str, Any]) -> Job:
        """ControlNet-guided generation with an SD model."""
        return await self._submit("/sd/controlnet", params)

    # ------------------------------------------------------------
    # SDXL endpoints
    # ------------------------------------------------------------

    async def generate_sdxl(self, params: Mapping[str, Any]) -> Job:
        return await self._submit("/sdxl/generate", params)

    async def transform_sdxl(self, params: Mapping[str, Any]) -> Job:
        return await self._submit("/sdxl/transform", params)

    async def inpaint_sdxl(self, params: Mapping[str, Any]) -> Job:
        return await self._submit("/sdxl/inpaint", params)

    # ------------------------------------------------------------
    # Image utilities
    # ------------------------------------------------------------

    async def upscale(self, params: Mapping[str, Any]) -> Job:
        return await self._submit("/upscale", params)

    async def faceswap(self, params: Mapping[str, Any]) -> Job:
        return await self._submit("/faceswap", params)

    async def facerestore(self, params: Mapping[str, Any]) -> Job:
        return await self._submit("/facerestore", params)

    # ------------------------------------------------------------
    # Jobs and catalogue queries
    # ------------------------------------------------------------

    async def get_job(self, job_id: str) -> JobResult:
        """Fetch the current state of one job.

        Args:
            job_id: Identifier returned by a generation endpoint.

        Returns:
            `JobResult` whose `image_url` is set once the job succeeded.
        """
        data = await self._call(f"/job/{quote(str(job_id), safe='')}", "GET")
        return _parse_job(JobResult, data)

    async def get_models(self) -> list[str]:
        return await self._call("/sd/models", "GET")

    async def get_sdxl_models(self) -> list[str]:
        return await self._call("/sdxl/models", "GET")

    async def get_samplers(self) -> list[str]:
        return await self._call("/sd/samplers", "GET")

    async def get_sdxl_samplers(self) -> list[str]:
        return await self._call("/sdxl/samplers", "GET")

    async def get_loras(self) -> list[str]:
        return await self._call("/sd/loras", "GET")

    async def get_sdxl_loras(self) -> list[str]:
        return await self._call("/sdxl/loras", "GET")

    async def get_embeddings(self) -> list[str]:
        return await self._call("/sd/embeddings", "GET")

    async def get_sdxl_embeddings(self) -> list[str]:
        return await self._call("/sdxl/embeddings", "GET")

    # ------------------------------------------------------------
    # Polling
    # ------------------------------------------------------------

    async def wait(self, job: Job, max_attempts: int | None = None) -> JobResult:
        """Poll a job until it succeeds.

        Args:
            job: Handle returned by a generation endpoint (or a prior `get_job`).
            max_attempts: Optional cap on status fetches. `None` polls forever.

        Returns:
            The succeeded `JobResult`.

        Failure handling:
            - Status `failed` -> `ProdiaJobFailedError`
            - Cap exhausted -> `ProdiaPollingTimeout`
            - Request errors from `get_job` propagate unchanged.
        """
        current = job
        attempts = 0

        while current.status != JobStatus.SUCCEEDED:
            if current.status == JobStatus.FAILED:
                logger.warning("Prodia job %s failed", job.job)
                raise ProdiaJobFailedError("Failed to generate image.", job_id=job.job)

            if max_attempts is not None and attempts >= max_attempts:
                raise ProdiaPollingTimeout(
                    f"Job {job.job} still {current.status.value} after {attempts} status checks"
                )

            await asyncio.sleep(self.config.poll_interval_seconds)
            current = await self.get_job(job.job)
            attempts += 1
            logger.debug("Prodia job %s is %s", job.job, current.status.value)

        if not isinstance(current, JobResult):
            current = JobResult(
                job=current.job,
                status=current.status,
                raw=current.raw,
                image_url=current.raw.get("imageUrl"),
            )
        return current

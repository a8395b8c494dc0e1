"""Request and response shapes exchanged with the Prodia API.

Architectural role:
    Defines the job handle/result contracts returned by `prodia.client` and
    the transient request descriptor consumed by its dispatcher.

Determinism:
    Purely structural and state-free. Parsing is deterministic for a fixed
    payload.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class JobStatus(str, Enum):
    """Server-side lifecycle of a generation job."""

    QUEUED = "queued"
    GENERATING = "generating"
    FAILED = "failed"
    SUCCEEDED = "succeeded"


@dataclass(frozen=True)
class ProdiaRequest:
    """One outgoing call: endpoint path, HTTP method, optional JSON body."""

    endpoint: str
    method: str
    body: Any = None


@dataclass
class Job:
    """Handle returned by every generation endpoint.

    Attributes:
        job: Server-assigned job identifier.
        status: Current job status.
        raw: Decoded response payload, kept for fields not modelled here.
    """

    job: str
    status: JobStatus
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "Job":
        return cls(
            job=payload["job"],
            status=JobStatus(payload["status"]),
            raw=dict(payload),
        )

    @property
    def done(self) -> bool:
        return self.status in (JobStatus.SUCCEEDED, JobStatus.FAILED)


@dataclass
class JobResult(Job):
    """Job handle plus the output image URL.

    `image_url` is only populated once `status` is `succeeded`.
    """

    image_url: str | None = None

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "JobResult":
        return cls(
            job=payload["job"],
            status=JobStatus(payload["status"]),
            raw=dict(payload),
            image_url=payload.get("imageUrl"),
        )

"""Flat error taxonomy for the Prodia client.

Every failure surfaced by `prodia.client` derives from `ProdiaError`. HTTP
status failures carry the offending `status_code`; nothing is retried or
recovered locally.
"""

from __future__ import annotations


class ProdiaError(Exception):
    """Base error raised by the Prodia client."""


class ProdiaAPIError(ProdiaError):
    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ProdiaInvalidParametersError(ProdiaAPIError):
    """HTTP 400: the request parameters were rejected."""


class ProdiaInvalidKeyError(ProdiaAPIError):
    """HTTP 401: the API key is unknown."""


class ProdiaKeyNotEnabledError(ProdiaAPIError):
    """HTTP 402: the API key exists but has no API access."""


class ProdiaRequestError(ProdiaAPIError):
    """Any status other than 200/400/401/402."""


class ProdiaEmptyResponseError(ProdiaError):
    """A 200 response arrived without a body."""


class ProdiaJobFailedError(ProdiaError):
    """A polled job reached the `failed` status."""

    def __init__(self, message: str, job_id: str | None = None):
        super().__init__(message)
        self.job_id = job_id


class ProdiaPollingTimeout(ProdiaError):
    """Raised when an attempt cap is given and polling exhausts it."""

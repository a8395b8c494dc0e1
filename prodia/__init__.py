"""Asynchronous client for the Prodia image-generation API.

Module split:
    - `config`: environment-driven endpoint, timing and key configuration.
    - `job_types`: job handle/result contracts and the request descriptor.
    - `errors`: status-keyed error taxonomy.
    - `client`: dispatcher, endpoint wrappers and job polling.
    - `cli`: interactive terminal adapter.
"""

from prodia.client import ProdiaClient
from prodia.config import ProdiaConfig
from prodia.errors import (
    ProdiaAPIError,
    ProdiaEmptyResponseError,
    ProdiaError,
    ProdiaInvalidKeyError,
    ProdiaInvalidParametersError,
    ProdiaJobFailedError,
    ProdiaKeyNotEnabledError,
    ProdiaPollingTimeout,
    ProdiaRequestError,
)
from prodia.job_types import Job, JobResult, JobStatus, ProdiaRequest

__all__ = [
    "ProdiaClient",
    "ProdiaConfig",
    "ProdiaError",
    "ProdiaAPIError",
    "ProdiaInvalidParametersError",
    "ProdiaInvalidKeyError",
    "ProdiaKeyNotEnabledError",
    "ProdiaRequestError",
    "ProdiaEmptyResponseError",
    "ProdiaJobFailedError",
    "ProdiaPollingTimeout",
    "Job",
    "JobResult",
    "JobStatus",
    "ProdiaRequest",
]

"""Runtime configuration for the Prodia client.

Architectural role:
    Centralizes endpoint, timing and credential lookup for `prodia.client` and
    the `prodia.cli` adapter.

Determinism:
    Deterministic for a fixed process environment and key file. Values are
    resolved at import time (plus runtime key-file reads in `load_key`).

Failure behavior:
    Missing key material is represented as `None`; `ProdiaClient.from_env`
    turns that into a `RuntimeError`.
"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

DEFAULT_BASE_URL = "https://api.prodia.com/v1"

# Header carrying the static API key on every request.
API_KEY_HEADER = "X-Prodia-Key"


@dataclass(frozen=True)
class ProdiaConfig:
    """Network and polling configuration for `ProdiaClient`.

    Fields are read from environment variables at import time.

    Relevant environment variables:
        - `PRODIA_BASE_URL`
        - `PRODIA_TIMEOUT_SECONDS`
        - `PRODIA_POLL_INTERVAL_SECONDS`
        - `PRODIA_KEY_FILE`
    """

    base_url: str = os.getenv("PRODIA_BASE_URL", DEFAULT_BASE_URL).strip().rstrip("/")
    timeout_seconds: float = float(os.getenv("PRODIA_TIMEOUT_SECONDS", "120"))
    poll_interval_seconds: float = float(os.getenv("PRODIA_POLL_INTERVAL_SECONDS", "0.25"))
    key_file: str = os.getenv("PRODIA_KEY_FILE", "config/prodia.key")


def load_key(path):
    """Load the Prodia API key from environment override or key file.

    Resolution order:
        1. `PRODIA_API_KEY` environment variable.
        2. Raw file contents at `path`.

    Args:
        path: Configured key file path or `None`.

    Returns:
        Key string or `None` when not available.

    Edge cases:
        - Missing or empty file returns `None`.
    """
    env_value = os.getenv("PRODIA_API_KEY")
    if env_value:
        return env_value.strip()
    if not path or not os.path.exists(path):
        return None
    with open(path, "r") as f:
        return f.read().strip() or None

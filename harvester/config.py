"""
Batch defaults, chosen by deployment tier.
"""
import os


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw.strip())
    except ValueError:
        return default


class HarvesterConfig:
    """Batch settings; the production tier uses shorter timeouts and pacing."""

    ENV: str = os.getenv("HARVESTER_ENV", "development").strip().lower()
    IS_PRODUCTION: bool = ENV == "production"

    PER_REQUEST_TIMEOUT_MS: int = _env_int("HARVESTER_TIMEOUT_MS", 5000 if IS_PRODUCTION else 10000)
    INTER_REQUEST_DELAY_MS: int = _env_int("HARVESTER_DELAY_MS", 500 if IS_PRODUCTION else 1000)
    MAX_EXECUTION_BUDGET_MS: int = _env_int("HARVESTER_BUDGET_MS", 8000 if IS_PRODUCTION else 30000)
    MIN_BODY_LENGTH: int = _env_int("HARVESTER_MIN_BODY_LENGTH", 500)
    IMAGE_TIMEOUT_MS: int = _env_int("HARVESTER_IMAGE_TIMEOUT_MS", 20000)


harvester_config = HarvesterConfig()

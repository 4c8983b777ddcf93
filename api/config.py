"""
API configuration and settings management.
"""
import os

from harvester.config import HarvesterConfig

class Config(HarvesterConfig):
    """Application configuration."""

    # API settings
    API_TITLE: str = "Truck Harvester API"
    API_VERSION: str = "1.0.0"
    API_DESCRIPTION: str = "REST API for extracting truck listing pages into structured records"

    # CORS settings
    CORS_ORIGINS: list = ["*"]
    CORS_ALLOW_CREDENTIALS: bool = True
    CORS_ALLOW_METHODS: list = ["*"]
    CORS_ALLOW_HEADERS: list = ["*"]

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FILE: str = os.getenv("API_LOG_FILE", "api.log")

    @classmethod
    def validate(cls) -> None:
        """Validate configuration on startup."""
        if cls.PER_REQUEST_TIMEOUT_MS < 1000:
            raise ValueError(f"HARVESTER_TIMEOUT_MS must be >= 1000, got {cls.PER_REQUEST_TIMEOUT_MS}")
        if cls.INTER_REQUEST_DELAY_MS < 100:
            raise ValueError(f"HARVESTER_DELAY_MS must be >= 100, got {cls.INTER_REQUEST_DELAY_MS}")
        if cls.MAX_EXECUTION_BUDGET_MS <= 0:
            raise ValueError(f"HARVESTER_BUDGET_MS must be positive, got {cls.MAX_EXECUTION_BUDGET_MS}")

# Global config instance
config = Config()

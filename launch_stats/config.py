"""
Runtime configuration for the launch statistics service.
"""
import os
from typing import List


DEFAULT_API_URL = "https://api.spacexdata.com/v4/launches"


class StatsConfig:
    """Service configuration class."""

    def __init__(self):
        """Initialize configuration from environment variables."""
        self.api_url = os.getenv("SPACEX_API_URL", DEFAULT_API_URL)
        self.fetch_timeout = float(os.getenv("FETCH_TIMEOUT_SECONDS", "30"))
        self.max_retries = int(os.getenv("FETCH_MAX_RETRIES", "3"))
        self.retry_base_delay = float(os.getenv("FETCH_RETRY_BASE_DELAY", "1.0"))
        self.top_sites_limit = int(os.getenv("TOP_SITES_LIMIT", "5"))
        self.cors_origins = self._get_cors_origins()

    def _get_cors_origins(self) -> List[str]:
        """Parse the comma separated CORS origin list."""
        raw = os.getenv("CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000")
        return [origin.strip() for origin in raw.split(",") if origin.strip()]

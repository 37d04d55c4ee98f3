"""
Launch data source interface and error types.
"""
from typing import List, Optional, Protocol, runtime_checkable

from launch_stats.models.schemas import Launch
from launch_stats.sources.retry_handler import RetryableError


class LaunchSourceError(Exception):
    """Base exception for launch data source errors."""
    pass


class LaunchFetchError(LaunchSourceError):
    """The data source failed or returned no usable launch list."""
    pass


class HTTPStatusError(RetryableError):
    """Unexpected HTTP status from the launch API."""

    def __init__(self, status_code: int, url: str, message: Optional[str] = None):
        self.status_code = status_code
        self.url = url
        super().__init__(message or f"HTTP {status_code} from {url}")


@runtime_checkable
class LaunchDataSource(Protocol):
    """Anything that can produce the full list of launches."""

    async def fetch_all(self) -> List[Launch]:
        ...

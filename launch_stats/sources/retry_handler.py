"""
Exponential backoff for launch data requests.
"""

import asyncio
import random
from typing import Any, Awaitable, Callable, Optional, Sequence, Tuple
from dataclasses import dataclass
from enum import Enum

from launch_stats.logging_config import get_logger

logger = get_logger(__name__, component="retry")


class RetryableError(Exception):
    """Base class for request errors worth another attempt."""
    pass


class RetryReason(Enum):
    """Why a request is being attempted again."""
    NETWORK_ERROR = "network_error"
    TIMEOUT = "timeout"
    RATE_LIMITED = "rate_limited"
    SERVER_ERROR = "server_error"
    TEMPORARY_FAILURE = "temporary_failure"


@dataclass
class RetryConfig:
    """Backoff settings for launch requests."""
    max_retries: int = 3
    base_delay: float = 1.0
    max_delay: float = 60.0
    backoff_factor: float = 2.0
    jitter: bool = True
    retryable_status_codes: Tuple[int, ...] = (408, 429, 500, 502, 503, 504)


class RetryHandler:
    """
    Calls an async function until it succeeds, fails permanently, or runs
    out of attempts.

    An error carrying a ``status_code`` is retried only when that code is in
    ``retryable_status_codes``; other errors are retried when they are
    instances of one of the ``retry_on`` types.
    """

    def __init__(self, config: Optional[RetryConfig] = None):
        self.config = config or RetryConfig()

    async def retry_async(self,
                          func: Callable[..., Awaitable[Any]],
                          *args,
                          retry_on: Sequence[type] = (RetryableError,),
                          **kwargs) -> Any:
        """
        Await ``func(*args, **kwargs)`` with exponential backoff between attempts.

        Raises:
            The error from the final attempt, or the first error that is not retryable
        """
        attempts = self.config.max_retries + 1
        for attempt in range(1, attempts + 1):
            try:
                return await func(*args, **kwargs)
            except Exception as e:
                if attempt == attempts or not self.should_retry(e, retry_on):
                    logger.error("Request failed", attempts=attempt, error=str(e))
                    raise

                delay = self.delay_for(attempt)
                logger.warning(
                    "Request attempt failed, retrying",
                    attempt=attempt,
                    reason=self.retry_reason(e).value,
                    delay=round(delay, 2),
                    error=str(e),
                )
                await asyncio.sleep(delay)

    def should_retry(self, error: Exception, retry_on: Sequence[type]) -> bool:
        status_code = getattr(error, 'status_code', None)
        if status_code is not None:
            return status_code in self.config.retryable_status_codes
        return isinstance(error, tuple(retry_on))

    def delay_for(self, attempt: int) -> float:
        """Seconds to wait after the given failed attempt (1-based)."""
        delay = min(
            self.config.base_delay * self.config.backoff_factor ** (attempt - 1),
            self.config.max_delay,
        )
        if self.config.jitter:
            delay += random.uniform(-0.1 * delay, 0.1 * delay)
        return max(0.0, delay)

    @staticmethod
    def retry_reason(error: Exception) -> RetryReason:
        if isinstance(error, asyncio.TimeoutError):
            return RetryReason.TIMEOUT
        if isinstance(error, ConnectionError):
            return RetryReason.NETWORK_ERROR

        status_code = getattr(error, 'status_code', None)
        if status_code == 429:
            return RetryReason.RATE_LIMITED
        if status_code is not None and 500 <= status_code < 600:
            return RetryReason.SERVER_ERROR
        return RetryReason.TEMPORARY_FAILURE

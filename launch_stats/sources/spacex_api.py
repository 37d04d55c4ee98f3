"""
SpaceX REST API client that supplies launch records.
"""

import asyncio
import logging
from typing import Any, List, Optional

import aiohttp
from pydantic import ValidationError

from launch_stats.config import StatsConfig
from launch_stats.models.schemas import Launch
from launch_stats.sources.base import HTTPStatusError, LaunchFetchError, LaunchSourceError
from launch_stats.sources.retry_handler import RetryConfig, RetryHandler, RetryableError

logger = logging.getLogger(__name__)


class SpaceXLaunchSource:
    """
    Fetches the full launch history from the SpaceX API.
    Transient failures are retried with exponential backoff.
    """

    def __init__(self,
                 config: Optional[StatsConfig] = None,
                 retry_handler: Optional[RetryHandler] = None,
                 session: Optional[aiohttp.ClientSession] = None):
        """
        Initialize the launch source.

        Args:
            config: Service configuration (API URL, timeout, retries)
            retry_handler: RetryHandler to use, built from config if None
            session: Existing aiohttp session; the source will not close it
        """
        self.config = config or StatsConfig()
        self.retry_handler = retry_handler or RetryHandler(
            RetryConfig(
                max_retries=self.config.max_retries,
                base_delay=self.config.retry_base_delay,
            )
        )
        self.session = session
        self._owns_session = session is None

        logger.info(f"SpaceXLaunchSource initialized for {self.config.api_url}")

    async def __aenter__(self):
        """Async context manager entry."""
        await self.start_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close_session()

    async def start_session(self):
        """Start the aiohttp session."""
        if self.session is None:
            timeout = aiohttp.ClientTimeout(total=self.config.fetch_timeout)
            self.session = aiohttp.ClientSession(timeout=timeout)
            self._owns_session = True
            logger.info("Launch API session started")

    async def close_session(self):
        """Close the aiohttp session if this source created it."""
        if self.session is not None and self._owns_session:
            await self.session.close()
            self.session = None
            logger.info("Launch API session closed")

    async def fetch_all(self) -> List[Launch]:
        """
        Fetch every launch from the API.

        Returns:
            List of Launch records, possibly empty

        Raises:
            LaunchFetchError: If the request fails or the body is not a launch list
        """
        if self.session is None:
            raise LaunchFetchError("Session not initialized. Use async context manager or call start_session()")

        url = self.config.api_url
        try:
            payload = await self.retry_handler.retry_async(
                self._get_json,
                url,
                retry_on=[RetryableError, asyncio.TimeoutError, aiohttp.ClientConnectionError],
            )
        except LaunchSourceError:
            raise
        except HTTPStatusError as e:
            raise LaunchFetchError(str(e)) from e
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise LaunchFetchError(f"Launch request to {url} failed: {e!r}") from e

        launches = self.parse_launches(payload)
        logger.info(f"Fetched {len(launches)} launches from {url}")
        return launches

    async def _get_json(self, url: str) -> Any:
        """Perform one GET and decode the JSON body."""
        async with self.session.get(url, headers={'Accept': 'application/json'}) as response:
            if response.status != 200:
                raise HTTPStatusError(response.status, url)
            try:
                return await response.json(content_type=None)
            except ValueError as e:
                raise LaunchFetchError(f"Invalid JSON from {url}: {e}") from e

    @staticmethod
    def parse_launches(payload: Any) -> List[Launch]:
        """
        Convert a decoded API body into launch records.

        Items that are not objects or fail validation are skipped.

        Raises:
            LaunchFetchError: If the body is null or not a JSON array
        """
        if payload is None:
            raise LaunchFetchError("Launch API returned no data")
        if not isinstance(payload, list):
            raise LaunchFetchError(f"Expected a JSON array of launches, got {type(payload).__name__}")

        launches = []
        skipped = 0
        for item in payload:
            if not isinstance(item, dict):
                skipped += 1
                continue
            try:
                launches.append(Launch.from_api(item))
            except ValidationError as e:
                skipped += 1
                logger.debug(f"Skipping malformed launch {item.get('id')!r}: {e}")

        if skipped:
            logger.warning(f"Skipped {skipped} malformed launch records")

        return launches

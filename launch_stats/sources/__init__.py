"""
Launch data sources.

This module provides:
- The LaunchDataSource interface and its error types
- Retry logic with exponential backoff
- An aiohttp client for the SpaceX launches API
"""

from .base import LaunchDataSource, LaunchSourceError, LaunchFetchError, HTTPStatusError
from .retry_handler import RetryHandler, RetryConfig, RetryableError
from .spacex_api import SpaceXLaunchSource

__all__ = [
    'LaunchDataSource',
    'LaunchSourceError',
    'LaunchFetchError',
    'HTTPStatusError',
    'RetryHandler',
    'RetryConfig',
    'RetryableError',
    'SpaceXLaunchSource'
]

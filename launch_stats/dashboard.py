"""
Launch statistics dashboard state.

Holds the launch list from the most recent completed fetch together with
the statistics computed from it, and reports whether data is still
loading, ready, or failed to load.
"""
import asyncio
from datetime import datetime
from typing import Optional, Tuple

from launch_stats.aggregation.sites import SiteNameResolver, placeholder_site_name
from launch_stats.aggregation.stats import (
    Clock,
    LaunchStatsAggregator,
    build_snapshot,
    recent_activity,
    utc_now,
)
from launch_stats.config import StatsConfig
from launch_stats.logging_config import TimedOperation, get_logger
from launch_stats.models.schemas import (
    DashboardState,
    DashboardStatus,
    FetchResult,
    Launch,
    LaunchStatsSnapshot,
)
from launch_stats.sources.base import LaunchDataSource, LaunchSourceError


class DashboardError(Exception):
    """Base exception for dashboard errors."""
    pass


class StatsUnavailableError(DashboardError):
    """Statistics were requested while no launch list is available."""

    def __init__(self, state: DashboardState, error: Optional[str] = None):
        self.state = state
        self.error = error
        message = f"Launch statistics unavailable ({state.value})"
        if error:
            message = f"{message}: {error}"
        super().__init__(message)


class LaunchStatsDashboard:
    """
    Loads launches once from a data source and serves statistics over them.

    ``loading`` starts true and turns false when the first fetch finishes,
    whether it succeeded or not. A failed fetch leaves the dashboard in the
    FAILED state with no launches, never in an all-zero READY state.
    """

    def __init__(self,
                 source: LaunchDataSource,
                 config: Optional[StatsConfig] = None,
                 resolve_site_name: SiteNameResolver = placeholder_site_name,
                 clock: Clock = utc_now):
        self.source = source
        self.config = config or StatsConfig()
        self.resolve_site_name = resolve_site_name
        self.clock = clock

        self._state = DashboardState.LOADING
        self._loading = True
        self._launches: Tuple[Launch, ...] = ()
        self._snapshot: Optional[LaunchStatsSnapshot] = None
        self._error: Optional[str] = None
        self._loaded_at: Optional[datetime] = None
        self._inflight: Optional[asyncio.Future] = None

        self.logger = get_logger(__name__, component="dashboard")

    @property
    def state(self) -> DashboardState:
        return self._state

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def error(self) -> Optional[str]:
        return self._error

    @property
    def launches(self) -> Tuple[Launch, ...]:
        return self._launches

    async def load(self) -> FetchResult:
        """
        Fetch launches and recompute statistics.

        Callers arriving while a fetch is in flight wait for that same fetch.

        Returns:
            FetchResult describing the completed fetch
        """
        if self._inflight is None or self._inflight.done():
            self._inflight = asyncio.ensure_future(self._fetch())
        return await asyncio.shield(self._inflight)

    async def refresh(self) -> FetchResult:
        """Re-fetch launches. Statistics switch over once the fetch completes."""
        self.logger.info("Refreshing launch data", state=self._state.value)
        return await self.load()

    async def aclose(self) -> None:
        """Cancel any in-flight fetch."""
        if self._inflight is not None and not self._inflight.done():
            self._inflight.cancel()
            try:
                await self._inflight
            except asyncio.CancelledError:
                pass
        self._inflight = None

    async def _fetch(self) -> FetchResult:
        try:
            with TimedOperation(self.logger, "launch fetch", source=type(self.source).__name__):
                launches = await self.source.fetch_all()
        except LaunchSourceError as e:
            return self._fail(str(e))
        except asyncio.TimeoutError:
            return self._fail("Launch fetch timed out")
        except Exception as e:
            self.logger.error("Unexpected error while fetching launches", exc_info=True)
            return self._fail(f"Unexpected error: {e}")

        if launches is None:
            return self._fail("Launch source returned no data")

        return self._succeed(launches)

    def _succeed(self, launches) -> FetchResult:
        now = self.clock()
        self._launches = tuple(launches)
        self._snapshot = build_snapshot(
            self._launches,
            now=now,
            top_sites_limit=self.config.top_sites_limit,
            resolve_site_name=self.resolve_site_name,
        )
        self._error = None
        self._loaded_at = now
        self._state = DashboardState.READY
        self._loading = False

        self.logger.info("Launch data loaded", launch_count=len(self._launches))
        return FetchResult(ok=True, launch_count=len(self._launches))

    def _fail(self, message: str) -> FetchResult:
        self._launches = ()
        self._snapshot = None
        self._error = message
        self._loaded_at = None
        self._state = DashboardState.FAILED
        self._loading = False

        self.logger.warning("Launch data unavailable", error=message)
        return FetchResult(ok=False, error=message)

    def _require_ready(self) -> None:
        if self._state is not DashboardState.READY:
            raise StatsUnavailableError(self._state, self._error)

    def snapshot(self,
                 now: Optional[datetime] = None,
                 top_sites_limit: Optional[int] = None) -> LaunchStatsSnapshot:
        """
        Statistics for the current launch list.

        Counts, chart series and the default site ranking come from the
        fetch-time cache. The recency windows are always measured from
        ``now``, which defaults to the dashboard clock.

        Raises:
            StatsUnavailableError: If the dashboard is loading or failed
        """
        self._require_ready()

        now = now or self.clock()
        limit = self.config.top_sites_limit if top_sites_limit is None else top_sites_limit
        if limit != self.config.top_sites_limit:
            return build_snapshot(
                self._launches,
                now=now,
                top_sites_limit=limit,
                resolve_site_name=self.resolve_site_name,
            )

        return self._snapshot.model_copy(update={
            "generated_at": now,
            "recent": recent_activity(self._launches, now),
        })

    def aggregator(self) -> LaunchStatsAggregator:
        """Aggregator over the current launch list."""
        self._require_ready()
        return LaunchStatsAggregator(self._launches, self.resolve_site_name, self.clock)

    def status(self) -> DashboardStatus:
        return DashboardStatus(
            state=self._state,
            loading=self._loading,
            error=self._error,
            launch_count=len(self._launches),
            loaded_at=self._loaded_at,
        )

"""
Launch statistics aggregation.

Every function here is pure: the result depends only on the launch list
passed in and, for the recency windows, on ``now``. A ``None`` or empty
list yields zero counts and empty series instead of an error.
"""
from collections import Counter
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from launch_stats.aggregation.sites import SiteNameResolver, placeholder_site_name
from launch_stats.models.schemas import (
    Launch,
    LaunchOutcome,
    LaunchSiteStats,
    LaunchStatsSnapshot,
    LaunchStatsSummary,
    OutcomeDistribution,
    RecentActivity,
    YearlySeries,
)


RECENT_WINDOWS = (30, 90, 365)
DEFAULT_TOP_SITES = 5

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _as_list(launches: Optional[Iterable[Launch]]) -> Sequence[Launch]:
    if launches is None:
        return ()
    if isinstance(launches, (list, tuple)):
        return launches
    return tuple(launches)


def _count_outcome(launches: Optional[Iterable[Launch]], outcome: LaunchOutcome) -> int:
    return sum(1 for launch in _as_list(launches) if launch.outcome == outcome)


def _rate(successes: int, total: int) -> float:
    if total <= 0:
        return 0.0
    return round(successes / total * 100, 1)


def total_launches(launches: Optional[Iterable[Launch]]) -> int:
    return len(_as_list(launches))


def successful_launches(launches: Optional[Iterable[Launch]]) -> int:
    return _count_outcome(launches, LaunchOutcome.SUCCESS)


def failed_launches(launches: Optional[Iterable[Launch]]) -> int:
    return _count_outcome(launches, LaunchOutcome.FAILURE)


def unknown_launches(launches: Optional[Iterable[Launch]]) -> int:
    return _count_outcome(launches, LaunchOutcome.UNKNOWN)


def success_rate(launches: Optional[Iterable[Launch]]) -> float:
    """Percentage of successful launches, rounded to one decimal place."""
    launches = _as_list(launches)
    return _rate(successful_launches(launches), total_launches(launches))


def launches_in_window(
    launches: Optional[Iterable[Launch]],
    days: int,
    now: Optional[datetime] = None,
) -> int:
    """
    Count dated launches on or after ``now - days``.

    Args:
        launches: Launch records
        days: Window length in days
        now: Reference time, defaults to the current UTC time. Naive values are taken as UTC.

    Returns:
        Number of launches inside the window
    """
    if now is None:
        now = utc_now()
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    try:
        cutoff = now - timedelta(days=days)
    except OverflowError:
        # Past the datetime range: the window covers every or no dated launch.
        cutoff = datetime.min if days > 0 else datetime.max
        cutoff = cutoff.replace(tzinfo=timezone.utc)
    return sum(
        1 for launch in _as_list(launches)
        if launch.date_utc is not None and launch.date_utc >= cutoff
    )


def recent_activity(
    launches: Optional[Iterable[Launch]],
    now: Optional[datetime] = None,
) -> RecentActivity:
    launches = _as_list(launches)
    now = now or utc_now()
    last_30, last_90, last_365 = (launches_in_window(launches, days, now) for days in RECENT_WINDOWS)
    return RecentActivity(last_30_days=last_30, last_90_days=last_90, last_365_days=last_365)


def outcome_distribution(launches: Optional[Iterable[Launch]]) -> OutcomeDistribution:
    """Outcome counts in the fixed Success/Failed/Unknown label order."""
    launches = _as_list(launches)
    return OutcomeDistribution(
        data=[
            float(successful_launches(launches)),
            float(failed_launches(launches)),
            float(unknown_launches(launches)),
        ]
    )


def launches_per_year(launches: Optional[Iterable[Launch]]) -> YearlySeries:
    """Group dated launches by UTC calendar year. Undated launches are left out."""
    per_year = Counter(
        launch.date_utc.year
        for launch in _as_list(launches)
        if launch.date_utc is not None
    )
    years = sorted(per_year)
    return YearlySeries(
        labels=[str(year) for year in years],
        data=[float(per_year[year]) for year in years],
    )


def top_launch_sites(
    launches: Optional[Iterable[Launch]],
    n: int = DEFAULT_TOP_SITES,
    resolve_site_name: SiteNameResolver = placeholder_site_name,
) -> List[LaunchSiteStats]:
    """
    Rank launch sites by number of launches.

    Launches without an id are dropped before grouping. Sites with equal
    launch counts keep the order in which they were first seen.

    Args:
        launches: Launch records
        n: Maximum number of sites to return
        resolve_site_name: Maps a launch to its site label

    Returns:
        At most ``n`` site stats, most launches first
    """
    if n <= 0:
        return []

    groups: Dict[str, List[int]] = {}
    for launch in _as_list(launches):
        if not launch.has_id:
            continue
        counts = groups.setdefault(resolve_site_name(launch), [0, 0])
        counts[0] += 1
        if launch.outcome == LaunchOutcome.SUCCESS:
            counts[1] += 1

    ranked: List[Tuple[str, List[int]]] = sorted(
        groups.items(), key=lambda item: item[1][0], reverse=True
    )
    return [
        LaunchSiteStats(
            site_name=site,
            launch_count=launch_count,
            success_count=success_count,
            success_rate=_rate(success_count, launch_count),
        )
        for site, (launch_count, success_count) in ranked[:n]
    ]


def summarize(launches: Optional[Iterable[Launch]]) -> LaunchStatsSummary:
    launches = _as_list(launches)
    return LaunchStatsSummary(
        total_launches=total_launches(launches),
        successful_launches=successful_launches(launches),
        failed_launches=failed_launches(launches),
        unknown_launches=unknown_launches(launches),
        success_rate=success_rate(launches),
    )


def build_snapshot(
    launches: Optional[Iterable[Launch]],
    now: Optional[datetime] = None,
    top_sites_limit: int = DEFAULT_TOP_SITES,
    resolve_site_name: SiteNameResolver = placeholder_site_name,
) -> LaunchStatsSnapshot:
    """Compute every derived view from one list at one point in time."""
    launches = _as_list(launches)
    now = now or utc_now()
    return LaunchStatsSnapshot(
        generated_at=now,
        summary=summarize(launches),
        recent=recent_activity(launches, now),
        outcomes=outcome_distribution(launches),
        per_year=launches_per_year(launches),
        top_sites=top_launch_sites(launches, top_sites_limit, resolve_site_name),
    )


class LaunchStatsAggregator:
    """
    Read-only statistics over a fixed launch list.

    The list is copied on construction and every property recomputes from
    that copy, so views can never drift from the data they describe.
    """

    def __init__(
        self,
        launches: Optional[Iterable[Launch]] = None,
        resolve_site_name: SiteNameResolver = placeholder_site_name,
        clock: Clock = utc_now,
    ):
        self._launches: Tuple[Launch, ...] = tuple(launches or ())
        self._resolve_site_name = resolve_site_name
        self._clock = clock

    @property
    def launches(self) -> Tuple[Launch, ...]:
        return self._launches

    @property
    def total_launches(self) -> int:
        return total_launches(self._launches)

    @property
    def successful_launches(self) -> int:
        return successful_launches(self._launches)

    @property
    def failed_launches(self) -> int:
        return failed_launches(self._launches)

    @property
    def unknown_launches(self) -> int:
        return unknown_launches(self._launches)

    @property
    def success_rate(self) -> float:
        return success_rate(self._launches)

    @property
    def launches_last_30_days(self) -> int:
        return launches_in_window(self._launches, 30, self._clock())

    @property
    def launches_last_90_days(self) -> int:
        return launches_in_window(self._launches, 90, self._clock())

    @property
    def launches_last_year(self) -> int:
        return launches_in_window(self._launches, 365, self._clock())

    @property
    def outcome_distribution(self) -> OutcomeDistribution:
        return outcome_distribution(self._launches)

    @property
    def launches_per_year(self) -> YearlySeries:
        return launches_per_year(self._launches)

    def launches_in_window(self, days: int) -> int:
        return launches_in_window(self._launches, days, self._clock())

    def top_launch_sites(self, n: int = DEFAULT_TOP_SITES) -> List[LaunchSiteStats]:
        return top_launch_sites(self._launches, n, self._resolve_site_name)

    def snapshot(self, top_sites_limit: int = DEFAULT_TOP_SITES) -> LaunchStatsSnapshot:
        return build_snapshot(
            self._launches,
            now=self._clock(),
            top_sites_limit=top_sites_limit,
            resolve_site_name=self._resolve_site_name,
        )

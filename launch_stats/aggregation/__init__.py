"""
Pure aggregation over launch lists.
"""
from launch_stats.aggregation.sites import SiteNameResolver, placeholder_site_name
from launch_stats.aggregation.stats import (
    LaunchStatsAggregator,
    RECENT_WINDOWS,
    build_snapshot,
    failed_launches,
    launches_in_window,
    launches_per_year,
    outcome_distribution,
    recent_activity,
    success_rate,
    successful_launches,
    summarize,
    top_launch_sites,
    total_launches,
    unknown_launches,
)

__all__ = [
    'LaunchStatsAggregator',
    'RECENT_WINDOWS',
    'SiteNameResolver',
    'build_snapshot',
    'failed_launches',
    'launches_in_window',
    'launches_per_year',
    'outcome_distribution',
    'placeholder_site_name',
    'recent_activity',
    'success_rate',
    'successful_launches',
    'summarize',
    'top_launch_sites',
    'total_launches',
    'unknown_launches',
]

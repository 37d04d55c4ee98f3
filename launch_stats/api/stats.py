"""
Launch statistics endpoints for the FastAPI application.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from launch_stats.api.dependencies import get_dashboard
from launch_stats.api.responses import ErrorResponse
from launch_stats.dashboard import LaunchStatsDashboard
from launch_stats.models.schemas import (
    DashboardStatus,
    FetchResult,
    LaunchSiteStats,
    LaunchStatsSnapshot,
    LaunchStatsSummary,
    OutcomeDistribution,
    RecentActivity,
    YearlySeries,
)

import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/stats", tags=["statistics"])

UNAVAILABLE_RESPONSES = {
    502: {"model": ErrorResponse, "description": "Launch data could not be fetched"},
    503: {"model": ErrorResponse, "description": "Launch data is still loading"},
}


@router.get(
    "/status",
    response_model=DashboardStatus,
    summary="Get data load status",
    description="Report whether launch data is loading, ready, or failed to load."
)
async def get_status(dashboard: LaunchStatsDashboard = Depends(get_dashboard)):
    """Get the dashboard load status."""
    return dashboard.status()


@router.get(
    "",
    response_model=LaunchStatsSnapshot,
    summary="Get all launch statistics",
    description="Summary counts, recent activity, outcome and per-year chart data, and top launch sites.",
    responses=UNAVAILABLE_RESPONSES
)
async def get_statistics(
    top_sites: Optional[int] = Query(None, ge=1, le=50, description="Number of launch sites to include"),
    dashboard: LaunchStatsDashboard = Depends(get_dashboard)
):
    """Get every statistic computed from the latest launch list."""
    return dashboard.snapshot(top_sites_limit=top_sites)


@router.get(
    "/summary",
    response_model=LaunchStatsSummary,
    summary="Get launch outcome summary",
    responses=UNAVAILABLE_RESPONSES
)
async def get_summary(dashboard: LaunchStatsDashboard = Depends(get_dashboard)):
    """Get total, successful, failed and unknown counts with the success rate."""
    return dashboard.snapshot().summary


@router.get(
    "/recent",
    response_model=RecentActivity,
    summary="Get recent launch activity",
    description="Launch counts over the last 30, 90 and 365 days, measured from now.",
    responses=UNAVAILABLE_RESPONSES
)
async def get_recent_activity(dashboard: LaunchStatsDashboard = Depends(get_dashboard)):
    """Get launch counts for the trailing windows."""
    aggregator = dashboard.aggregator()
    return RecentActivity(
        last_30_days=aggregator.launches_last_30_days,
        last_90_days=aggregator.launches_last_90_days,
        last_365_days=aggregator.launches_last_year,
    )


@router.get(
    "/outcomes",
    response_model=OutcomeDistribution,
    summary="Get outcome chart data",
    responses=UNAVAILABLE_RESPONSES
)
async def get_outcomes(dashboard: LaunchStatsDashboard = Depends(get_dashboard)):
    """Get the Success/Failed/Unknown distribution for a pie or donut chart."""
    return dashboard.snapshot().outcomes


@router.get(
    "/per-year",
    response_model=YearlySeries,
    summary="Get launches per year",
    responses=UNAVAILABLE_RESPONSES
)
async def get_launches_per_year(dashboard: LaunchStatsDashboard = Depends(get_dashboard)):
    """Get the per-year launch series for a bar chart."""
    return dashboard.snapshot().per_year


@router.get(
    "/sites",
    response_model=List[LaunchSiteStats],
    summary="Get top launch sites",
    responses=UNAVAILABLE_RESPONSES
)
async def get_top_sites(
    limit: int = Query(5, ge=1, le=50, description="Number of sites to return"),
    dashboard: LaunchStatsDashboard = Depends(get_dashboard)
):
    """Get launch sites ranked by number of launches."""
    return dashboard.aggregator().top_launch_sites(limit)


@router.post(
    "/refresh",
    response_model=FetchResult,
    summary="Re-fetch launch data",
    description="Fetch launches from the data source again and recompute statistics."
)
async def refresh_statistics(dashboard: LaunchStatsDashboard = Depends(get_dashboard)):
    """Trigger a new fetch and wait for it to finish."""
    result = await dashboard.refresh()
    if not result.ok:
        logger.warning(f"Launch data refresh failed: {result.error}")
    return result

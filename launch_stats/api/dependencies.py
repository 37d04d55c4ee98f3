"""
FastAPI dependencies for the launch statistics endpoints.
"""
from fastapi import HTTPException, Request, status

from launch_stats.dashboard import LaunchStatsDashboard


def get_dashboard(request: Request) -> LaunchStatsDashboard:
    """Dependency to get the dashboard created at application startup."""
    dashboard = getattr(request.app.state, "dashboard", None)
    if dashboard is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Launch statistics service is not initialized"
        )
    return dashboard

"""
FastAPI main application for the launch statistics service.
"""
import asyncio
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from launch_stats import __version__
from launch_stats.api.responses import ErrorResponse
from launch_stats.api.stats import router as stats_router
from launch_stats.config import StatsConfig
from launch_stats.dashboard import LaunchStatsDashboard, StatsUnavailableError
from launch_stats.logging_config import setup_logging, get_logger
from launch_stats.models.schemas import DashboardState
from launch_stats.sources.spacex_api import SpaceXLaunchSource

setup_logging()
logger = get_logger(__name__, component="main_app")

config = StatsConfig()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    logger.info("Starting launch statistics API", api_url=config.api_url)

    source = SpaceXLaunchSource(config)
    await source.start_session()

    dashboard = LaunchStatsDashboard(source, config)
    app.state.dashboard = dashboard
    # The first fetch runs in the background; endpoints report 503 until it completes.
    load_task = asyncio.create_task(dashboard.load())

    yield

    logger.info("Shutting down launch statistics API")
    if not load_task.done():
        load_task.cancel()
    await dashboard.aclose()
    await source.close_session()


app = FastAPI(
    title="Launch Statistics API",
    description="Summary statistics and chart data computed from SpaceX launch history",
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

app.include_router(stats_router)


@app.exception_handler(StatsUnavailableError)
async def stats_unavailable_handler(request: Request, exc: StatsUnavailableError):
    """Report loading as 503 and a failed fetch as 502."""
    if exc.state is DashboardState.LOADING:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=ErrorResponse(
                error="Launch data is still loading",
                code="loading"
            ).model_dump()
        )

    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content=ErrorResponse(
            error="Launch data could not be fetched",
            detail=exc.error,
            code="fetch_failed"
        ).model_dump()
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """Custom HTTP exception handler."""
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            error=str(exc.detail),
            code=str(exc.status_code)
        ).model_dump()
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """General exception handler for unhandled exceptions."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(
            error="Internal server error",
            detail="An unexpected error occurred",
            code="500"
        ).model_dump()
    )


@app.get("/", summary="Root endpoint", description="Welcome message for the API")
async def root():
    """Root endpoint with API information."""
    return {
        "message": "Launch Statistics API",
        "version": __version__,
        "docs": "/docs",
        "endpoints": {
            "statistics": "/api/stats",
            "summary": "/api/stats/summary",
            "recent": "/api/stats/recent",
            "outcomes": "/api/stats/outcomes",
            "per_year": "/api/stats/per-year",
            "sites": "/api/stats/sites",
            "status": "/api/stats/status",
            "health": "/health"
        }
    }


@app.get("/health", summary="Health check", description="Check API health status")
async def health_check(request: Request):
    """Health check endpoint. Reports the launch data state alongside liveness."""
    dashboard = getattr(request.app.state, "dashboard", None)
    data_state = dashboard.state.value if dashboard is not None else "not_initialized"
    return {
        "status": "healthy",
        "service": "Launch Statistics API",
        "version": __version__,
        "data": data_state
    }

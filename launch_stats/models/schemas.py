"""
Pydantic models for launch records and the statistics derived from them.
"""
from datetime import datetime, timezone
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


OUTCOME_LABELS = ["Success", "Failed", "Unknown"]
OUTCOME_PALETTE = ["#00C853", "#F44336", "#FFA726"]
YEARLY_SERIES_NAME = "Launches"
UNKNOWN_SITE = "Unknown Site"


class LaunchOutcome(str, Enum):
    """Outcome of a launch. UNKNOWN covers launches the API has no result for."""
    SUCCESS = "success"
    FAILURE = "failure"
    UNKNOWN = "unknown"

    @classmethod
    def from_flag(cls, success: Optional[bool]) -> "LaunchOutcome":
        """Map the API's nullable ``success`` flag onto an outcome."""
        if success is True:
            return cls.SUCCESS
        if success is False:
            return cls.FAILURE
        return cls.UNKNOWN


class Launch(BaseModel):
    """A single historical launch record as received from the data source."""
    model_config = ConfigDict(frozen=True)

    id: Optional[str] = Field(None, description="Launch identifier, may be absent or empty")
    name: str = Field("", description="Mission name, may be empty")
    date_utc: Optional[datetime] = Field(None, description="Launch time in UTC")
    outcome: LaunchOutcome = Field(LaunchOutcome.UNKNOWN, description="Launch outcome")

    @model_validator(mode="before")
    @classmethod
    def map_success_flag(cls, data: Any) -> Any:
        """Translate the raw ``success`` flag into ``outcome``."""
        if isinstance(data, dict) and "success" in data and "outcome" not in data:
            data = dict(data)
            success = data.pop("success")
            if success is not None and not isinstance(success, bool):
                raise ValueError("success must be true, false or null")
            data["outcome"] = LaunchOutcome.from_flag(success)
        return data

    @field_validator("name", mode="before")
    @classmethod
    def default_name(cls, v):
        return "" if v is None else v

    @field_validator("date_utc")
    @classmethod
    def normalize_date(cls, v):
        """Naive timestamps are taken as UTC; aware ones are converted to UTC."""
        if v is None:
            return v
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)

    @classmethod
    def from_api(cls, payload: dict) -> "Launch":
        """Build a launch from a SpaceX API launch object."""
        return cls.model_validate(payload)

    @property
    def has_id(self) -> bool:
        return bool(self.id and self.id.strip())


class LaunchSiteStats(BaseModel):
    """Launch and success counts for one launch site."""
    site_name: str = Field(..., description="Site label")
    launch_count: int = Field(..., ge=1, description="Launches attributed to the site")
    success_count: int = Field(..., ge=0, description="Successful launches from the site")
    success_rate: float = Field(..., ge=0.0, le=100.0, description="Success percentage, 1 decimal")

    @model_validator(mode="after")
    def check_counts(self) -> "LaunchSiteStats":
        if self.success_count > self.launch_count:
            raise ValueError("success_count cannot exceed launch_count")
        return self


class LaunchStatsSummary(BaseModel):
    """Headline outcome counts."""
    total_launches: int = Field(..., ge=0)
    successful_launches: int = Field(..., ge=0)
    failed_launches: int = Field(..., ge=0)
    unknown_launches: int = Field(..., ge=0)
    success_rate: float = Field(..., ge=0.0, le=100.0)


class RecentActivity(BaseModel):
    """Launch counts inside the trailing 30, 90 and 365 day windows."""
    last_30_days: int = Field(..., ge=0)
    last_90_days: int = Field(..., ge=0)
    last_365_days: int = Field(..., ge=0)


class OutcomeDistribution(BaseModel):
    """Categorical chart input: one value per outcome label."""
    labels: List[str] = Field(default_factory=lambda: list(OUTCOME_LABELS))
    data: List[float] = Field(..., description="[successful, failed, unknown]")
    palette: List[str] = Field(default_factory=lambda: list(OUTCOME_PALETTE))


class YearlySeries(BaseModel):
    """Bar chart input: launches per calendar year, ascending."""
    name: str = Field(YEARLY_SERIES_NAME, description="Series name")
    labels: List[str] = Field(default_factory=list, description="Year labels")
    data: List[float] = Field(default_factory=list, description="Launch count per year")
    y_axis_ticks: int = Field(10, description="Suggested number of y axis ticks")


class LaunchStatsSnapshot(BaseModel):
    """Every derived view computed from one launch list at one point in time."""
    generated_at: datetime
    summary: LaunchStatsSummary
    recent: RecentActivity
    outcomes: OutcomeDistribution
    per_year: YearlySeries
    top_sites: List[LaunchSiteStats]


class DashboardState(str, Enum):
    """Lifecycle of the dashboard's launch list."""
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


class DashboardStatus(BaseModel):
    """Current dashboard state as reported to clients."""
    state: DashboardState
    loading: bool
    error: Optional[str] = None
    launch_count: int = 0
    loaded_at: Optional[datetime] = None


class FetchResult(BaseModel):
    """Outcome of one fetch attempt: either launches were loaded or an error occurred."""
    ok: bool
    launch_count: int = 0
    error: Optional[str] = None

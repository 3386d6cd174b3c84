"""Summary (aggregation output) model definitions."""
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Serializes field names in camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProjectSummary(CamelModel):
    """Per-project metrics."""

    project_id: str
    name: str
    description: str = ""
    is_billable: bool
    hourly_rate: Optional[float] = None
    project_created_on: str
    project_started_on: str
    project_last_work_on: str
    total_working_hours: float
    total_earnings: float


class SummaryOverview(CamelModel):
    """Totals across every project with activity."""

    total_projects: int = 0
    total_working_hours: float = 0.0
    billable_projects: int = 0
    billable_hours: float = 0.0
    billable_earnings: float = 0.0
    non_billable_projects: int = 0
    non_billable_hours: float = 0.0


class ProjectsSummaryResponse(CamelModel):
    """Response for the per-project summary."""

    success: bool = True
    filter_applied: Optional[dict[str, str]] = None
    msg: Optional[str] = None
    data: list[ProjectSummary]


class OverviewSummaryResponse(CamelModel):
    """Response for the overview summary."""

    success: bool = True
    filter_applied: Optional[dict[str, str]] = None
    data: SummaryOverview

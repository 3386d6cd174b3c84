"""Summary endpoints - aggregated hours and earnings, JSON or PDF."""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response

from worklog.database import get_database
from worklog.errors import WorklogError
from worklog.models.summary import OverviewSummaryResponse, ProjectsSummaryResponse
from worklog.routers.auth import get_current_user_id
from worklog.services.summary_service import DateFilter, SummaryService, parse_date_filters
from worklog.utils.datetime_format import format_local_instant, get_clock
from worklog.utils.pdf_report import render_overview_summary_pdf, render_projects_summary_pdf


router = APIRouter(prefix="/summary", tags=["summary"])

NO_ACTIVITY_MESSAGE = "No projects with activity in the selected date range"


async def get_date_filter(
    from_: Optional[str] = Query(None, alias="from", description="DD-MM-YYYY"),
    to: Optional[str] = Query(None, description="DD-MM-YYYY"),
) -> DateFilter:
    """
    Dependency resolving the ``from``/``to`` query parameters.

    Raises:
        HTTPException: Naming the invalid parameter (400)
    """
    try:
        return parse_date_filters(from_, to)
    except WorklogError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)


def export_filename(kind: str, filter_applied: Optional[dict]) -> str:
    """
    Attachment name for an exported report.

    Examples:
        >>> export_filename("projects", {"from": "01-01-2026"})
        'projects-summary-01-01-2026-all.pdf'
    """
    filter_applied = filter_applied or {}
    return f"{kind}-summary-{filter_applied.get('from', 'all')}-{filter_applied.get('to', 'all')}.pdf"


def pdf_response(content: bytes, filename: str) -> Response:
    headers = {"Content-Disposition": f'attachment; filename="{filename}"'}
    return Response(content=content, media_type="application/pdf", headers=headers)


@router.get("/projects", response_model=ProjectsSummaryResponse)
async def get_projects_summary(
    date_filter: DateFilter = Depends(get_date_filter),
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Per-project hours, earnings and activity dates.

    - Only active projects with entries ending in the range are listed
    """
    service = SummaryService(db)
    projects = await service.get_projects_summary(user_id=user_id, date_filter=date_filter)

    return ProjectsSummaryResponse(
        filter_applied=date_filter.filter_applied,
        msg=None if projects else NO_ACTIVITY_MESSAGE,
        data=projects,
    )


@router.get("/overview", response_model=OverviewSummaryResponse)
async def get_summary_overview(
    date_filter: DateFilter = Depends(get_date_filter),
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """Totals across all active projects with entries ending in the range."""
    service = SummaryService(db)
    overview = await service.get_overview(user_id=user_id, date_filter=date_filter)

    return OverviewSummaryResponse(
        filter_applied=date_filter.filter_applied,
        data=overview,
    )


@router.get("/projects/export/pdf")
async def export_projects_summary_pdf(
    date_filter: DateFilter = Depends(get_date_filter),
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
    clock=Depends(get_clock),
):
    """Per-project summary as a PDF download."""
    service = SummaryService(db)
    projects = await service.get_projects_summary(user_id=user_id, date_filter=date_filter)

    content = render_projects_summary_pdf(
        projects,
        date_filter.filter_applied,
        generated_at=format_local_instant(clock()),
    )
    return pdf_response(content, export_filename("projects", date_filter.filter_applied))


@router.get("/overview/export/pdf")
async def export_overview_summary_pdf(
    date_filter: DateFilter = Depends(get_date_filter),
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
    clock=Depends(get_clock),
):
    """Overview summary as a PDF download."""
    service = SummaryService(db)
    overview = await service.get_overview(user_id=user_id, date_filter=date_filter)

    content = render_overview_summary_pdf(
        overview,
        date_filter.filter_applied,
        generated_at=format_local_instant(clock()),
    )
    return pdf_response(content, export_filename("overview", date_filter.filter_applied))

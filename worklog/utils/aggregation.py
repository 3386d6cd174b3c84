"""Summary reducers: per-project metrics and the overview.

Hours and earnings are computed with Decimal and rounded half away from zero
to two places. Per-project hours are rounded once; the overview sums those
rounded values and derives non-billable hours by subtraction.
"""
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Sequence, Union

from worklog.models.project import Project
from worklog.models.summary import ProjectSummary, SummaryOverview
from worklog.models.time_entry import TimeEntryInDB
from worklog.utils.datetime_format import format_local_instant

TWOPLACES = Decimal("0.01")
SIXTY = Decimal(60)
ZERO = Decimal("0")

NO_WORK_RECORDED = "No work recorded"


def round_half_up(value: Union[Decimal, float, int]) -> Decimal:
    """
    Round to two decimal places, halves away from zero.

    Examples:
        >>> round_half_up(Decimal("1.005"))
        Decimal('1.01')
        >>> round_half_up(-2.675)
        Decimal('-2.68')
    """
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def hours_from_minutes(total_minutes: int) -> Decimal:
    """Rounded hours for a number of minutes (100 -> 1.67)."""
    return round_half_up(Decimal(total_minutes) / SIXTY)


def earnings_for(project: Project, hours: Decimal) -> Decimal:
    """Rounded earnings for already-rounded hours; zero unless billable with a rate."""
    if not project.has_billable_rate:
        return ZERO
    return round_half_up(hours * Decimal(str(project.hourly_rate)))


def entries_for_project(project: Project, entries: Iterable[TimeEntryInDB]) -> list[TimeEntryInDB]:
    return [entry for entry in entries if entry.project_id == project.id]


def compute_project_metrics(project: Project, entries: Sequence[TimeEntryInDB]) -> ProjectSummary:
    """
    Compute hours, earnings and activity dates for one project.

    Args:
        project: The project
        entries: Selected entries; only those referencing the project count

    Returns:
        ProjectSummary with rounded figures and locally formatted dates
    """
    project_entries = entries_for_project(project, entries)

    total_minutes = sum(entry.duration_minutes for entry in project_entries)
    hours = hours_from_minutes(total_minutes)
    earnings = earnings_for(project, hours)

    if project_entries:
        started_on = format_local_instant(min(entry.start_time for entry in project_entries))
        last_work_on = format_local_instant(max(entry.end_time for entry in project_entries))
    else:
        started_on = NO_WORK_RECORDED
        last_work_on = NO_WORK_RECORDED

    return ProjectSummary(
        project_id=project.id,
        name=project.name,
        description=project.description,
        is_billable=project.is_billable,
        hourly_rate=project.hourly_rate or None,
        project_created_on=format_local_instant(project.created_at),
        project_started_on=started_on,
        project_last_work_on=last_work_on,
        total_working_hours=float(hours),
        total_earnings=float(earnings),
    )


def compute_overview(projects: Sequence[Project], entries: Sequence[TimeEntryInDB]) -> SummaryOverview:
    """
    Compute totals across projects.

    Only projects with at least one selected entry are counted as billable
    or non-billable; ``total_projects`` is the number of projects passed in.
    """
    total_hours = ZERO
    billable_hours = ZERO
    billable_earnings = ZERO
    billable_projects = 0
    non_billable_projects = 0

    for project in projects:
        project_entries = entries_for_project(project, entries)
        if not project_entries:
            continue

        hours = hours_from_minutes(sum(entry.duration_minutes for entry in project_entries))
        total_hours += hours

        if project.has_billable_rate:
            billable_hours += hours
            billable_earnings += earnings_for(project, hours)
            billable_projects += 1
        else:
            non_billable_projects += 1

    total_hours = round_half_up(total_hours)
    billable_hours = round_half_up(billable_hours)
    billable_earnings = round_half_up(billable_earnings)

    return SummaryOverview(
        total_projects=len(projects),
        total_working_hours=float(total_hours),
        billable_projects=billable_projects,
        billable_hours=float(billable_hours),
        billable_earnings=float(billable_earnings),
        non_billable_projects=non_billable_projects,
        non_billable_hours=float(round_half_up(total_hours - billable_hours)),
    )

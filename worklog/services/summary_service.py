"""Summary service - selects entries and projects for the aggregation."""
import logging
from datetime import datetime
from typing import NamedTuple, Optional

from bson import ObjectId

from worklog.errors import InvalidFormat
from worklog.models.project import Project
from worklog.models.summary import ProjectSummary, SummaryOverview
from worklog.models.time_entry import TimeEntryInDB
from worklog.utils.aggregation import compute_overview, compute_project_metrics
from worklog.utils.datetime_format import DATE_PATTERN, parse_local_date_range

logger = logging.getLogger(__name__)


class DateFilter(NamedTuple):
    """Resolved range bounds plus the raw strings that produced them."""

    from_date: Optional[datetime]
    to_date: Optional[datetime]
    filter_applied: Optional[dict[str, str]]


def parse_date_filters(from_: Optional[str] = None, to: Optional[str] = None) -> DateFilter:
    """
    Resolve optional ``from``/``to`` day strings into UTC bounds.

    ``from`` contributes the first second of its day, ``to`` the last.

    Raises:
        InvalidFormat: Naming the offending parameter
    """
    from_date = None
    to_date = None
    filter_applied = {}

    if from_:
        parsed = parse_local_date_range(from_)
        if parsed is None:
            raise InvalidFormat(f"Invalid 'from' date format. Use {DATE_PATTERN}", field="from")
        from_date = parsed.start
        filter_applied["from"] = from_

    if to:
        parsed = parse_local_date_range(to)
        if parsed is None:
            raise InvalidFormat(f"Invalid 'to' date format. Use {DATE_PATTERN}", field="to")
        to_date = parsed.end
        filter_applied["to"] = to

    return DateFilter(from_date, to_date, filter_applied or None)


def build_time_entry_filter(
    user_id: str,
    from_date: Optional[datetime],
    to_date: Optional[datetime],
) -> dict:
    """
    Build the MongoDB query for entries whose end time falls in the range.

    Examples:
        >>> build_time_entry_filter("user123", None, None)
        {'user_id': 'user123'}
    """
    query = {"user_id": user_id}

    if from_date or to_date:
        query["end_time"] = {}
        if from_date:
            query["end_time"]["$gte"] = from_date
        if to_date:
            query["end_time"]["$lte"] = to_date

    return query


class SummaryService:
    """Service computing project and overview summaries."""

    def __init__(self, db):
        """Initialize service with database connection."""
        self.db = db
        self.time_entries = db["time_entries"]
        self.projects = db["projects"]

    async def fetch_projects_with_work(
        self,
        user_id: str,
        date_filter: DateFilter,
    ) -> tuple[list[Project], list[TimeEntryInDB]]:
        """
        Fetch the entries in range and the active projects they reference.

        Projects without a qualifying entry are left out, as are inactive
        projects even when they still have entries.

        Returns:
            (projects ordered by creation time, entries)
        """
        query = build_time_entry_filter(user_id, date_filter.from_date, date_filter.to_date)
        entry_docs = await self.time_entries.find(query).to_list(length=None)
        entries = [TimeEntryInDB.from_doc(doc) for doc in entry_docs]

        project_ids = []
        for entry in entries:
            if entry.project_id not in project_ids and ObjectId.is_valid(entry.project_id):
                project_ids.append(entry.project_id)

        if not project_ids:
            return [], entries

        cursor = self.projects.find({
            "_id": {"$in": [ObjectId(project_id) for project_id in project_ids]},
            "user_id": user_id,
            "is_active": True,
        }).sort("created_at", 1)
        project_docs = await cursor.to_list(length=None)

        return [Project.from_doc(doc) for doc in project_docs], entries

    async def get_projects_summary(
        self,
        user_id: str,
        date_filter: DateFilter,
    ) -> list[ProjectSummary]:
        """
        Per-project metrics for every active project with work in range.

        Args:
            user_id: User ID
            date_filter: Resolved range

        Returns:
            List of ProjectSummary, ordered by project creation
        """
        projects, entries = await self.fetch_projects_with_work(user_id, date_filter)
        logger.debug(
            "Summarizing %d projects from %d entries for user %s",
            len(projects),
            len(entries),
            user_id,
        )
        return [compute_project_metrics(project, entries) for project in projects]

    async def get_overview(
        self,
        user_id: str,
        date_filter: DateFilter,
    ) -> SummaryOverview:
        """Overview totals for the selected projects."""
        projects, entries = await self.fetch_projects_with_work(user_id, date_filter)
        return compute_overview(projects, entries)

"""Time entry service - validation, overlap control and persistence of entries."""
import logging
from datetime import datetime, timedelta
from typing import Callable, Optional

from worklog.errors import InvalidFormat, InvalidRange, NotFound, OverlapViolation
from worklog.models.time_entry import TimeEntry, TimeEntryCreate, TimeEntryUpdate
from worklog.utils.datetime_format import (
    DATE_TIME_PATTERN,
    format_local_instant,
    parse_local_instant,
    utc_now,
)
from worklog.utils.ids import to_object_id
from worklog.utils.locks import owner_locks
from worklog.utils.overlap import (
    OVERLAP_TOLERANCE_MINUTES,
    Interval,
    find_collisions,
    overlap_minutes,
)

logger = logging.getLogger(__name__)

FUTURE_SKEW_MINUTES = 5


def calculate_duration(start_time: datetime, end_time: datetime) -> int:
    """
    Whole minutes between two instants.

    Examples:
        >>> from datetime import datetime
        >>> calculate_duration(datetime(2026, 1, 10, 9), datetime(2026, 1, 10, 11, 0, 59))
        120
    """
    return int((end_time - start_time).total_seconds() // 60)


class TimeEntryService:
    """Service for creating, editing and reading time entries."""

    def __init__(self, db, clock: Callable[[], datetime] = utc_now):
        """Initialize service with database connection and a clock."""
        self.db = db
        self.clock = clock
        self.time_entries = db["time_entries"]
        self.projects = db["projects"]

    def _doc_to_entry(self, doc: dict) -> TimeEntry:
        """Convert database document to TimeEntry response model."""
        return TimeEntry(
            _id=str(doc["_id"]),
            user_id=doc["user_id"],
            project_id=doc["project_id"],
            description=doc.get("description", ""),
            start_time=format_local_instant(doc["start_time"]),
            end_time=format_local_instant(doc["end_time"]),
            duration_minutes=doc["duration_minutes"],
            created_at=doc["created_at"],
            updated_at=doc["updated_at"],
        )

    def _parse_time(self, value: str, field: str) -> datetime:
        parsed = parse_local_instant(value)
        if parsed is None:
            label = "start" if field == "start_time" else "end"
            raise InvalidFormat(
                f"Invalid {label} time format. Use {DATE_TIME_PATTERN}",
                field=field,
            )
        return parsed

    def _validate_range(self, start_time: datetime, end_time: datetime) -> None:
        """
        Check the ordering and future-skew rules.

        Raises:
            InvalidRange: If end is not after start, or is more than
                FUTURE_SKEW_MINUTES ahead of the clock
        """
        if end_time <= start_time:
            logger.info("Rejected time entry ending at or before its start")
            raise InvalidRange("End time must be after start time", field="end_time")

        latest_allowed = self.clock() + timedelta(minutes=FUTURE_SKEW_MINUTES)
        if end_time > latest_allowed:
            logger.info("Rejected time entry ending %s, after %s", end_time, latest_allowed)
            raise InvalidRange(
                f"End time cannot be more than {FUTURE_SKEW_MINUTES} minutes in the future",
                field="end_time",
            )

    async def _get_active_project(self, user_id: str, project_id: str) -> dict:
        project = await self.projects.find_one({
            "_id": to_object_id(project_id, "Project"),
            "user_id": user_id,
            "is_active": True,
        })
        if not project:
            raise NotFound("Project not found")
        return project

    async def _check_overlap(
        self,
        user_id: str,
        start_time: datetime,
        end_time: datetime,
        exclude_id: Optional[str] = None,
    ) -> None:
        """
        Reject the write if it overlaps an existing entry beyond tolerance.

        Only entries that intersect the candidate at all are fetched; entries
        outside that window share zero minutes with it.

        Raises:
            OverlapViolation: If any entry overlaps by more than the tolerance
        """
        cursor = self.time_entries.find({
            "user_id": user_id,
            "start_time": {"$lt": end_time},
            "end_time": {"$gt": start_time},
        })
        docs = await cursor.to_list(length=None)

        existing = [
            Interval(start=doc["start_time"], end=doc["end_time"], id=str(doc["_id"]))
            for doc in docs
        ]
        candidate = Interval(start=start_time, end=end_time, id=exclude_id)
        collisions = find_collisions(
            candidate,
            existing,
            tolerance_minutes=OVERLAP_TOLERANCE_MINUTES,
            exclude_id=exclude_id,
        )

        if collisions:
            logger.warning(
                "Rejected overlapping time entry for user %s (%d collisions, up to %d minutes)",
                user_id,
                len(collisions),
                max(overlap_minutes(candidate, interval) for interval in collisions),
            )
            raise OverlapViolation(
                "Time entry overlaps with existing entry. "
                f"Maximum {OVERLAP_TOLERANCE_MINUTES} minutes overlap allowed."
            )

    async def create_entry(
        self,
        user_id: str,
        entry_create: TimeEntryCreate,
    ) -> TimeEntry:
        """
        Create a time entry.

        Args:
            user_id: User ID
            entry_create: Time entry creation data, times in local format

        Returns:
            Created time entry

        Raises:
            NotFound: If the project is unknown, inactive or not owned
            InvalidFormat: If a time does not match the local format
            InvalidRange: If the times are out of order or too far ahead
            OverlapViolation: If the entry collides with an existing one
        """
        start_time = self._parse_time(entry_create.start_time, "start_time")
        end_time = self._parse_time(entry_create.end_time, "end_time")
        self._validate_range(start_time, end_time)

        async with owner_locks.hold(user_id):
            # Project must still be active when the entry is written
            await self._get_active_project(user_id, entry_create.project_id)
            await self._check_overlap(user_id, start_time, end_time)

            now = self.clock()
            entry_doc = {
                "user_id": user_id,
                "project_id": entry_create.project_id,
                "description": entry_create.description,
                "start_time": start_time,
                "end_time": end_time,
                "duration_minutes": calculate_duration(start_time, end_time),
                "created_at": now,
                "updated_at": now,
            }

            result = await self.time_entries.insert_one(entry_doc)
            entry_doc["_id"] = result.inserted_id

        logger.info("Created time entry %s for user %s", entry_doc["_id"], user_id)
        return self._doc_to_entry(entry_doc)

    async def update_entry(
        self,
        user_id: str,
        entry_id: str,
        entry_update: TimeEntryUpdate,
    ) -> TimeEntry:
        """
        Update a time entry.

        Omitted start/end times keep their stored values; the merged interval
        goes through the same range and overlap checks as a new entry, with
        the entry itself excluded from the overlap scan.

        Raises:
            NotFound: If the entry (or a new project) is unknown or not owned
            InvalidFormat, InvalidRange, OverlapViolation: As for create
        """
        object_id = to_object_id(entry_id, "Time entry")

        async with owner_locks.hold(user_id):
            existing = await self.time_entries.find_one({
                "_id": object_id,
                "user_id": user_id,
            })
            if not existing:
                raise NotFound("Time entry not found")

            if entry_update.project_id is not None:
                await self._get_active_project(user_id, entry_update.project_id)

            start_time = (
                self._parse_time(entry_update.start_time, "start_time")
                if entry_update.start_time
                else existing["start_time"]
            )
            end_time = (
                self._parse_time(entry_update.end_time, "end_time")
                if entry_update.end_time
                else existing["end_time"]
            )
            self._validate_range(start_time, end_time)
            await self._check_overlap(user_id, start_time, end_time, exclude_id=entry_id)

            update_doc = {
                "start_time": start_time,
                "end_time": end_time,
                "duration_minutes": calculate_duration(start_time, end_time),
                "updated_at": self.clock(),
            }
            if entry_update.description is not None:
                update_doc["description"] = entry_update.description
            if entry_update.project_id is not None:
                update_doc["project_id"] = entry_update.project_id

            updated_doc = await self.time_entries.find_one_and_update(
                {"_id": object_id, "user_id": user_id},
                {"$set": update_doc},
                return_document=True,
            )

        if not updated_doc:
            raise NotFound("Time entry not found")

        logger.info("Updated time entry %s for user %s", entry_id, user_id)
        return self._doc_to_entry(updated_doc)

    async def get_entry(
        self,
        user_id: str,
        entry_id: str,
    ) -> TimeEntry:
        """
        Get a time entry by ID.

        Raises:
            NotFound: If the entry is unknown or not owned
        """
        doc = await self.time_entries.find_one({
            "_id": to_object_id(entry_id, "Time entry"),
            "user_id": user_id,
        })
        if not doc:
            raise NotFound("Time entry not found")

        return self._doc_to_entry(doc)

    async def list_entries_for_project(
        self,
        user_id: str,
        project_id: str,
    ) -> list[TimeEntry]:
        """
        List a project's entries, most recent first.

        Raises:
            NotFound: If the project is unknown, inactive or not owned
        """
        await self._get_active_project(user_id, project_id)

        cursor = self.time_entries.find({
            "user_id": user_id,
            "project_id": project_id,
        }).sort("start_time", -1)
        entry_docs = await cursor.to_list(length=None)

        return [self._doc_to_entry(doc) for doc in entry_docs]

    async def delete_entry(
        self,
        user_id: str,
        entry_id: str,
    ) -> dict:
        """
        Delete a time entry.

        Returns:
            Dictionary with deleted_count

        Raises:
            NotFound: If entry not found
        """
        object_id = to_object_id(entry_id, "Time entry")

        existing = await self.time_entries.find_one({
            "_id": object_id,
            "user_id": user_id,
        })
        if not existing:
            raise NotFound("Time entry not found")

        # Hard delete for time entries
        result = await self.time_entries.delete_one({
            "_id": object_id,
            "user_id": user_id,
        })

        logger.info("Deleted time entry %s for user %s", entry_id, user_id)
        return {"deleted_count": result.deleted_count}

"""Project service - business logic for project management."""
import logging
from datetime import datetime
from typing import Callable

from pymongo.errors import PyMongoError

from worklog.errors import InvalidProject, NotFound, PartialFailure
from worklog.models.project import Project, ProjectCreate, ProjectUpdate
from worklog.utils.datetime_format import utc_now
from worklog.utils.ids import to_object_id
from worklog.utils.locks import owner_locks

logger = logging.getLogger(__name__)


class ProjectService:
    """Service for handling project operations."""

    def __init__(self, db, clock: Callable[[], datetime] = utc_now):
        """Initialize service with database connection."""
        self.db = db
        self.clock = clock
        self.projects = db["projects"]
        self.time_entries = db["time_entries"]

    async def _get_active_doc(self, user_id: str, project_id: str) -> dict:
        doc = await self.projects.find_one({
            "_id": to_object_id(project_id, "Project"),
            "user_id": user_id,
            "is_active": True,
        })
        if not doc:
            raise NotFound("Project not found")
        return doc

    async def create_project(
        self,
        user_id: str,
        project_create: ProjectCreate,
    ) -> Project:
        """
        Create a new project.

        Args:
            user_id: User ID who owns the project
            project_create: Project creation data

        Returns:
            Created project object
        """
        now = self.clock()
        project_doc = {
            "user_id": user_id,
            "name": project_create.name,
            "description": project_create.description,
            "is_billable": project_create.is_billable,
            "hourly_rate": project_create.hourly_rate if project_create.is_billable else None,
            "is_active": True,
            "created_at": now,
            "updated_at": now,
        }

        result = await self.projects.insert_one(project_doc)
        project_doc["_id"] = result.inserted_id

        logger.info("Created project %s for user %s", project_doc["_id"], user_id)
        return Project.from_doc(project_doc)

    async def list_projects(self, user_id: str) -> list[Project]:
        """
        List active projects for a user, oldest first.

        Args:
            user_id: User ID

        Returns:
            List of projects
        """
        cursor = self.projects.find({
            "user_id": user_id,
            "is_active": True,
        }).sort("created_at", 1)
        project_docs = await cursor.to_list(length=None)

        return [Project.from_doc(doc) for doc in project_docs]

    async def get_project(self, user_id: str, project_id: str) -> Project:
        """
        Get an active project by ID.

        Raises:
            NotFound: If project not found, inactive or not owned
        """
        return Project.from_doc(await self._get_active_doc(user_id, project_id))

    async def update_project(
        self,
        user_id: str,
        project_id: str,
        project_update: ProjectUpdate,
    ) -> Project:
        """
        Update a project.

        The billable flag and hourly rate are checked against the merged
        result: a billable project must end up with a rate and a
        non-billable one without. Switching a project to non-billable
        clears its rate.

        Args:
            user_id: User ID
            project_id: Project ID
            project_update: Update data

        Returns:
            Updated project object

        Raises:
            NotFound: If project not found
            InvalidProject: If the merged billable/rate pair is inconsistent
        """
        existing = await self._get_active_doc(user_id, project_id)

        is_billable = (
            project_update.is_billable
            if project_update.is_billable is not None
            else existing.get("is_billable", False)
        )
        if not is_billable and project_update.hourly_rate is not None:
            raise InvalidProject(
                "Hourly rate is only allowed on billable projects", field="hourly_rate"
            )
        hourly_rate = (
            project_update.hourly_rate
            if project_update.hourly_rate is not None
            else existing.get("hourly_rate")
        )
        if not is_billable:
            hourly_rate = None
        elif hourly_rate is None:
            raise InvalidProject(
                "Hourly rate is required when project is billable", field="hourly_rate"
            )

        update_doc = {
            "is_billable": is_billable,
            "hourly_rate": hourly_rate,
            "updated_at": self.clock(),
        }
        if project_update.name is not None:
            update_doc["name"] = project_update.name
        if project_update.description is not None:
            update_doc["description"] = project_update.description

        updated_doc = await self.projects.find_one_and_update(
            {"_id": existing["_id"], "user_id": user_id, "is_active": True},
            {"$set": update_doc},
            return_document=True,
        )
        if not updated_doc:
            raise NotFound("Project not found")

        return Project.from_doc(updated_doc)

    async def delete_project(self, user_id: str, project_id: str) -> dict:
        """
        Soft delete a project and remove its time entries.

        The project is deactivated first, then its entries are deleted. Both
        steps hold the owner lock, so no entry write for this user can land
        between them.

        Returns:
            Dictionary with deleted_count and deleted_entries

        Raises:
            NotFound: If project not found
            PartialFailure: If the project was deactivated but its entries
                could not be removed
        """
        async with owner_locks.hold(user_id):
            existing = await self._get_active_doc(user_id, project_id)

            result = await self.projects.update_one(
                {"_id": existing["_id"], "user_id": user_id},
                {"$set": {"is_active": False, "updated_at": self.clock()}},
            )

            try:
                entries_result = await self.time_entries.delete_many({
                    "user_id": user_id,
                    "project_id": str(existing["_id"]),
                })
            except PyMongoError as e:
                logger.error(
                    "Project %s deactivated but its time entries were not removed: %s",
                    project_id,
                    e,
                )
                raise PartialFailure(
                    "Project was deactivated but its time entries could not be removed"
                ) from e

        logger.info(
            "Deactivated project %s for user %s, removed %d time entries",
            project_id,
            user_id,
            entries_result.deleted_count,
        )
        return {
            "deleted_count": result.modified_count,
            "deleted_entries": entries_result.deleted_count,
        }

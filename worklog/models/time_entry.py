"""Time entry model definitions."""
from datetime import datetime
from typing import Annotated, Optional

from pydantic import BaseModel, Field, StringConstraints

EntryDescription = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=1000)]


class TimeEntryCreate(BaseModel):
    """Time entry creation model. Times use ``DD-MM-YYYY H:MM AM|PM``."""

    project_id: str = Field(min_length=1)
    start_time: str
    end_time: str
    description: EntryDescription


class TimeEntryUpdate(BaseModel):
    """Time entry update model - omitted fields keep their stored value."""

    project_id: Optional[str] = Field(default=None, min_length=1)
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    description: Optional[EntryDescription] = None


class TimeEntryInDB(BaseModel):
    """Time entry as stored, with UTC instants."""

    id: str = Field(alias="_id", serialization_alias="id")
    user_id: str
    project_id: str
    description: str = ""
    start_time: datetime
    end_time: datetime
    duration_minutes: int
    created_at: datetime
    updated_at: datetime

    model_config = {"populate_by_name": True}

    @classmethod
    def from_doc(cls, doc: dict) -> "TimeEntryInDB":
        """Build from a database document."""
        return cls(
            _id=str(doc["_id"]),
            user_id=doc["user_id"],
            project_id=doc["project_id"],
            description=doc.get("description", ""),
            start_time=doc["start_time"],
            end_time=doc["end_time"],
            duration_minutes=doc["duration_minutes"],
            created_at=doc["created_at"],
            updated_at=doc["updated_at"],
        )


class TimeEntry(BaseModel):
    """Time entry for API responses, with times in the local text format."""

    id: str = Field(alias="_id", serialization_alias="id")
    user_id: str
    project_id: str
    description: str = ""
    start_time: str
    end_time: str
    duration_minutes: int
    created_at: datetime
    updated_at: datetime

    model_config = {"populate_by_name": True}

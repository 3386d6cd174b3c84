"""Project model definitions."""
from datetime import datetime
from typing import Annotated, Optional

from pydantic import BaseModel, Field, StringConstraints, model_validator

MIN_HOURLY_RATE = 0.01

ProjectName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=3, max_length=100)]
ProjectDescription = Annotated[str, StringConstraints(strip_whitespace=True, max_length=500)]


class ProjectBase(BaseModel):
    """Base project fields."""

    name: ProjectName
    description: ProjectDescription = ""
    is_billable: bool = False
    hourly_rate: Optional[float] = Field(default=None, ge=MIN_HOURLY_RATE)


class ProjectCreate(ProjectBase):
    """Project creation model."""

    @model_validator(mode="after")
    def check_rate_matches_billable(self) -> "ProjectCreate":
        if self.is_billable and self.hourly_rate is None:
            raise ValueError("Hourly rate is required when project is billable")
        if not self.is_billable and self.hourly_rate is not None:
            raise ValueError("Hourly rate is only allowed on billable projects")
        return self


class ProjectUpdate(BaseModel):
    """Project update model - all fields optional."""

    name: Optional[ProjectName] = None
    description: Optional[ProjectDescription] = None
    is_billable: Optional[bool] = None
    hourly_rate: Optional[float] = Field(default=None, ge=MIN_HOURLY_RATE)

    @model_validator(mode="after")
    def check_rate_matches_billable(self) -> "ProjectUpdate":
        if self.is_billable is True and self.hourly_rate is None:
            raise ValueError("Hourly rate is required when project is billable")
        if self.is_billable is False and self.hourly_rate is not None:
            raise ValueError("Hourly rate is only allowed on billable projects")
        return self


class Project(ProjectBase):
    """Full project model with database fields."""

    id: str = Field(alias="_id", serialization_alias="id")
    user_id: str
    is_active: bool = True
    created_at: datetime
    updated_at: datetime

    model_config = {"populate_by_name": True}

    @classmethod
    def from_doc(cls, doc: dict) -> "Project":
        """Build from a database document."""
        return cls(
            _id=str(doc["_id"]),
            user_id=doc["user_id"],
            name=doc["name"],
            description=doc.get("description", ""),
            is_billable=doc.get("is_billable", False),
            hourly_rate=doc.get("hourly_rate"),
            is_active=doc.get("is_active", True),
            created_at=doc["created_at"],
            updated_at=doc["updated_at"],
        )

    @property
    def has_billable_rate(self) -> bool:
        """Billable and carrying a usable rate; only these earn money."""
        return self.is_billable and bool(self.hourly_rate)

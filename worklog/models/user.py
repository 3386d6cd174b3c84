"""User model definitions."""
from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, EmailStr, Field, StringConstraints

UserName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=3, max_length=30)]


class UserBase(BaseModel):
    """Base user fields."""

    email: EmailStr
    name: UserName


class UserCreate(UserBase):
    """User creation model with password."""

    password: str = Field(min_length=6)


class User(UserBase):
    """User model without password (for API responses)."""

    id: str = Field(alias="_id", serialization_alias="id")
    created_at: datetime
    updated_at: datetime

    model_config = {"populate_by_name": True}


class LoginRequest(BaseModel):
    """Credentials posted to /auth/login."""

    email: str
    password: str


class AccessToken(BaseModel):
    """Bearer token issued on login."""

    access_token: str
    token_type: str = "bearer"

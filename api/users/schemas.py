"""
User profile schemas.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field

from core.schemas import PartialUpdateModel


class UserUpdateRequest(PartialUpdateModel):
    first_name: str | None = Field(default=None, min_length=1, max_length=100)
    last_name: str | None = Field(default=None, min_length=1, max_length=100)
    email: EmailStr | None = None
    age: int | None = Field(default=None, ge=0)


class UserProfile(BaseModel):
    """
    Public view of a user. Never carries the password hash.
    """

    id: str
    first_name: str
    last_name: str
    email: str
    role: str
    age: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

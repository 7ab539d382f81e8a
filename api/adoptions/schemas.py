"""
Adoption request schemas.
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from core import db
from pets.schemas import Pet

AdoptionStatus = Literal["pending", "approved", "rejected"]


class AdoptionCreateRequest(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    pet_id: str = Field(..., alias="petId")

    @field_validator("pet_id")
    @classmethod
    def _check_pet_id(cls, value: str) -> str:
        value = value.strip()
        if not db.is_valid_id(value):
            raise ValueError(f"must be a {db.ID_LENGTH}-character hexadecimal id.")
        return value.lower()


class AdoptionRequest(BaseModel):
    id: str
    user_id: str
    pet_id: str
    status: AdoptionStatus
    created_at: datetime | None = None
    updated_at: datetime | None = None


class RequesterSummary(BaseModel):
    """
    Embedded requester: profile fields only, no credential and no role.
    """

    id: str
    first_name: str
    last_name: str
    email: str
    age: int | None = None


class AdoptionRequestDetail(AdoptionRequest):
    pet: Pet | None = None
    user: RequesterSummary | None = None

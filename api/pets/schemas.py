"""
Pydantic schemas for pet catalog endpoints.
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import AliasChoices, AnyUrl, BaseModel, ConfigDict, Field, field_serializer

from core.schemas import PartialUpdateModel

PetStatus = Literal["available", "adopted"]


class PetCreateRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., min_length=1, max_length=100)
    species: str = Field(..., min_length=1, max_length=50)
    breed: str | None = Field(default=None, max_length=100)
    age: int = Field(..., ge=0)
    description: str | None = Field(default=None, max_length=2000)
    image_url: AnyUrl | None = Field(
        default=None,
        validation_alias=AliasChoices("image_url", "imageUrl"),
    )
    status: PetStatus = "available"

    @field_serializer("image_url")
    def _dump_url(self, value: AnyUrl | None) -> str | None:
        return str(value) if value is not None else None


class PetUpdateRequest(PartialUpdateModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    species: str | None = Field(default=None, min_length=1, max_length=50)
    breed: str | None = Field(default=None, max_length=100)
    age: int | None = Field(default=None, ge=0)
    description: str | None = Field(default=None, max_length=2000)
    image_url: AnyUrl | None = Field(
        default=None,
        validation_alias=AliasChoices("image_url", "imageUrl"),
    )
    status: PetStatus | None = None

    @field_serializer("image_url")
    def _dump_url(self, value: AnyUrl | None) -> str | None:
        return str(value) if value is not None else None


class Pet(BaseModel):
    id: str
    name: str
    species: str
    breed: str | None = None
    age: int | None = None
    description: str | None = None
    image_url: str | None = None
    status: PetStatus = "available"
    created_at: datetime | None = None
    updated_at: datetime | None = None

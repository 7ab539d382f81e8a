"""
Pet catalog business logic.
"""

from __future__ import annotations

import logging

from core import db
from core.errors import not_found

from . import repository, schemas

logger = logging.getLogger(__name__)

PET_NOT_FOUND = "Pet not found."


def to_pet(row: dict) -> schemas.Pet:
    return schemas.Pet(
        id=str(row["id"]),
        name=str(row["name"]),
        species=str(row["species"]),
        breed=row.get("breed"),
        age=row.get("age"),
        description=row.get("description"),
        image_url=row.get("image_url"),
        status=str(row.get("status") or repository.STATUS_AVAILABLE),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


async def list_available() -> list[schemas.Pet]:
    rows = await repository.list_pets_by_status(repository.STATUS_AVAILABLE)
    return [to_pet(row) for row in rows]


async def get_pet(pet_id: str) -> schemas.Pet:
    # A malformed id cannot exist in the store.
    row = await repository.get_pet(pet_id) if db.is_valid_id(pet_id) else None
    if row is None:
        logger.info("pet_not_found pet_id=%s", pet_id)
        raise not_found(PET_NOT_FOUND)
    return to_pet(row)


async def create_pet(payload: schemas.PetCreateRequest) -> schemas.Pet:
    row = await repository.create_pet(payload.model_dump())
    logger.info("pet_created pet_id=%s", row["id"])
    return to_pet(row)


async def update_pet(pet_id: str, payload: schemas.PetUpdateRequest) -> schemas.Pet:
    changes = payload.changes()
    row = await repository.update_pet(pet_id, changes) if db.is_valid_id(pet_id) else None
    if row is None:
        logger.info("pet_not_found pet_id=%s", pet_id)
        raise not_found(PET_NOT_FOUND)
    logger.info("pet_updated pet_id=%s fields=%s", pet_id, ",".join(sorted(changes)))
    return to_pet(row)


async def delete_pet(pet_id: str) -> None:
    deleted = await repository.delete_pet(pet_id) if db.is_valid_id(pet_id) else False
    if not deleted:
        logger.info("pet_not_found pet_id=%s", pet_id)
        raise not_found(PET_NOT_FOUND)
    logger.info("pet_deleted pet_id=%s", pet_id)

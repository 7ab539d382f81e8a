"""
Self-service profile operations.
"""

from __future__ import annotations

import logging

from auth.permissions import Identity
from auth.repository import DuplicateEmailError
from core.errors import not_found, validation_error

from . import repository, schemas

logger = logging.getLogger(__name__)

USER_NOT_FOUND = "User not found."
EMAIL_TAKEN = "Email is already registered."


def to_profile(row: dict) -> schemas.UserProfile:
    return schemas.UserProfile(
        id=str(row["id"]),
        first_name=str(row["first_name"]),
        last_name=str(row["last_name"]),
        email=str(row["email"]),
        role=str(row["role"]),
        age=row.get("age"),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


async def get_self(identity: Identity) -> schemas.UserProfile:
    row = await repository.get_profile(identity.user_id)
    if row is None:
        logger.info("user_not_found user_id=%s", identity.user_id)
        raise not_found(USER_NOT_FOUND)
    return to_profile(row)


async def update_self(identity: Identity, payload: schemas.UserUpdateRequest) -> schemas.UserProfile:
    changes = payload.changes()
    email = changes.get("email")
    if email is not None and await repository.email_in_use(email, exclude_user_id=identity.user_id):
        raise validation_error(EMAIL_TAKEN)

    try:
        row = await repository.update_profile(identity.user_id, changes)
    except DuplicateEmailError as exc:
        raise validation_error(EMAIL_TAKEN) from exc

    if row is None:
        logger.info("user_not_found user_id=%s", identity.user_id)
        raise not_found(USER_NOT_FOUND)
    logger.info("user_updated user_id=%s fields=%s", identity.user_id, ",".join(sorted(changes)))
    return to_profile(row)


async def delete_self(identity: Identity) -> None:
    deleted = await repository.delete_user(identity.user_id)
    if not deleted:
        logger.info("user_not_found user_id=%s", identity.user_id)
        raise not_found(USER_NOT_FOUND)
    logger.info("user_deleted user_id=%s", identity.user_id)


async def list_all() -> list[schemas.UserProfile]:
    rows = await repository.list_profiles()
    return [to_profile(row) for row in rows]

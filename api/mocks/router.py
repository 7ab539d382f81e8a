"""
Mock-data endpoints (admin only for writes).
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from auth import dependencies as auth_dependencies
from auth.permissions import Identity
from core.config import Settings
from core.errors import validation_error

from . import service

router = APIRouter(prefix="/mocks")


def _parse_count(raw: str, name: str) -> int:
    try:
        value = int(raw)
    except ValueError as exc:
        raise validation_error(f"{name} must be an integer.") from exc
    if value < 0 or value > service.MAX_BATCH:
        raise validation_error(f"{name} must be between 0 and {service.MAX_BATCH}.")
    return value


@router.get("")
async def mocks_status() -> dict:
    return {"message": "Mocking API is up."}


@router.post("/{users}/{pets}")
async def seed_mocks(
    users: str,
    pets: str,
    _: Identity = Depends(auth_dependencies.require_admin),
    settings: Settings = Depends(auth_dependencies.get_settings),
) -> dict:
    user_count = _parse_count(users, "users")
    pet_count = _parse_count(pets, "pets")
    return await service.seed(user_count=user_count, pet_count=pet_count, settings=settings)

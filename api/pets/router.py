"""
Pet catalog endpoints.

Reads are public; writes require an admin.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status

from auth import dependencies as auth_dependencies
from auth.permissions import Identity

from . import schemas, service

router = APIRouter(prefix="/pets")


@router.get("", response_model=list[schemas.Pet])
async def list_pets() -> list[schemas.Pet]:
    """
    List pets that are still available for adoption.
    """
    return await service.list_available()


@router.get("/{pet_id}", response_model=schemas.Pet)
async def get_pet(pet_id: str) -> schemas.Pet:
    return await service.get_pet(pet_id)


@router.post("", status_code=status.HTTP_201_CREATED, response_model=schemas.Pet)
async def create_pet(
    request: schemas.PetCreateRequest,
    _: Identity = Depends(auth_dependencies.require_admin),
) -> schemas.Pet:
    return await service.create_pet(request)


@router.put("/{pet_id}", response_model=schemas.Pet)
async def update_pet(
    pet_id: str,
    request: schemas.PetUpdateRequest,
    _: Identity = Depends(auth_dependencies.require_admin),
) -> schemas.Pet:
    return await service.update_pet(pet_id, request)


@router.delete("/{pet_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def delete_pet(
    pet_id: str,
    _: Identity = Depends(auth_dependencies.require_admin),
) -> Response:
    await service.delete_pet(pet_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

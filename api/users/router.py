"""
User profile endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status

from auth import dependencies as auth_dependencies
from auth.permissions import Identity

from . import schemas, service

router = APIRouter(prefix="/users")


@router.get("/me", response_model=schemas.UserProfile)
async def get_me(
    identity: Identity = Depends(auth_dependencies.get_current_identity),
) -> schemas.UserProfile:
    return await service.get_self(identity)


@router.put("/me", response_model=schemas.UserProfile)
async def update_me(
    request: schemas.UserUpdateRequest,
    identity: Identity = Depends(auth_dependencies.get_current_identity),
) -> schemas.UserProfile:
    return await service.update_self(identity, request)


@router.delete("/me", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def delete_me(
    identity: Identity = Depends(auth_dependencies.get_current_identity),
) -> Response:
    await service.delete_self(identity)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("", response_model=list[schemas.UserProfile])
async def list_users(
    _: Identity = Depends(auth_dependencies.get_current_identity),
) -> list[schemas.UserProfile]:
    """
    List every user. Any authenticated caller may do this.
    """
    return await service.list_all()

"""
Adoption workflow endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status

from auth import dependencies as auth_dependencies
from auth.permissions import Identity

from . import schemas, service

router = APIRouter(prefix="/adoptions")


@router.post("", status_code=status.HTTP_201_CREATED, response_model=schemas.AdoptionRequest)
async def create_adoption(
    request: schemas.AdoptionCreateRequest,
    identity: Identity = Depends(auth_dependencies.get_current_identity),
) -> schemas.AdoptionRequest:
    return await service.create_request(identity, request)


@router.get("", response_model=list[schemas.AdoptionRequestDetail])
async def list_adoptions(
    identity: Identity = Depends(auth_dependencies.get_privileged_identity),
) -> list[schemas.AdoptionRequestDetail]:
    """
    Admins see every request; everyone else sees their own.
    """
    return await service.list_requests(identity)


@router.put("/{request_id}/approve", response_model=schemas.AdoptionRequest)
async def approve_adoption(
    request_id: str,
    _: Identity = Depends(auth_dependencies.require_admin),
) -> schemas.AdoptionRequest:
    return await service.approve_request(request_id)


@router.put("/{request_id}/reject", response_model=schemas.AdoptionRequest)
async def reject_adoption(
    request_id: str,
    _: Identity = Depends(auth_dependencies.require_admin),
) -> schemas.AdoptionRequest:
    return await service.reject_request(request_id)


@router.delete("/{request_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def delete_adoption(
    request_id: str,
    identity: Identity = Depends(auth_dependencies.get_privileged_identity),
) -> Response:
    await service.delete_request(identity, request_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

"""
Adoption workflow.

State machine for adoption requests:

    pending -> approved   (admin; the pet becomes `adopted`)
    pending -> rejected   (admin; the pet is untouched)

`approved` and `rejected` are terminal. Deletion is allowed in any state for
the requester or an admin.
"""

from __future__ import annotations

import logging

from auth import permissions
from auth.permissions import Identity
from core import db
from core.errors import conflict, forbidden, not_found
from pets import repository as pets_repository
from pets import service as pets_service

from . import repository, schemas

logger = logging.getLogger(__name__)

REQUEST_NOT_FOUND = "Adoption request not found."
PET_NOT_AVAILABLE = "Pet is not available for adoption."
ONLY_PENDING = {
    repository.STATUS_APPROVED: "Only pending requests can be approved.",
    repository.STATUS_REJECTED: "Only pending requests can be rejected.",
}


def to_request(row: dict) -> schemas.AdoptionRequest:
    return schemas.AdoptionRequest(
        id=str(row["id"]),
        user_id=str(row["user_id"]),
        pet_id=str(row["pet_id"]),
        status=str(row["status"]),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


def _embedded_pet(row: dict) -> schemas.Pet | None:
    if row.get("pet_ref_id") is None:
        return None
    return pets_service.to_pet(
        {
            "id": row["pet_ref_id"],
            "name": row["pet_name"],
            "species": row["pet_species"],
            "breed": row.get("pet_breed"),
            "age": row.get("pet_age"),
            "description": row.get("pet_description"),
            "image_url": row.get("pet_image_url"),
            "status": row.get("pet_status"),
            "created_at": row.get("pet_created_at"),
            "updated_at": row.get("pet_updated_at"),
        }
    )


def _embedded_requester(row: dict) -> schemas.RequesterSummary | None:
    if row.get("requester_id") is None:
        return None
    return schemas.RequesterSummary(
        id=str(row["requester_id"]),
        first_name=str(row["requester_first_name"]),
        last_name=str(row["requester_last_name"]),
        email=str(row["requester_email"]),
        age=row.get("requester_age"),
    )


def to_request_detail(row: dict) -> schemas.AdoptionRequestDetail:
    base = to_request(row)
    return schemas.AdoptionRequestDetail(
        **base.model_dump(),
        pet=_embedded_pet(row),
        user=_embedded_requester(row),
    )


async def create_request(identity: Identity, payload: schemas.AdoptionCreateRequest) -> schemas.AdoptionRequest:
    pet_id = payload.pet_id
    pet = await pets_repository.get_pet(pet_id)
    if pet is None:
        logger.info("adoption_create_rejected reason=pet_not_found pet_id=%s", pet_id)
        raise not_found(pets_service.PET_NOT_FOUND)
    if pet["status"] != pets_repository.STATUS_AVAILABLE:
        logger.info("adoption_create_rejected reason=pet_unavailable pet_id=%s", pet_id)
        raise conflict(PET_NOT_AVAILABLE)

    try:
        row = await repository.create_request(user_id=identity.user_id, pet_id=pet_id)
    except repository.MissingRequesterError as exc:
        raise not_found("User not found.") from exc

    if row is None:
        # The pet was adopted or deleted between the lookup and the insert.
        logger.info("adoption_create_rejected reason=pet_changed pet_id=%s", pet_id)
        raise conflict(PET_NOT_AVAILABLE)

    logger.info(
        "adoption_created request_id=%s user_id=%s pet_id=%s",
        row["id"],
        identity.user_id,
        pet_id,
    )
    return to_request(row)


async def list_requests(identity: Identity) -> list[schemas.AdoptionRequestDetail]:
    rows = await repository.list_requests(user_id=None if identity.is_admin else identity.user_id)
    return [to_request_detail(row) for row in rows]


async def _load_or_404(request_id: str) -> dict:
    row = await repository.get_request(request_id) if db.is_valid_id(request_id) else None
    if row is None:
        logger.info("adoption_not_found request_id=%s", request_id)
        raise not_found(REQUEST_NOT_FOUND)
    return row


async def _transition(request_id: str, *, to_status: str) -> schemas.AdoptionRequest:
    current = await _load_or_404(request_id)
    if current["status"] != repository.STATUS_PENDING:
        logger.info(
            "adoption_transition_rejected request_id=%s from=%s to=%s",
            request_id,
            current["status"],
            to_status,
        )
        raise conflict(ONLY_PENDING[to_status])

    if to_status == repository.STATUS_APPROVED:
        row = await repository.approve_request(request_id)
    else:
        row = await repository.reject_request(request_id)

    if row is None:
        # Someone else moved it out of pending, or deleted it, since the read.
        if await repository.get_request(request_id) is None:
            raise not_found(REQUEST_NOT_FOUND)
        raise conflict(ONLY_PENDING[to_status])

    logger.info(
        "adoption_%s request_id=%s pet_id=%s",
        to_status,
        row["id"],
        row["pet_id"],
    )
    return to_request(row)


async def approve_request(request_id: str) -> schemas.AdoptionRequest:
    return await _transition(request_id, to_status=repository.STATUS_APPROVED)


async def reject_request(request_id: str) -> schemas.AdoptionRequest:
    return await _transition(request_id, to_status=repository.STATUS_REJECTED)


async def delete_request(identity: Identity, request_id: str) -> None:
    current = await _load_or_404(request_id)

    decision = permissions.check_owner_or_admin(identity, owner_id=str(current["user_id"]))
    if isinstance(decision, permissions.Denied):
        logger.info("adoption_delete_denied request_id=%s user_id=%s", request_id, identity.user_id)
        raise forbidden(decision.reason)

    deleted = await repository.delete_request(request_id)
    if not deleted:
        raise not_found(REQUEST_NOT_FOUND)
    logger.info("adoption_deleted request_id=%s user_id=%s", request_id, identity.user_id)

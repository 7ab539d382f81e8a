"""
Adoption request persistence (raw SQL).

Status transitions are conditional updates (`... AND status = 'pending'`), so
a request can leave `pending` at most once even under concurrent calls.
"""

from __future__ import annotations

import asyncpg

from core import db
from pets import repository as pets_repository

REQUEST_COLUMNS = "id, user_id, pet_id, status, created_at, updated_at"

STATUS_PENDING = "pending"
STATUS_APPROVED = "approved"
STATUS_REJECTED = "rejected"


class MissingRequesterError(RuntimeError):
    pass


async def get_request(request_id: str, *, conn: asyncpg.Connection | None = None) -> dict | None:
    return await db.fetch_one(
        f"""
        SELECT {REQUEST_COLUMNS}
        FROM adoption_requests
        WHERE id = $1
        """,
        request_id,
        conn=conn,
    )


async def create_request(*, user_id: str, pet_id: str) -> dict | None:
    """
    Insert a pending request if the pet is available at insert time.

    Returns None when the pet is missing or no longer available. Several
    pending requests for the same pet may coexist; the pet only leaves
    `available` when one of them is approved.
    """
    try:
        return await db.fetch_one(
            f"""
            INSERT INTO adoption_requests (id, user_id, pet_id, status)
            SELECT $1::text, $2::text, p.id, $4::text
            FROM pets p
            WHERE p.id = $3
              AND p.status = $5
            RETURNING {REQUEST_COLUMNS}
            """,
            db.new_id(),
            user_id,
            pet_id,
            STATUS_PENDING,
            pets_repository.STATUS_AVAILABLE,
        )
    except asyncpg.ForeignKeyViolationError as exc:
        # Only the requester can be missing here; the pet comes from the SELECT.
        raise MissingRequesterError(user_id) from exc


async def list_requests(*, user_id: str | None = None) -> list[dict]:
    """
    List requests joined with their pet and requester.

    `user_id=None` lists every request. Joined columns come back prefixed
    with `pet_` / `requester_`; missing joins yield NULLs.
    """
    return await db.fetch_all(
        """
        SELECT
          r.id, r.user_id, r.pet_id, r.status, r.created_at, r.updated_at,
          p.id AS pet_ref_id,
          p.name AS pet_name,
          p.species AS pet_species,
          p.breed AS pet_breed,
          p.age AS pet_age,
          p.description AS pet_description,
          p.image_url AS pet_image_url,
          p.status AS pet_status,
          p.created_at AS pet_created_at,
          p.updated_at AS pet_updated_at,
          u.id AS requester_id,
          u.first_name AS requester_first_name,
          u.last_name AS requester_last_name,
          u.email AS requester_email,
          u.age AS requester_age
        FROM adoption_requests r
        LEFT JOIN pets p ON p.id = r.pet_id
        LEFT JOIN users u ON u.id = r.user_id
        WHERE ($1::text IS NULL OR r.user_id = $1::text)
        ORDER BY r.created_at ASC, r.id ASC
        """,
        user_id,
    )


async def _transition(conn: asyncpg.Connection, request_id: str, *, to_status: str) -> dict | None:
    return await db.fetch_one(
        f"""
        UPDATE adoption_requests
        SET status = $2,
            updated_at = now()
        WHERE id = $1
          AND status = $3
        RETURNING {REQUEST_COLUMNS}
        """,
        request_id,
        to_status,
        STATUS_PENDING,
        conn=conn,
    )


async def approve_request(request_id: str) -> dict | None:
    """
    Move a pending request to `approved` and mark its pet `adopted`.

    Both writes share one transaction. Returns None (and writes nothing) when
    the request does not exist or is no longer pending.
    """
    async with db.transaction() as conn:
        row = await _transition(conn, request_id, to_status=STATUS_APPROVED)
        if row is None:
            return None
        await pets_repository.set_pet_status(
            str(row["pet_id"]),
            pets_repository.STATUS_ADOPTED,
            conn=conn,
        )
        return row


async def reject_request(request_id: str) -> dict | None:
    async with db.transaction() as conn:
        return await _transition(conn, request_id, to_status=STATUS_REJECTED)


async def delete_request(request_id: str) -> bool:
    row = await db.fetch_one(
        """
        DELETE FROM adoption_requests
        WHERE id = $1
        RETURNING id
        """,
        request_id,
    )
    return row is not None

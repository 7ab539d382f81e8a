"""
Pet catalog persistence (raw SQL).
"""

from __future__ import annotations

from typing import Any

import asyncpg

from core import db

PET_COLUMNS = "id, name, species, breed, age, description, image_url, status, created_at, updated_at"

UPDATABLE_COLUMNS = ("name", "species", "breed", "age", "description", "image_url", "status")

STATUS_AVAILABLE = "available"
STATUS_ADOPTED = "adopted"


async def list_pets_by_status(status: str) -> list[dict]:
    return await db.fetch_all(
        f"""
        SELECT {PET_COLUMNS}
        FROM pets
        WHERE status = $1
        ORDER BY created_at ASC, id ASC
        """,
        status,
    )


async def get_pet(pet_id: str, *, conn: asyncpg.Connection | None = None) -> dict | None:
    return await db.fetch_one(
        f"""
        SELECT {PET_COLUMNS}
        FROM pets
        WHERE id = $1
        """,
        pet_id,
        conn=conn,
    )


async def create_pet(fields: dict[str, Any]) -> dict:
    row = await db.fetch_one(
        f"""
        INSERT INTO pets (id, name, species, breed, age, description, image_url, status)
        VALUES ($1, $2, $3, $4, $5, $6, $7, $8)
        RETURNING {PET_COLUMNS}
        """,
        db.new_id(),
        fields["name"],
        fields["species"],
        fields.get("breed"),
        fields.get("age"),
        fields.get("description"),
        fields.get("image_url"),
        fields.get("status") or STATUS_AVAILABLE,
    )
    if row is None:
        raise RuntimeError("Failed to create pet.")
    return row


async def update_pet(pet_id: str, changes: dict[str, Any]) -> dict | None:
    columns = [c for c in UPDATABLE_COLUMNS if c in changes]
    if not columns:
        return await get_pet(pet_id)

    assignments = ", ".join(f"{col} = ${i}" for i, col in enumerate(columns, start=2))
    return await db.fetch_one(
        f"""
        UPDATE pets
        SET {assignments},
            updated_at = now()
        WHERE id = $1
        RETURNING {PET_COLUMNS}
        """,
        pet_id,
        *[changes[c] for c in columns],
    )


async def set_pet_status(pet_id: str, status: str, *, conn: asyncpg.Connection | None = None) -> bool:
    row = await db.fetch_one(
        """
        UPDATE pets
        SET status = $2,
            updated_at = now()
        WHERE id = $1
        RETURNING id
        """,
        pet_id,
        status,
        conn=conn,
    )
    return row is not None


async def delete_pet(pet_id: str) -> bool:
    row = await db.fetch_one(
        """
        DELETE FROM pets
        WHERE id = $1
        RETURNING id
        """,
        pet_id,
    )
    return row is not None


async def insert_pets(rows: list[dict[str, Any]]) -> int:
    if not rows:
        return 0
    await db.executemany(
        """
        INSERT INTO pets (id, name, species, breed, age, description, image_url, status)
        VALUES ($1, $2, $3, $4, $5, $6, $7, $8)
        """,
        [
            (
                db.new_id(),
                r["name"],
                r["species"],
                r.get("breed"),
                r.get("age"),
                r.get("description"),
                r.get("image_url"),
                r.get("status") or STATUS_AVAILABLE,
            )
            for r in rows
        ],
    )
    return len(rows)

"""
User profile persistence (raw SQL).

Queries here never select `password_hash`.
"""

from __future__ import annotations

from typing import Any

import asyncpg

from auth.permissions import ROLE_USER
from auth.repository import DuplicateEmailError, normalize_email
from core import db

PROFILE_COLUMNS = "id, first_name, last_name, email, role, age, created_at, updated_at"

UPDATABLE_COLUMNS = ("first_name", "last_name", "email", "age")


async def get_profile(user_id: str) -> dict | None:
    return await db.fetch_one(
        f"""
        SELECT {PROFILE_COLUMNS}
        FROM users
        WHERE id = $1
        """,
        user_id,
    )


async def list_profiles() -> list[dict]:
    return await db.fetch_all(
        f"""
        SELECT {PROFILE_COLUMNS}
        FROM users
        ORDER BY created_at ASC, id ASC
        """
    )


async def email_in_use(email: str, *, exclude_user_id: str) -> bool:
    row = await db.fetch_one(
        """
        SELECT 1 AS taken
        FROM users
        WHERE lower(email) = lower($1)
          AND id <> $2
        LIMIT 1
        """,
        normalize_email(email),
        exclude_user_id,
    )
    return row is not None


async def update_profile(user_id: str, changes: dict[str, Any]) -> dict | None:
    columns = [c for c in UPDATABLE_COLUMNS if c in changes]
    if not columns:
        return await get_profile(user_id)

    values = [normalize_email(changes[c]) if c == "email" else changes[c] for c in columns]
    assignments = ", ".join(f"{col} = ${i}" for i, col in enumerate(columns, start=2))
    try:
        return await db.fetch_one(
            f"""
            UPDATE users
            SET {assignments},
                updated_at = now()
            WHERE id = $1
            RETURNING {PROFILE_COLUMNS}
            """,
            user_id,
            *values,
        )
    except asyncpg.UniqueViolationError as exc:
        raise DuplicateEmailError(changes.get("email")) from exc


async def delete_user(user_id: str) -> bool:
    row = await db.fetch_one(
        """
        DELETE FROM users
        WHERE id = $1
        RETURNING id
        """,
        user_id,
    )
    return row is not None


async def insert_users(rows: list[dict[str, Any]]) -> int:
    """
    Bulk-insert users in one transaction and return how many were created.

    Rows whose email is already taken are skipped rather than failing the batch.
    """
    inserted = 0
    if not rows:
        return inserted
    async with db.transaction() as conn:
        for r in rows:
            row = await db.fetch_one(
                """
                INSERT INTO users (id, first_name, last_name, email, password_hash, role, age)
                VALUES ($1, $2, $3, $4, $5, $6, $7)
                ON CONFLICT DO NOTHING
                RETURNING id
                """,
                db.new_id(),
                r["first_name"],
                r["last_name"],
                normalize_email(r["email"]),
                r["password_hash"],
                r.get("role") or ROLE_USER,
                r.get("age"),
                conn=conn,
            )
            if row is not None:
                inserted += 1
    return inserted

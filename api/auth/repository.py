"""
Auth persistence helpers (user credentials and roles).
"""

from __future__ import annotations

import asyncpg

from core import db

from .permissions import ROLE_USER


class DuplicateEmailError(RuntimeError):
    pass


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


async def create_user(
    *,
    first_name: str,
    last_name: str,
    email: str,
    password_hash: str,
    role: str = ROLE_USER,
    age: int | None = None,
) -> dict:
    try:
        row = await db.fetch_one(
            """
            INSERT INTO users (id, first_name, last_name, email, password_hash, role, age)
            VALUES ($1, $2, $3, $4, $5, $6, $7)
            RETURNING id, first_name, last_name, email, role, age, created_at, updated_at
            """,
            db.new_id(),
            first_name,
            last_name,
            normalize_email(email),
            password_hash,
            role,
            age,
        )
    except asyncpg.UniqueViolationError as exc:
        raise DuplicateEmailError(email) from exc
    if row is None:
        raise RuntimeError("Failed to create user.")
    return row


async def get_user_by_email(email: str) -> dict | None:
    return await db.fetch_one(
        """
        SELECT id, first_name, last_name, email, password_hash, role, age, created_at, updated_at
        FROM users
        WHERE lower(email) = lower($1)
        """,
        normalize_email(email),
    )


async def get_user_role(user_id: str) -> str | None:
    row = await db.fetch_one(
        """
        SELECT role
        FROM users
        WHERE id = $1
        """,
        user_id,
    )
    if row is None:
        return None
    return str(row["role"])

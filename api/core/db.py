"""
Async database access helpers (raw SQL) using asyncpg.

This module owns the connection pool. The app initializes it on startup and
closes it on shutdown (see `api/main.py`).

SQL parameter style:
- asyncpg uses positional placeholders: $1, $2, $3, ...

Every helper takes an optional `conn`. Pass the connection yielded by
`transaction()` to run several statements atomically; without it the
statement runs on a pooled connection of its own.
"""

from __future__ import annotations

import secrets
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import asyncpg

from . import schema

_pool: asyncpg.Pool | None = None

ID_BYTES = 12
ID_LENGTH = ID_BYTES * 2


def new_id() -> str:
    """
    Return a fresh 24-char lowercase hex identifier.
    """
    return secrets.token_hex(ID_BYTES)


def is_valid_id(value: str | None) -> bool:
    raw = value or ""
    if len(raw) != ID_LENGTH:
        return False
    try:
        int(raw, 16)
    except ValueError:
        return False
    return True


def _sanitize_database_url(url: str) -> str:
    parts = urlsplit(url)
    if not parts.query:
        return url

    params = [(k, v) for (k, v) in parse_qsl(parts.query, keep_blank_values=True) if k != "sslmode"]
    query = urlencode(params)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


async def init_pool(database_url: str) -> None:
    global _pool
    if _pool is not None:
        return None
    url = (database_url or "").strip()
    if not url:
        raise RuntimeError("DATABASE_URL is not set.")
    _pool = await asyncpg.create_pool(
        dsn=_sanitize_database_url(url),
        min_size=1,
        max_size=5,
        command_timeout=30,
    )


async def close_pool() -> None:
    global _pool
    if _pool is None:
        return None
    await _pool.close()
    _pool = None


def pool() -> asyncpg.Pool:
    if _pool is None:
        raise RuntimeError("DB pool is not initialized. Call init_pool() on startup.")
    return _pool


async def ensure_schema() -> None:
    """
    Create tables and indexes if they do not exist yet.
    """
    async with pool().acquire() as conn:
        await conn.execute(schema.DDL)


@asynccontextmanager
async def transaction() -> AsyncIterator[asyncpg.Connection]:
    """
    Yield a connection with an open transaction.

    The transaction commits when the block exits normally and rolls back when
    it raises.
    """
    async with pool().acquire() as conn:
        async with conn.transaction():
            yield conn


def _record_to_dict(record: asyncpg.Record) -> dict[str, Any]:
    return dict(record)


async def fetch_one(sql: str, *args: Any, conn: asyncpg.Connection | None = None) -> dict[str, Any] | None:
    """
    Run a query and return a single row as a dict (or None).
    """
    row = await (conn or pool()).fetchrow(sql, *args)
    return _record_to_dict(row) if row is not None else None


async def fetch_all(sql: str, *args: Any, conn: asyncpg.Connection | None = None) -> list[dict[str, Any]]:
    """
    Run a query and return all rows as a list of dicts.
    """
    rows = await (conn or pool()).fetch(sql, *args)
    return [_record_to_dict(r) for r in rows]


async def executemany(sql: str, args: list[tuple], conn: asyncpg.Connection | None = None) -> None:
    await (conn or pool()).executemany(sql, args)

"""SQL-layer tests: repositories run against a recording stand-in for the asyncpg pool."""

import asyncio
from contextlib import asynccontextmanager

import asyncpg
import pytest

from adoptions import repository as adoptions_repository
from core import db
from users import repository as users_repository


def _squash(sql):
    return " ".join(sql.split())


class RecordingConnection:
    """
    Answers `fetchrow` from a queue of canned rows (an exception in the queue
    is raised instead) and records every statement it receives.
    """

    def __init__(self, rows=()):
        self.rows = list(rows)
        self.statements = []
        self.events = []

    async def fetchrow(self, sql, *args):
        self.statements.append((_squash(sql), args))
        result = self.rows.pop(0) if self.rows else None
        if isinstance(result, Exception):
            raise result
        return result

    @asynccontextmanager
    async def transaction(self):
        self.events.append("begin")
        try:
            yield
        except BaseException:
            self.events.append("rollback")
            raise
        self.events.append("commit")


class RecordingPool(RecordingConnection):
    def __init__(self, rows=(), conn=None):
        super().__init__(rows)
        self.conn = conn or RecordingConnection()

    @asynccontextmanager
    async def acquire(self):
        yield self.conn


@pytest.fixture
def pool(monkeypatch):
    p = RecordingPool()
    monkeypatch.setattr(db, "_pool", p)
    return p


def _request_row(request_id, pet_id, status):
    return {"id": request_id, "user_id": db.new_id(), "pet_id": pet_id, "status": status}


def test_approve_updates_request_and_pet_in_one_transaction(pool):
    request_id, pet_id = db.new_id(), db.new_id()
    pool.conn.rows = [_request_row(request_id, pet_id, "approved"), {"id": pet_id}]

    row = asyncio.run(adoptions_repository.approve_request(request_id))

    assert row["status"] == "approved"
    assert pool.statements == []
    assert pool.conn.events == ["begin", "commit"]
    (request_sql, request_args), (pet_sql, pet_args) = pool.conn.statements
    assert request_sql.startswith("UPDATE adoption_requests")
    assert "AND status = $3" in request_sql
    assert request_args == (request_id, "approved", "pending")
    assert pet_sql.startswith("UPDATE pets")
    assert pet_args == (pet_id, "adopted")


def test_approve_of_non_pending_request_leaves_pet_alone(pool):
    request_id = db.new_id()

    row = asyncio.run(adoptions_repository.approve_request(request_id))

    assert row is None
    assert len(pool.conn.statements) == 1
    assert pool.conn.statements[0][0].startswith("UPDATE adoption_requests")


def test_approve_rolls_back_when_pet_update_fails(pool):
    request_id, pet_id = db.new_id(), db.new_id()
    pool.conn.rows = [_request_row(request_id, pet_id, "approved"), RuntimeError("connection lost")]

    with pytest.raises(RuntimeError):
        asyncio.run(adoptions_repository.approve_request(request_id))

    assert pool.conn.events == ["begin", "rollback"]


def test_reject_is_guarded_on_pending(pool):
    request_id = db.new_id()
    pool.conn.rows = [_request_row(request_id, db.new_id(), "rejected")]

    row = asyncio.run(adoptions_repository.reject_request(request_id))

    assert row["status"] == "rejected"
    assert len(pool.conn.statements) == 1
    assert pool.conn.statements[0][1] == (request_id, "rejected", "pending")


def test_create_inserts_only_when_pet_is_available(pool):
    user_id, pet_id = db.new_id(), db.new_id()
    pool.rows = [_request_row(db.new_id(), pet_id, "pending")]

    row = asyncio.run(adoptions_repository.create_request(user_id=user_id, pet_id=pet_id))

    assert row["status"] == "pending"
    (sql, args), = pool.statements
    assert sql.startswith("INSERT INTO adoption_requests")
    assert "FROM pets p WHERE p.id = $3 AND p.status = $5" in sql
    assert db.is_valid_id(args[0])
    assert args[1:] == (user_id, pet_id, "pending", "available")


def test_create_returns_none_when_no_pet_row_matches(pool):
    row = asyncio.run(adoptions_repository.create_request(user_id=db.new_id(), pet_id=db.new_id()))

    assert row is None


def test_create_maps_missing_requester(pool):
    user_id = db.new_id()
    pool.rows = [asyncpg.ForeignKeyViolationError("user_id not present in users")]

    with pytest.raises(adoptions_repository.MissingRequesterError):
        asyncio.run(adoptions_repository.create_request(user_id=user_id, pet_id=db.new_id()))


def test_insert_users_counts_only_created_rows(pool):
    rows = [
        {"first_name": "Ana", "last_name": "Lopez", "email": "Ana@Example.com", "password_hash": "h"},
        {"first_name": "Ana", "last_name": "Lopez", "email": "ana@example.com", "password_hash": "h"},
        {"first_name": "Bruno", "last_name": "Diaz", "email": "bruno@example.com", "password_hash": "h"},
    ]
    # The second insert hits the email index and returns no row.
    pool.conn.rows = [{"id": db.new_id()}, None, {"id": db.new_id()}]

    inserted = asyncio.run(users_repository.insert_users(rows))

    assert inserted == 2
    assert pool.conn.events == ["begin", "commit"]
    assert all("ON CONFLICT DO NOTHING RETURNING id" in sql for sql, _ in pool.conn.statements)
    assert pool.conn.statements[0][1][3] == "ana@example.com"
    assert pool.conn.statements[0][1][5] == "user"


def test_insert_users_with_no_rows_skips_the_database(pool):
    assert asyncio.run(users_repository.insert_users([])) == 0
    assert pool.conn.events == []

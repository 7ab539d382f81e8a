"""Shared fixtures: an in-memory stand-in for the SQL repositories and a test client."""

import itertools
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from adoptions import repository as adoptions_repository
from auth import repository as auth_repository
from auth import security
from core import db
from core.config import Settings
from main import create_app
from pets import repository as pets_repository
from users import repository as users_repository

TEST_SETTINGS = Settings(
    database_url="",
    jwt_secret="test-secret",
    bcrypt_rounds=4,
    log_level="WARNING",
    cors_origins=("http://testserver",),
)

DEFAULT_PASSWORD = "s3cret-pass"

PROFILE_KEYS = ("id", "first_name", "last_name", "email", "role", "age", "created_at", "updated_at")


class InMemoryStore:
    """
    Mirrors the behaviour of the SQL repositories closely enough for the
    HTTP tests: unique emails, status-guarded transitions, cascading deletes.
    """

    def __init__(self) -> None:
        self.users: dict[str, dict] = {}
        self.pets: dict[str, dict] = {}
        self.requests: dict[str, dict] = {}
        self._ticks = itertools.count()

    def _now(self) -> datetime:
        # Strictly increasing so "ORDER BY created_at" is deterministic.
        return datetime(2024, 1, 1, tzinfo=timezone.utc) + timedelta(seconds=next(self._ticks))

    def _profile(self, row: dict) -> dict:
        return {k: row.get(k) for k in PROFILE_KEYS}

    # users -----------------------------------------------------------------

    async def create_user(self, *, first_name, last_name, email, password_hash, role="user", age=None):
        email = auth_repository.normalize_email(email)
        if any(u["email"] == email for u in self.users.values()):
            raise auth_repository.DuplicateEmailError(email)
        now = self._now()
        row = {
            "id": db.new_id(),
            "first_name": first_name,
            "last_name": last_name,
            "email": email,
            "password_hash": password_hash,
            "role": role,
            "age": age,
            "created_at": now,
            "updated_at": now,
        }
        self.users[row["id"]] = row
        return self._profile(row)

    async def get_user_by_email(self, email):
        email = auth_repository.normalize_email(email)
        for row in self.users.values():
            if row["email"] == email:
                return dict(row)
        return None

    async def get_user_role(self, user_id):
        row = self.users.get(user_id)
        return None if row is None else row["role"]

    async def get_profile(self, user_id):
        row = self.users.get(user_id)
        return None if row is None else self._profile(row)

    async def list_profiles(self):
        return [self._profile(row) for row in self.users.values()]

    async def email_in_use(self, email, *, exclude_user_id):
        email = auth_repository.normalize_email(email)
        return any(u["email"] == email and u["id"] != exclude_user_id for u in self.users.values())

    async def update_profile(self, user_id, changes):
        row = self.users.get(user_id)
        if row is None:
            return None
        for key in users_repository.UPDATABLE_COLUMNS:
            if key in changes:
                value = changes[key]
                row[key] = auth_repository.normalize_email(value) if key == "email" else value
        row["updated_at"] = self._now()
        return self._profile(row)

    async def delete_user(self, user_id):
        if self.users.pop(user_id, None) is None:
            return False
        self.requests = {k: r for k, r in self.requests.items() if r["user_id"] != user_id}
        return True

    async def insert_users(self, rows):
        inserted = 0
        for r in rows:
            try:
                await self.create_user(
                    first_name=r["first_name"],
                    last_name=r["last_name"],
                    email=r["email"],
                    password_hash=r["password_hash"],
                    age=r.get("age"),
                )
            except auth_repository.DuplicateEmailError:
                continue
            inserted += 1
        return inserted

    # pets ------------------------------------------------------------------

    async def list_pets_by_status(self, status):
        return [dict(p) for p in self.pets.values() if p["status"] == status]

    async def get_pet(self, pet_id, *, conn=None):
        row = self.pets.get(pet_id)
        return None if row is None else dict(row)

    async def create_pet(self, fields):
        now = self._now()
        row = {
            "id": db.new_id(),
            "name": fields["name"],
            "species": fields["species"],
            "breed": fields.get("breed"),
            "age": fields.get("age"),
            "description": fields.get("description"),
            "image_url": fields.get("image_url"),
            "status": fields.get("status") or "available",
            "created_at": now,
            "updated_at": now,
        }
        self.pets[row["id"]] = row
        return dict(row)

    async def update_pet(self, pet_id, changes):
        row = self.pets.get(pet_id)
        if row is None:
            return None
        for key in pets_repository.UPDATABLE_COLUMNS:
            if key in changes:
                row[key] = changes[key]
        row["updated_at"] = self._now()
        return dict(row)

    async def set_pet_status(self, pet_id, status, *, conn=None):
        row = self.pets.get(pet_id)
        if row is None:
            return False
        row["status"] = status
        return True

    async def delete_pet(self, pet_id):
        if self.pets.pop(pet_id, None) is None:
            return False
        self.requests = {k: r for k, r in self.requests.items() if r["pet_id"] != pet_id}
        return True

    async def insert_pets(self, rows):
        for r in rows:
            await self.create_pet(r)
        return len(rows)

    # adoption requests -----------------------------------------------------

    async def get_request(self, request_id, *, conn=None):
        row = self.requests.get(request_id)
        return None if row is None else dict(row)

    async def create_request(self, *, user_id, pet_id):
        if user_id not in self.users:
            raise adoptions_repository.MissingRequesterError(user_id)
        pet = self.pets.get(pet_id)
        if pet is None or pet["status"] != "available":
            return None
        now = self._now()
        row = {
            "id": db.new_id(),
            "user_id": user_id,
            "pet_id": pet_id,
            "status": "pending",
            "created_at": now,
            "updated_at": now,
        }
        self.requests[row["id"]] = row
        return dict(row)

    async def list_requests(self, *, user_id=None):
        out = []
        for r in self.requests.values():
            if user_id is not None and r["user_id"] != user_id:
                continue
            row = dict(r)
            pet = self.pets.get(r["pet_id"])
            if pet is not None:
                row["pet_ref_id"] = pet["id"]
                for key in ("name", "species", "breed", "age", "description", "image_url", "status",
                            "created_at", "updated_at"):
                    row[f"pet_{key}"] = pet[key]
            user = self.users.get(r["user_id"])
            if user is not None:
                row["requester_id"] = user["id"]
                for key in ("first_name", "last_name", "email", "age"):
                    row[f"requester_{key}"] = user[key]
            out.append(row)
        return out

    def _transition(self, request_id, to_status):
        row = self.requests.get(request_id)
        if row is None or row["status"] != "pending":
            return None
        row["status"] = to_status
        row["updated_at"] = self._now()
        return row

    async def approve_request(self, request_id):
        row = self._transition(request_id, "approved")
        if row is None:
            return None
        await self.set_pet_status(row["pet_id"], "adopted")
        return dict(row)

    async def reject_request(self, request_id):
        row = self._transition(request_id, "rejected")
        return None if row is None else dict(row)

    async def delete_request(self, request_id):
        return self.requests.pop(request_id, None) is not None

    # wiring ----------------------------------------------------------------

    def install(self, monkeypatch) -> None:
        for name in ("create_user", "get_user_by_email", "get_user_role"):
            monkeypatch.setattr(auth_repository, name, getattr(self, name))
        for name in ("get_profile", "list_profiles", "email_in_use", "update_profile", "delete_user",
                     "insert_users"):
            monkeypatch.setattr(users_repository, name, getattr(self, name))
        for name in ("list_pets_by_status", "get_pet", "create_pet", "update_pet", "set_pet_status",
                     "delete_pet", "insert_pets"):
            monkeypatch.setattr(pets_repository, name, getattr(self, name))
        for name in ("get_request", "create_request", "list_requests", "approve_request",
                     "reject_request", "delete_request"):
            monkeypatch.setattr(adoptions_repository, name, getattr(self, name))

    # direct seeding helpers -------------------------------------------------

    def add_user(self, *, email: str, role: str = "user", password: str = DEFAULT_PASSWORD,
                 first_name: str = "Test", last_name: str = "User", age: int | None = None) -> dict:
        now = self._now()
        row = {
            "id": db.new_id(),
            "first_name": first_name,
            "last_name": last_name,
            "email": email,
            "password_hash": security.hash_password(password, rounds=TEST_SETTINGS.bcrypt_rounds),
            "role": role,
            "age": age,
            "created_at": now,
            "updated_at": now,
        }
        self.users[row["id"]] = row
        return row

    def add_pet(self, *, name: str = "Firulais", species: str = "dog", age: int = 4,
                status: str = "available") -> dict:
        now = self._now()
        row = {
            "id": db.new_id(),
            "name": name,
            "species": species,
            "breed": None,
            "age": age,
            "description": None,
            "image_url": None,
            "status": status,
            "created_at": now,
            "updated_at": now,
        }
        self.pets[row["id"]] = row
        return row


def bearer(user_id: str) -> dict:
    token = security.build_access_token(user_id=user_id, settings=TEST_SETTINGS)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def store(monkeypatch):
    s = InMemoryStore()
    s.install(monkeypatch)
    return s


@pytest.fixture
def app(store):
    return create_app(TEST_SETTINGS)


@pytest.fixture
def client(app):
    # No context manager: the lifespan (DB pool) must not run in tests.
    return TestClient(app)


@pytest.fixture
def user(store):
    return store.add_user(email="ana@example.com", first_name="Ana", last_name="Lopez")


@pytest.fixture
def other_user(store):
    return store.add_user(email="bruno@example.com", first_name="Bruno", last_name="Diaz")


@pytest.fixture
def admin(store):
    return store.add_user(email="admin@example.com", role="admin", first_name="Ada", last_name="Min")


@pytest.fixture
def user_headers(user):
    return bearer(user["id"])


@pytest.fixture
def other_headers(other_user):
    return bearer(other_user["id"])


@pytest.fixture
def admin_headers(admin):
    return bearer(admin["id"])


@pytest.fixture
def pet(store):
    return store.add_pet()

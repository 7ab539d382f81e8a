"""
Mock data generation for local development and demos.
"""

from __future__ import annotations

import logging
import secrets

from faker import Faker
from fastapi.concurrency import run_in_threadpool

from auth import security
from core.config import Settings
from pets import repository as pets_repository
from users import repository as users_repository

logger = logging.getLogger(__name__)

MAX_BATCH = 100

SPECIES_BREEDS: dict[str, tuple[str, ...]] = {
    "dog": ("Labrador", "Beagle", "Poodle", "Border Collie", "Mixed"),
    "cat": ("Siamese", "Persian", "Maine Coon", "Bengal", "Mixed"),
    "rabbit": ("Holland Lop", "Rex", "Mixed"),
}


def _faker() -> Faker:
    return Faker()


def generate_users(count: int, *, password_hash: str, fake: Faker | None = None) -> list[dict]:
    fake = fake or _faker()
    users: list[dict] = []
    for _ in range(count):
        first_name = fake.first_name()
        last_name = fake.last_name()
        # Random suffix keeps batches from colliding on the unique email index.
        local_part = f"{first_name}.{last_name}.{secrets.token_hex(3)}".lower().replace(" ", "")
        users.append(
            {
                "first_name": first_name,
                "last_name": last_name,
                "email": f"{local_part}@{fake.free_email_domain()}",
                "password_hash": password_hash,
                "age": fake.random_int(min=18, max=80),
            }
        )
    return users


def generate_pets(count: int, *, fake: Faker | None = None) -> list[dict]:
    fake = fake or _faker()
    pets: list[dict] = []
    for _ in range(count):
        species = fake.random_element(elements=tuple(SPECIES_BREEDS))
        pets.append(
            {
                "name": fake.first_name(),
                "species": species,
                "breed": fake.random_element(elements=SPECIES_BREEDS[species]),
                "age": fake.random_int(min=0, max=15),
                "description": fake.sentence(nb_words=10),
                "image_url": fake.image_url(),
                "status": "available",
            }
        )
    return pets


async def seed(*, user_count: int, pet_count: int, settings: Settings) -> dict:
    # Mock accounts get one random, undisclosed password; they are not meant to log in.
    password_hash = await run_in_threadpool(
        security.hash_password,
        secrets.token_urlsafe(16),
        rounds=settings.bcrypt_rounds,
    )
    users = generate_users(user_count, password_hash=password_hash)
    pets = generate_pets(pet_count)

    inserted_users = await users_repository.insert_users(users)
    inserted_pets = await pets_repository.insert_pets(pets)
    logger.info("mock_data_seeded users=%s pets=%s", inserted_users, inserted_pets)
    return {
        "message": "Mock data generated.",
        "users": inserted_users,
        "pets": inserted_pets,
    }

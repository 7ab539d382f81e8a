"""
Auth business logic: signup and login.
"""

from __future__ import annotations

import logging

from fastapi.concurrency import run_in_threadpool

from core.config import Settings
from core.errors import unauthorized, validation_error

from . import repository, schemas, security

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password."
EMAIL_TAKEN = "Email is already registered."


async def signup(payload: schemas.SignupRequest, *, settings: Settings) -> schemas.SignupResponse:
    existing = await repository.get_user_by_email(payload.email)
    if existing is not None:
        logger.info("signup_rejected reason=email_taken")
        raise validation_error(EMAIL_TAKEN)

    # bcrypt is CPU-bound; keep it off the event loop.
    password_hash = await run_in_threadpool(
        security.hash_password,
        payload.password,
        rounds=settings.bcrypt_rounds,
    )
    try:
        user_row = await repository.create_user(
            first_name=payload.first_name,
            last_name=payload.last_name,
            email=payload.email,
            password_hash=password_hash,
        )
    except repository.DuplicateEmailError as exc:
        # Lost a race with a concurrent signup for the same address.
        raise validation_error(EMAIL_TAKEN) from exc

    logger.info("user_created user_id=%s", user_row["id"])
    return schemas.SignupResponse(id=str(user_row["id"]), email=str(user_row["email"]))


async def login(payload: schemas.LoginRequest, *, settings: Settings) -> schemas.TokenResponse:
    user_row = await repository.get_user_by_email(payload.email)
    if user_row is None:
        logger.info("login_failed reason=unknown_email")
        raise unauthorized(INVALID_CREDENTIALS)

    is_valid = await run_in_threadpool(
        security.verify_password,
        payload.password,
        str(user_row.get("password_hash") or ""),
    )
    if not is_valid:
        logger.info("login_failed reason=bad_password user_id=%s", user_row["id"])
        raise unauthorized(INVALID_CREDENTIALS)

    token = security.build_access_token(user_id=str(user_row["id"]), settings=settings)
    return schemas.TokenResponse(token=token)

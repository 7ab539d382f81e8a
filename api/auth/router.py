"""
Auth API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from core.config import Settings

from . import schemas, service
from .dependencies import get_settings

router = APIRouter(prefix="/auth")


@router.post(
    "/signup",
    status_code=status.HTTP_201_CREATED,
    response_model=schemas.SignupResponse,
)
async def signup(
    request: schemas.SignupRequest,
    settings: Settings = Depends(get_settings),
) -> schemas.SignupResponse:
    return await service.signup(request, settings=settings)


@router.post("/login", response_model=schemas.TokenResponse)
async def login(
    request: schemas.LoginRequest,
    settings: Settings = Depends(get_settings),
) -> schemas.TokenResponse:
    return await service.login(request, settings=settings)

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from adoptions import router as adoptions_router
from auth import router as auth_router
from core import db
from core.config import Settings, load_settings
from core.errors import (
    INTERNAL_ERROR_MESSAGE,
    AppError,
    ErrorKind,
    error_response,
    first_validation_message,
    kind_for_status,
)
from core.log import configure_logging
from mocks import router as mocks_router
from pets import router as pets_router
from users import router as users_router

logger = logging.getLogger("api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Initialize the DB pool once per process.
    await db.init_pool(app.state.settings.database_url)
    try:
        await db.ensure_schema()
        yield
    finally:
        await db.close_pool()


async def handle_app_error(_: Request, exc: AppError):
    return error_response(exc.kind, exc.message)


async def handle_validation_error(_: Request, exc: RequestValidationError):
    message = first_validation_message(list(exc.errors()))
    logger.info("request_validation_failed error=%s", message)
    return error_response(ErrorKind.VALIDATION, message)


async def handle_http_exception(_: Request, exc: StarletteHTTPException):
    return error_response(
        kind_for_status(exc.status_code),
        str(exc.detail),
        status_code=exc.status_code,
    )


async def handle_unexpected_error(request: Request, exc: Exception):
    logger.exception("unhandled_error method=%s path=%s", request.method, request.url.path)
    return error_response(ErrorKind.INTERNAL, INTERNAL_ERROR_MESSAGE)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or load_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Pet Adoption API",
        description="User accounts, pet listings and adoption requests.",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            logger.info(
                "http_request method=%s path=%s status=%s duration_ms=%.1f",
                request.method,
                request.url.path,
                status_code,
                (time.perf_counter() - started) * 1000,
            )

    app.add_exception_handler(AppError, handle_app_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(Exception, handle_unexpected_error)

    app.include_router(auth_router.router, tags=["auth"])
    app.include_router(users_router.router, tags=["users"])
    app.include_router(pets_router.router, tags=["pets"])
    app.include_router(adoptions_router.router, tags=["adoptions"])
    app.include_router(mocks_router.router, tags=["mocks"])

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok"}

    @app.get("/")
    def root() -> dict:
        return {"message": "pet adoption api"}

    return app


app = create_app()

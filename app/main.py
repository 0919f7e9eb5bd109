from __future__ import annotations

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.deps import get_email_notifier
from app.api.errors import error_body
from app.api.routers.auth import router as auth_router
from app.api.routers.health import router as health_router
from app.api.routers.users import router as users_router
from app.infrastructure.db.engine import get_engine
from app.infrastructure.db.models.accounts import create_accounts_schema
from app.shared.config import get_settings, validate_auth_settings


logger = logging.getLogger(__name__)

STATUS_CODES = {
    400: "VALIDATION_ERROR",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
}


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


@asynccontextmanager
async def lifespan(_app: FastAPI):
    settings = get_settings()
    validate_auth_settings(settings)
    if settings.db_create_schema and settings.postgres_dsn:
        create_accounts_schema(get_engine(settings.postgres_dsn))
        logger.info("main: accounts_schema_ensured")
    logger.info("main: startup app_name=%s", settings.app_name)
    yield
    if get_email_notifier.cache_info().currsize:
        get_email_notifier().shutdown(wait=False)
    logger.info("main: shutdown")


async def http_exception_handler(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
    detail = exc.detail
    if isinstance(detail, dict) and "code" in detail:
        body = error_body(
            code=detail["code"],
            message=detail.get("message", ""),
            details=detail.get("details"),
        )
    else:
        body = error_body(
            code=STATUS_CODES.get(exc.status_code, "INTERNAL_ERROR"),
            message=str(detail),
        )
    return JSONResponse(status_code=exc.status_code, content=body, headers=getattr(exc, "headers", None))


async def validation_exception_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [
        {"field": ".".join(str(part) for part in err.get("loc", ())[1:]), "message": err.get("msg", "")}
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content=error_body(code="VALIDATION_ERROR", message="Invalid request body.", details=details),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("main: unhandled_error path=%s", request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=500,
        content=error_body(code="INTERNAL_ERROR", message="Internal server error."),
    )


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level)

    application = FastAPI(title="Mobile Starter API", lifespan=lifespan)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_allow_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )
    application.add_exception_handler(StarletteHTTPException, http_exception_handler)
    application.add_exception_handler(RequestValidationError, validation_exception_handler)
    application.add_exception_handler(Exception, unhandled_exception_handler)

    application.include_router(health_router)
    application.include_router(auth_router)
    application.include_router(users_router)
    return application


app = create_app()

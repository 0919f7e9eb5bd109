from __future__ import annotations

from fastapi import HTTPException

from app.domain.exceptions import DomainError, WeakPasswordError


def error_body(*, code: str, message: str, details: list | dict | None = None) -> dict:
    error: dict = {"code": code, "message": message}
    if details is not None:
        error["details"] = details
    return {"success": False, "error": error}


def http_error(status_code: int, exc: DomainError) -> HTTPException:
    details = exc.details if isinstance(exc, WeakPasswordError) else None
    return HTTPException(
        status_code=status_code,
        detail={"code": exc.code, "message": str(exc), "details": details},
    )


def http_error_code(status_code: int, *, code: str, message: str) -> HTTPException:
    return HTTPException(status_code=status_code, detail={"code": code, "message": message})

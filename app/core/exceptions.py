# app/core/exceptions.py
# 統一的錯誤型別，以及把錯誤轉成 {success: false, error: {...}} 的 exception handler
import logging
from typing import Any, Optional

from fastapi import FastAPI, HTTPException, Request, status
from starlette.exceptions import HTTPException as StarletteHTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

logger = logging.getLogger(__name__)


class AppError(HTTPException):
    """
    Service 層拋出的錯誤基底。
    沿用 HTTPException (status_code + detail)，額外帶一個機器可讀的 code。
    """
    status_code_default = status.HTTP_500_INTERNAL_SERVER_ERROR
    code_default = "INTERNAL_ERROR"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Any = None,
        status_code: Optional[int] = None,
        headers: Optional[dict] = None,
    ):
        super().__init__(
            status_code=status_code or self.status_code_default,
            detail=message,
            headers=headers,
        )
        self.code = code or self.code_default
        self.message = message
        self.details = details


class BadRequestError(AppError):
    status_code_default = status.HTTP_400_BAD_REQUEST
    code_default = "BAD_REQUEST"


class AuthError(AppError):
    status_code_default = status.HTTP_401_UNAUTHORIZED
    code_default = "UNAUTHORIZED"

    def __init__(self, message: str = "無法驗證憑證", code: Optional[str] = None, details: Any = None):
        super().__init__(
            message, code=code, details=details,
            headers={"WWW-Authenticate": "Bearer"},
        )


class ForbiddenError(AppError):
    status_code_default = status.HTTP_403_FORBIDDEN
    code_default = "FORBIDDEN"


class NotFoundError(AppError):
    status_code_default = status.HTTP_404_NOT_FOUND
    code_default = "NOT_FOUND"


class ConflictError(AppError):
    status_code_default = status.HTTP_409_CONFLICT
    code_default = "CONFLICT"


class ValidationError(AppError):
    status_code_default = 422
    code_default = "VALIDATION_ERROR"


def invalid_transition(current_status: str, new_status: str) -> BadRequestError:
    """狀態機共用：不合法的狀態轉移"""
    return BadRequestError(
        f"不合法的狀態轉移: {current_status} -> {new_status}",
        code="INVALID_STATUS_TRANSITION",
    )


# --- HTTP status -> 預設 code ---
_STATUS_CODES = {
    400: "BAD_REQUEST",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
    422: "VALIDATION_ERROR",
}


def error_body(code: str, message: str, details: Any = None) -> dict:
    error = {"code": code, "message": message}
    if details is not None:
        error["details"] = details
    return {"success": False, "error": error}


def _field_path(loc) -> str:
    # loc 例如 ("body", "mission_id") 或 ("query", "page")
    parts = [str(p) for p in loc if p not in ("body", "query", "path")]
    return ".".join(parts)


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.code, exc.message, exc.details),
        headers=exc.headers,
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    code = _STATUS_CODES.get(exc.status_code, "INTERNAL_ERROR")
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(code, str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [
        {"field": _field_path(err.get("loc", ())), "message": err.get("msg", "")}
        for err in exc.errors()
    ]
    message = details[0]["message"] if details else "資料驗證失敗"
    return JSONResponse(
        status_code=422,
        content=error_body("VALIDATION_ERROR", message, details),
    )


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    # 資料庫約束錯誤原樣回傳，不另外分類
    logger.warning(f"資料庫約束錯誤: {exc.orig}")
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content=error_body("CONFLICT", str(exc.orig)),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)

"""API 경계 에러 핸들러.

모든 에러 응답은 {"success": false, "error": {"code", "message"}} 형식입니다.
"""
import logging
from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.errors import AppError, ErrorKind

logger = logging.getLogger(__name__)

_HTTP_STATUS_KINDS = {
    400: ErrorKind.VALIDATION,
    404: ErrorKind.NOT_FOUND,
    409: ErrorKind.CONFLICT,
}


def _http_error_code(status_code: int) -> str:
    """HTTP 상태 -> 에러 코드. 매핑이 없으면 상태명 (예: 405 -> METHOD_NOT_ALLOWED)."""
    kind = _HTTP_STATUS_KINDS.get(status_code)
    if kind is not None:
        return kind.value
    if status_code >= 500:
        return ErrorKind.INTERNAL.value
    try:
        return HTTPStatus(status_code).name
    except ValueError:
        return "HTTP_ERROR"


def _error_response(status_code: int, error: dict) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": error})


def register_exception_handlers(app: FastAPI, is_production: bool = False) -> None:
    """앱에 에러 핸들러 등록."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        error = exc.to_dict()
        if exc.status_code >= 500:
            logger.error(
                f"{request.method} {request.url.path} 실패 [{exc.kind.value}]: {exc.message}",
                exc_info=exc.__cause__ or exc,
            )
            if is_production:
                error = {"code": ErrorKind.INTERNAL.value, "message": "Internal Server Error"}
        else:
            logger.warning(f"{request.method} {request.url.path} [{exc.kind.value}]: {exc.message}")
        return _error_response(exc.status_code, error)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        details = [
            {"field": ".".join(str(p) for p in err.get("loc", ()) if p != "body"), "message": err.get("msg")}
            for err in exc.errors()
        ]
        logger.warning(f"{request.method} {request.url.path} 요청 검증 실패: {details}")
        error = AppError.validation("Validation failed", jsonable_encoder(details))
        return _error_response(400, error.to_dict())

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404 and exc.detail == "Not Found":
            message = f"Route {request.url.path} not found"
        else:
            message = str(exc.detail)
        return _error_response(exc.status_code, {"code": _http_error_code(exc.status_code), "message": message})

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        message = "Internal Server Error" if is_production else str(exc) or "An unexpected error occurred"
        return _error_response(500, {"code": ErrorKind.INTERNAL.value, "message": message})

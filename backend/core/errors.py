"""애플리케이션 에러 분류.

에러는 하나의 예외 타입(AppError)과 종류(ErrorKind)로 표현하고,
API 경계에서 kind를 기준으로 HTTP 응답으로 변환합니다.
"""
from enum import Enum
from typing import Any, Optional

from sqlalchemy.exc import DataError, IntegrityError, NoResultFound, SQLAlchemyError


class ErrorKind(str, Enum):
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    VALIDATION = "VALIDATION_ERROR"
    STORAGE = "DATABASE_ERROR"
    INTERNAL = "INTERNAL_ERROR"

    @property
    def status_code(self) -> int:
        return _STATUS_CODES[self]


_STATUS_CODES = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONFLICT: 409,
    ErrorKind.VALIDATION: 400,
    ErrorKind.STORAGE: 500,
    ErrorKind.INTERNAL: 500,
}


class AppError(Exception):
    def __init__(self, kind: ErrorKind, message: str, details: Optional[list[Any]] = None):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.details = details

    @property
    def status_code(self) -> int:
        return self.kind.status_code

    @classmethod
    def not_found(cls, resource: str = "Resource", resource_id: Optional[str] = None) -> "AppError":
        if resource_id:
            return cls(ErrorKind.NOT_FOUND, f"{resource} with ID '{resource_id}' not found")
        return cls(ErrorKind.NOT_FOUND, f"{resource} not found")

    @classmethod
    def conflict(cls, message: str = "Resource already exists") -> "AppError":
        return cls(ErrorKind.CONFLICT, message)

    @classmethod
    def validation(cls, message: str = "Validation failed", details: Optional[list[Any]] = None) -> "AppError":
        return cls(ErrorKind.VALIDATION, message, details)

    @classmethod
    def storage(cls, message: str = "Database operation failed") -> "AppError":
        return cls(ErrorKind.STORAGE, message)

    def to_dict(self) -> dict:
        error: dict[str, Any] = {"code": self.kind.value, "message": self.message}
        if self.details:
            error["errors"] = self.details
        return error

    def __repr__(self):
        return f"<AppError {self.kind.value}: {self.message}>"


# PostgreSQL SQLSTATE
_UNIQUE_VIOLATION = "23505"
_NOT_NULL_VIOLATION = "23502"
_FOREIGN_KEY_VIOLATION = "23503"
_CHECK_VIOLATION = "23514"


def _sqlstate(exc: SQLAlchemyError) -> Optional[str]:
    orig = getattr(exc, "orig", None)
    return getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)


def classify_db_error(exc: Exception) -> AppError:
    """SQLAlchemy 예외를 AppError로 변환."""
    if isinstance(exc, AppError):
        return exc

    if isinstance(exc, NoResultFound):
        return AppError.not_found("Record")

    if isinstance(exc, IntegrityError):
        state = _sqlstate(exc)
        text = str(exc.orig).lower()
        if state == _UNIQUE_VIOLATION or "unique" in text:
            return AppError.conflict("A record with this project and unit number already exists")
        if state == _NOT_NULL_VIOLATION or "not null" in text:
            return AppError.validation("Required field cannot be null")
        if state == _FOREIGN_KEY_VIOLATION or "foreign key" in text:
            return AppError.validation("Invalid reference to related record")
        if state == _CHECK_VIOLATION or "check constraint" in text:
            return AppError.validation("Value violates a constraint")
        return AppError.storage()

    if isinstance(exc, DataError):
        return AppError.validation("Invalid value for column")

    if isinstance(exc, SQLAlchemyError):
        return AppError.storage()

    return AppError(ErrorKind.STORAGE, "An unexpected database error occurred")

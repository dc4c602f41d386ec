"""Typed procedure errors surfaced to clients as {detail, code}."""

from enum import Enum

from fastapi import HTTPException


class ErrorCode(str, Enum):
    UNAUTHORIZED = "UNAUTHORIZED"
    BAD_REQUEST = "BAD_REQUEST"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"

    @property
    def status_code(self) -> int:
        return _STATUS_CODES[self]


_STATUS_CODES = {
    ErrorCode.UNAUTHORIZED: 401,
    ErrorCode.BAD_REQUEST: 400,
    ErrorCode.FORBIDDEN: 403,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.CONFLICT: 409,
}


class ProcedureError(HTTPException):
    """HTTPException carrying an error kind alongside the message."""

    def __init__(self, code: ErrorCode, message: str):
        super().__init__(status_code=code.status_code, detail=message)
        self.code = code


def bad_request(message: str) -> ProcedureError:
    return ProcedureError(ErrorCode.BAD_REQUEST, message)


def not_found(message: str) -> ProcedureError:
    return ProcedureError(ErrorCode.NOT_FOUND, message)


def forbidden(message: str = "Forbidden") -> ProcedureError:
    return ProcedureError(ErrorCode.FORBIDDEN, message)


def unauthorized(message: str = "Not authenticated") -> ProcedureError:
    return ProcedureError(ErrorCode.UNAUTHORIZED, message)


def conflict(message: str) -> ProcedureError:
    return ProcedureError(ErrorCode.CONFLICT, message)


def code_for_status(status_code: int) -> ErrorCode:
    """Map a bare HTTP status back to an error kind (for plain HTTPExceptions)."""
    for code, status in _STATUS_CODES.items():
        if status == status_code:
            return code
    return ErrorCode.BAD_REQUEST

"""Error codes and the coded exception used throughout the package."""

from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    """Machine-readable error codes reported in the JSON output."""

    INVALID_ARGUMENT = "INVALID_ARGUMENT"
    INTERNAL = "INTERNAL_ERROR"
    AUTH_REQUIRED = "AUTH_REQUIRED"
    AUTH_INVALID = "AUTH_INVALID"
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"
    BACKEND_UNAVAILABLE = "BACKEND_UNAVAILABLE"
    INVALID_IMAGE = "INVALID_IMAGE"
    UNSUPPORTED_IMAGE_FORMAT = "UNSUPPORTED_IMAGE_FORMAT"
    IMAGE_TOO_LARGE = "IMAGE_TOO_LARGE"
    FILE_NOT_FOUND = "FILE_NOT_FOUND"
    FILE_READ_FAILED = "FILE_READ_FAILED"
    FILE_WRITE_FAILED = "FILE_WRITE_FAILED"
    FILE_ALREADY_EXISTS = "FILE_ALREADY_EXISTS"
    OUTPUT_DIR_CREATE_FAILED = "OUTPUT_DIR_CREATE_FAILED"
    INVALID_OUTPUT_PATH = "INVALID_OUTPUT_PATH"
    REFERENCE_URL_FORBIDDEN = "REFERENCE_URL_FORBIDDEN"
    REFERENCE_FETCH_FAILED = "REFERENCE_FETCH_FAILED"
    REFERENCE_TIMEOUT = "REFERENCE_TIMEOUT"
    REFERENCE_REDIRECT_LIMIT_EXCEEDED = "REFERENCE_REDIRECT_LIMIT_EXCEEDED"


class CodedError(Exception):
    """An exception carrying an :class:`ErrorCode`."""

    def __init__(self, code: ErrorCode, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message

    @classmethod
    def wrap(cls, code: ErrorCode, err: BaseException) -> "CodedError":
        """Build a coded error whose message and cause come from ``err``."""
        wrapped = cls(code, str(err))
        wrapped.__cause__ = err
        return wrapped

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


def code_of(err: BaseException | None) -> ErrorCode | None:
    """Return the code of the first CodedError in the exception chain, if any."""
    seen: set[int] = set()
    current = err
    while current is not None and id(current) not in seen:
        if isinstance(current, CodedError):
            return current.code
        seen.add(id(current))
        current = current.__cause__ or current.__context__
    return None
"""The fixed JSON output schema written to stdout."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, TextIO

_JSON_ESCAPES = str.maketrans(
    {
        "<": "\\u003c",
        ">": "\\u003e",
        "&": "\\u0026",
        "\u2028": "\\u2028",
        "\u2029": "\\u2029",
    }
)


@dataclass
class ImageItem:
    """Metadata about a single generated image."""

    index: int = 0
    path: str = ""
    filename: str = ""
    width: int = 0
    height: int = 0
    mime_type: str = ""
    sha256: str = ""
    transparent_applied: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "index": self.index,
            "path": self.path,
            "filename": self.filename,
            "width": self.width,
            "height": self.height,
            "mime_type": self.mime_type,
            "sha256": self.sha256,
            "transparent_applied": self.transparent_applied,
        }


@dataclass
class OutputError:
    """Error information; both fields are None on success."""

    code: str | None = None
    message: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message}


@dataclass
class RateLimit:
    """API rate limit information; unknown fields are None."""

    provider: str | None = None
    limit_type: str | None = None
    requests_limit: int | None = None
    requests_remaining: int | None = None
    requests_used: int | None = None
    reset_at: str | None = None
    retry_after_seconds: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "provider": self.provider,
            "limit_type": self.limit_type,
            "requests_limit": self.requests_limit,
            "requests_remaining": self.requests_remaining,
            "requests_used": self.requests_used,
            "reset_at": self.reset_at,
            "retry_after_seconds": self.retry_after_seconds,
        }


@dataclass
class Output:
    """Root of the JSON output, shared by success and failure."""

    success: bool = False
    model: str | None = None
    backend: str | None = None
    images: list[ImageItem] | None = field(default_factory=list)
    rate_limit: RateLimit = field(default_factory=RateLimit)
    warnings: list[str] | None = field(default_factory=list)
    error: OutputError = field(default_factory=OutputError)

    def to_dict(self) -> dict[str, Any]:
        """Return the schema dict; missing lists become empty arrays."""
        return {
            "success": self.success,
            "model": self.model,
            "backend": self.backend,
            "images": [item.to_dict() for item in self.images or []],
            "rate_limit": self.rate_limit.to_dict(),
            "warnings": list(self.warnings or []),
            "error": self.error.to_dict(),
        }


def new_empty_rate_limit() -> RateLimit:
    """Return a RateLimit with every field None."""
    return RateLimit()


def new_success_output() -> Output:
    """Return an Output prepared for a successful result."""
    return Output(success=True)


def new_error_output(code: str, message: str) -> Output:
    """Return an Output prepared for a failure with the given code and message."""
    return Output(success=False, error=OutputError(code=code, message=message))


def encode(stream: TextIO, out: Output, pretty: bool = False) -> None:
    """Write ``out`` as JSON followed by a newline, in a single write.

    With ``pretty`` the output is indented by two spaces; otherwise it is compact.
    """
    if pretty:
        text = json.dumps(out.to_dict(), indent=2, ensure_ascii=False)
    else:
        text = json.dumps(out.to_dict(), separators=(",", ":"), ensure_ascii=False)
    stream.write(text.translate(_JSON_ESCAPES) + "\n")
"""Parsing of rate-limit information from HTTP response headers."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timezone

from imgraft.output import RateLimit

_INT_RE = re.compile(r"[+-]?[0-9]+")
_INT_MIN = -(2**63)
_INT_MAX = 2**63 - 1

_HTTP_DATE_FORMATS = (
    "%a, %d %b %Y %H:%M:%S GMT",  # RFC 1123
    "%A, %d-%b-%y %H:%M:%S GMT",  # RFC 850
    "%a %b %d %H:%M:%S %Y",  # ANSI C asctime
)


@dataclass
class RateLimitInfo:
    """Rate-limit details taken from a response; unknown fields are None."""

    provider: str | None = None
    limit_type: str | None = None
    requests_limit: int | None = None
    requests_remaining: int | None = None
    requests_used: int | None = None
    tokens_limit: int | None = None
    tokens_remaining: int | None = None
    reset_at: str | None = None
    retry_after_seconds: int | None = None

    def to_output(self) -> RateLimit:
        """Return the subset that belongs to the JSON output schema."""
        return RateLimit(
            provider=self.provider,
            limit_type=self.limit_type,
            requests_limit=self.requests_limit,
            requests_remaining=self.requests_remaining,
            requests_used=self.requests_used,
            reset_at=self.reset_at,
            retry_after_seconds=self.retry_after_seconds,
        )


def _parse_int(value: str) -> int | None:
    """Parse a strict decimal integer (optional sign, digits only)."""
    if not _INT_RE.fullmatch(value):
        return None
    n = int(value)
    if n < _INT_MIN or n > _INT_MAX:
        return None
    return n


def _parse_retry_after(value: str, now: datetime | None = None) -> int | None:
    """Parse Retry-After as seconds or an HTTP-date; past dates give 0."""
    seconds = _parse_int(value)
    if seconds is not None:
        return seconds
    for fmt in _HTTP_DATE_FORMATS:
        try:
            when = datetime.strptime(value, fmt).replace(tzinfo=timezone.utc)
        except ValueError:
            continue
        current = now if now is not None else datetime.now(timezone.utc)
        return max(0, int((when - current).total_seconds()))
    return None


def parse_headers(headers: Mapping[str, str], provider: str = "") -> RateLimitInfo:
    """Extract rate-limit information from response headers.

    Header names are matched case-insensitively. Absent or unparsable
    values are left as None; an empty ``provider`` also gives None.
    """
    lookup: dict[str, str] = {}
    for key, value in headers.items():
        lookup.setdefault(key.lower(), value)

    def get(name: str) -> str:
        return lookup.get(name.lower(), "")

    def get_int(name: str) -> int | None:
        value = get(name)
        return _parse_int(value) if value else None

    reset_at = get("X-RateLimit-Reset-Requests")
    retry_after = get("Retry-After")

    return RateLimitInfo(
        provider=provider or None,
        requests_limit=get_int("X-RateLimit-Limit-Requests"),
        requests_remaining=get_int("X-RateLimit-Remaining-Requests"),
        tokens_limit=get_int("X-RateLimit-Limit-Tokens"),
        tokens_remaining=get_int("X-RateLimit-Remaining-Tokens"),
        reset_at=reset_at or None,
        retry_after_seconds=_parse_retry_after(retry_after) if retry_after else None,
    )
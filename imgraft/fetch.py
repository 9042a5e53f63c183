"""Loading reference images from URLs and from lists of paths or URLs."""

from __future__ import annotations

import time
from collections.abc import Iterable
from urllib.parse import unquote, urlsplit

import httpx

from imgraft.errors import CodedError, ErrorCode
from imgraft.imaging import inspect_bytes
from imgraft.reference import (
    MAX_FILE_SIZE_BYTES,
    MAX_REFERENCE_COUNT,
    ReferenceImage,
    load_local_file,
    validate_url,
)

MAX_REDIRECTS = 3
TOTAL_TIMEOUT = 20.0

_transport: httpx.BaseTransport | None = None


def set_http_transport(transport: httpx.BaseTransport | None) -> None:
    """Use ``transport`` for remote fetches; None restores the default."""
    global _transport
    _transport = transport


def _filename_from_url(raw_url: str) -> str:
    try:
        path = unquote(urlsplit(raw_url).path)
    except ValueError:
        return "remote"
    stripped = path.rstrip("/")
    if not stripped:
        return "remote"
    base = stripped.rsplit("/", 1)[-1]
    if base in ("", "."):
        return "remote"
    return base


def _check_response(response: httpx.Response) -> None:
    status = response.status_code
    if not 200 <= status < 300:
        raise CodedError(
            ErrorCode.REFERENCE_FETCH_FAILED,
            f"HTTP {status}: {status} {response.reason_phrase}".rstrip(),
        )
    raw_length = response.headers.get("content-length")
    if raw_length is None:
        return
    try:
        length = int(raw_length)
    except ValueError:
        return
    if length > MAX_FILE_SIZE_BYTES:
        raise CodedError(
            ErrorCode.IMAGE_TOO_LARGE,
            f"Content-Length {length} bytes exceeds limit of {MAX_FILE_SIZE_BYTES} bytes (20MB)",
        )


def _read_limited(response: httpx.Response, deadline: float) -> bytes:
    buf = bytearray()
    for chunk in response.iter_bytes():
        buf.extend(chunk)
        if len(buf) > MAX_FILE_SIZE_BYTES:
            raise CodedError(
                ErrorCode.IMAGE_TOO_LARGE,
                f"response body exceeds limit of {MAX_FILE_SIZE_BYTES} bytes (20MB)",
            )
        if time.monotonic() > deadline:
            raise CodedError(ErrorCode.REFERENCE_TIMEOUT, "reference fetch timed out")
    return bytes(buf)


def load_remote_file(raw_url: str, timeout: float = TOTAL_TIMEOUT) -> ReferenceImage:
    """Fetch and inspect an image from an http(s) URL.

    At most three redirects are followed, the whole fetch must finish within
    ``timeout`` seconds and the body may not exceed 20 MB.
    """
    validate_url(raw_url)
    deadline = time.monotonic() + timeout

    client = httpx.Client(
        transport=_transport,
        timeout=httpx.Timeout(timeout),
        follow_redirects=True,
        max_redirects=MAX_REDIRECTS,
    )
    try:
        with client.stream("GET", raw_url) as response:
            _check_response(response)
            data = _read_limited(response, deadline)
    except httpx.TimeoutException as err:
        raise CodedError.wrap(ErrorCode.REFERENCE_TIMEOUT, err) from err
    except httpx.TooManyRedirects as err:
        raise CodedError(
            ErrorCode.REFERENCE_REDIRECT_LIMIT_EXCEEDED,
            f"exceeded maximum redirect limit of {MAX_REDIRECTS}",
        ) from err
    except (httpx.HTTPError, httpx.InvalidURL, httpx.StreamError) as err:
        raise CodedError.wrap(ErrorCode.REFERENCE_FETCH_FAILED, err) from err
    finally:
        if _transport is None:
            client.close()

    meta = inspect_bytes(data)
    return ReferenceImage(
        source_type="url",
        original_input=raw_url,
        local_cached_path="",
        filename=_filename_from_url(raw_url),
        mime_type=meta.mime_type,
        width=meta.width,
        height=meta.height,
        size_bytes=len(data),
        data=data,
    )


def _is_url(path: str) -> bool:
    lower = path.lower()
    return lower.startswith(("http://", "https://"))


def load_references(paths: Iterable[str]) -> list[ReferenceImage]:
    """Load every path or URL in order, failing on the first error.

    More than eight entries are rejected before anything is loaded.
    """
    paths = list(paths)
    if len(paths) > MAX_REFERENCE_COUNT:
        raise CodedError(
            ErrorCode.INVALID_ARGUMENT,
            f"too many reference images: {len(paths)} (max {MAX_REFERENCE_COUNT})",
        )
    return [load_remote_file(p) if _is_url(p) else load_local_file(p) for p in paths]
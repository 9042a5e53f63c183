"""Reference images: the common type, limits, URL checks and local loading."""

from __future__ import annotations

import ipaddress
import os
from collections.abc import Sequence
from dataclasses import dataclass
from urllib.parse import urlsplit

from imgraft.errors import CodedError, ErrorCode
from imgraft.imaging import inspect_bytes

MAX_REFERENCE_COUNT = 8
MAX_FILE_SIZE_BYTES = 20 * 1024 * 1024
MAX_DIMENSION = 4096

_SUPPORTED_MIME_TYPES = frozenset({"image/png", "image/jpeg", "image/webp"})

_PRIVATE_NETWORKS = tuple(
    ipaddress.ip_network(cidr)
    for cidr in (
        "10.0.0.0/8",
        "172.16.0.0/12",
        "192.168.0.0/16",
        "127.0.0.0/8",
        "::1/128",
        "fc00::/7",  # IPv6 unique local
        "fe80::/10",  # IPv6 link-local
    )
)


@dataclass
class ReferenceImage:
    """A reference image loaded from a file or a URL."""

    source_type: str = ""
    original_input: str = ""
    local_cached_path: str = ""
    filename: str = ""
    mime_type: str = ""
    width: int = 0
    height: int = 0
    size_bytes: int = 0
    data: bytes = b""


def validate(refs: Sequence[ReferenceImage]) -> None:
    """Check count, MIME type, size and resolution; raise on the first problem."""
    if len(refs) > MAX_REFERENCE_COUNT:
        raise CodedError(
            ErrorCode.INVALID_ARGUMENT,
            f"too many reference images: {len(refs)} (max {MAX_REFERENCE_COUNT})",
        )
    for i, ref in enumerate(refs):
        if ref.mime_type not in _SUPPORTED_MIME_TYPES:
            raise CodedError(
                ErrorCode.UNSUPPORTED_IMAGE_FORMAT,
                f"reference[{i}]: unsupported MIME type: {ref.mime_type} "
                "(supported: image/png, image/jpeg, image/webp)",
            )
        if ref.size_bytes > MAX_FILE_SIZE_BYTES:
            raise CodedError(
                ErrorCode.IMAGE_TOO_LARGE,
                f"reference[{i}]: file size {ref.size_bytes} bytes exceeds limit of "
                f"{MAX_FILE_SIZE_BYTES} bytes (20MB)",
            )
        if ref.width > MAX_DIMENSION or ref.height > MAX_DIMENSION:
            raise CodedError(
                ErrorCode.IMAGE_TOO_LARGE,
                f"reference[{i}]: resolution {ref.width}x{ref.height} exceeds limit of "
                f"{MAX_DIMENSION}x{MAX_DIMENSION}",
            )


def _is_private_ip(ip: ipaddress.IPv4Address | ipaddress.IPv6Address) -> bool:
    candidates = [ip]
    if isinstance(ip, ipaddress.IPv6Address) and ip.ipv4_mapped is not None:
        candidates.append(ip.ipv4_mapped)
    return any(addr in network for addr in candidates for network in _PRIVATE_NETWORKS)


def validate_url(raw_url: str) -> None:
    """Reject non-http(s) URLs and URLs pointing at localhost or private addresses."""
    try:
        parts = urlsplit(raw_url)
        host = parts.hostname or ""
    except ValueError as err:
        raise CodedError(ErrorCode.REFERENCE_URL_FORBIDDEN, f"invalid URL: {err}") from err

    scheme = parts.scheme.lower()
    if scheme not in ("http", "https"):
        raise CodedError(
            ErrorCode.REFERENCE_URL_FORBIDDEN,
            f'unsupported URL scheme "{parts.scheme}": only http and https are allowed',
        )
    if not host:
        raise CodedError(ErrorCode.REFERENCE_URL_FORBIDDEN, "URL has no host")
    if host.lower() == "localhost":
        raise CodedError(ErrorCode.REFERENCE_URL_FORBIDDEN, f'access to "{host}" is forbidden')

    try:
        ip = ipaddress.ip_address(host)
    except ValueError:
        return
    if _is_private_ip(ip):
        raise CodedError(
            ErrorCode.REFERENCE_URL_FORBIDDEN,
            f'access to private/loopback IP "{host}" is forbidden',
        )


def load_local_file(path: str) -> ReferenceImage:
    """Read and inspect a local image file."""
    try:
        with open(path, "rb") as f:
            data = f.read()
    except FileNotFoundError as err:
        raise CodedError.wrap(ErrorCode.FILE_NOT_FOUND, err) from err
    except OSError as err:
        raise CodedError.wrap(ErrorCode.FILE_READ_FAILED, err) from err

    meta = inspect_bytes(data)
    return ReferenceImage(
        source_type="file",
        original_input=path,
        local_cached_path=path,
        filename=os.path.basename(path),
        mime_type=meta.mime_type,
        width=meta.width,
        height=meta.height,
        size_bytes=len(data),
        data=data,
    )
"""Decoding, encoding, hashing and metadata of PNG, JPEG and WebP images."""

from __future__ import annotations

import hashlib
import io
from dataclasses import dataclass

from PIL import Image

from imgraft.errors import CodedError, ErrorCode

_SUPPORTED_FORMATS = frozenset({"png", "jpeg", "webp"})

# Pillow's format names; MPO is a JPEG container and decodes as JPEG.
_PILLOW_FORMATS = {
    "PNG": "png",
    "JPEG": "jpeg",
    "MPO": "jpeg",
    "WEBP": "webp",
}

_FORMAT_TO_MIME = {
    "png": "image/png",
    "jpeg": "image/jpeg",
    "webp": "image/webp",
}

_PNG_MODES = frozenset({"1", "L", "LA", "I", "I;16", "P", "RGB", "RGBA"})

_DECODE_ERRORS = (
    OSError,
    SyntaxError,
    ValueError,
    EOFError,
    Image.DecompressionBombError,
)

_CHUNK_SIZE = 64 * 1024


@dataclass(frozen=True)
class ImageMeta:
    """Dimensions and MIME type of an image."""

    width: int
    height: int
    mime_type: str


def detect_format(data: bytes) -> str:
    """Guess the format from magic bytes: "png", "jpeg", "webp", "gif" or ""."""
    if data.startswith(b"\x89PNG"):
        return "png"
    if data.startswith(b"\xff\xd8\xff"):
        return "jpeg"
    if len(data) >= 12 and data[0:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "webp"
    if len(data) >= 6 and data.startswith(b"GIF"):
        return "gif"
    return ""


def _unsupported(fmt: str) -> CodedError:
    return CodedError(ErrorCode.UNSUPPORTED_IMAGE_FORMAT, f"unsupported image format: {fmt}")


def _format_name(img: Image.Image) -> str:
    raw = img.format or ""
    return _PILLOW_FORMATS.get(raw, raw.lower())


def _open(data: bytes) -> tuple[Image.Image, str]:
    """Open the image lazily and return it with its normalised format name."""
    if not data:
        raise CodedError(ErrorCode.INVALID_IMAGE, "image data is empty")
    try:
        img = Image.open(io.BytesIO(data))
    except _DECODE_ERRORS as err:
        detected = detect_format(data)
        if detected and detected not in _SUPPORTED_FORMATS:
            raise _unsupported(detected) from err
        raise CodedError.wrap(ErrorCode.INVALID_IMAGE, err) from err
    fmt = _format_name(img)
    if fmt not in _SUPPORTED_FORMATS:
        raise _unsupported(fmt)
    return img, fmt


def decode(data: bytes) -> tuple[Image.Image, str]:
    """Fully decode PNG, JPEG or WebP bytes.

    Returns the image and its format ("png", "jpeg" or "webp").
    Raises CodedError with INVALID_IMAGE or UNSUPPORTED_IMAGE_FORMAT.
    """
    img, fmt = _open(data)
    try:
        img.load()
    except _DECODE_ERRORS as err:
        raise CodedError.wrap(ErrorCode.INVALID_IMAGE, err) from err
    return img, fmt


def encode_png(img: Image.Image | None) -> bytes:
    """Encode an image as PNG bytes, keeping its alpha channel."""
    if img is None:
        raise CodedError(ErrorCode.INTERNAL, "cannot encode nil image")
    if img.mode not in _PNG_MODES:
        img = img.convert("RGBA")
    buf = io.BytesIO()
    try:
        img.save(buf, format="PNG")
    except (OSError, ValueError) as err:
        raise CodedError.wrap(ErrorCode.INTERNAL, err) from err
    return buf.getvalue()


def sha256_of_bytes(data: bytes) -> str:
    """Return the hex SHA-256 of ``data``."""
    return hashlib.sha256(data).hexdigest()


def sha256_of_file(path: str) -> str:
    """Return the hex SHA-256 of the file at ``path``."""
    digest = hashlib.sha256()
    try:
        with open(path, "rb") as f:
            for chunk in iter(lambda: f.read(_CHUNK_SIZE), b""):
                digest.update(chunk)
    except FileNotFoundError as err:
        raise CodedError.wrap(ErrorCode.FILE_NOT_FOUND, err) from err
    except OSError as err:
        raise CodedError.wrap(ErrorCode.FILE_READ_FAILED, err) from err
    return digest.hexdigest()


def inspect_bytes(data: bytes) -> ImageMeta:
    """Read the dimensions and MIME type of image bytes without full decoding."""
    img, fmt = _open(data)
    width, height = img.size
    return ImageMeta(width=width, height=height, mime_type=_FORMAT_TO_MIME[fmt])


def inspect_file(path: str) -> ImageMeta:
    """Read the dimensions and MIME type of the image file at ``path``."""
    try:
        with open(path, "rb") as f:
            data = f.read()
    except FileNotFoundError as err:
        raise CodedError.wrap(ErrorCode.FILE_NOT_FOUND, err) from err
    except OSError as err:
        raise CodedError.wrap(ErrorCode.FILE_READ_FAILED, err) from err
    return inspect_bytes(data)
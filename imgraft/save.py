"""Naming and saving of generated PNG files."""

from __future__ import annotations

import contextlib
import os
from dataclasses import dataclass
from datetime import datetime

from imgraft.errors import CodedError, ErrorCode
from imgraft.imaging import inspect_file, sha256_of_file
from imgraft.output import ImageItem
from imgraft.runtime import Clock, SystemClock

_MAX_SEQUENCE = 999


@dataclass
class SaveOptions:
    """Where and how to save a generated image.

    ``output_path`` wins when set; otherwise a name is generated inside
    ``directory`` (the current directory when empty) from ``clock``.
    """

    output_path: str = ""
    directory: str = ""
    clock: Clock | None = None
    index: int = 0
    transparent_applied: bool = False


def generate_filename(directory: str, t: datetime) -> str:
    """Return an unused path ``imgraft-YYYYMMDD-HHMMSS-NNN.png`` inside ``directory``.

    The sequence number runs from 001 to 999; raises
    CodedError(FILE_ALREADY_EXISTS) when every slot is taken.
    """
    date = t.strftime("%Y%m%d")
    clock = t.strftime("%H%M%S")
    for seq in range(1, _MAX_SEQUENCE + 1):
        path = os.path.join(directory, f"imgraft-{date}-{clock}-{seq:03d}.png")
        try:
            os.stat(path)
        except FileNotFoundError:
            return path
        except OSError as err:
            raise CodedError.wrap(ErrorCode.FILE_WRITE_FAILED, err) from err
    raise CodedError(
        ErrorCode.FILE_ALREADY_EXISTS,
        f"all filename slots are taken for {date}-{clock} (001..{_MAX_SEQUENCE:03d})",
    )


def _make_dirs(directory: str) -> None:
    try:
        os.makedirs(directory, mode=0o755, exist_ok=True)
    except OSError as err:
        raise CodedError.wrap(ErrorCode.OUTPUT_DIR_CREATE_FAILED, err) from err


def _resolve_final_path(opts: SaveOptions, clock: Clock) -> str:
    if opts.output_path:
        _make_dirs(os.path.dirname(opts.output_path) or ".")
        if os.path.exists(opts.output_path):
            raise CodedError(
                ErrorCode.FILE_ALREADY_EXISTS,
                f"output file already exists: {opts.output_path}",
            )
        return opts.output_path

    directory = opts.directory or "."
    _make_dirs(directory)
    return generate_filename(directory, clock.now())


def _remove_quietly(path: str) -> None:
    with contextlib.suppress(OSError):
        os.remove(path)


def _write_file(path: str, data: bytes) -> None:
    try:
        f = open(path, "wb")
    except OSError as err:
        raise CodedError.wrap(ErrorCode.FILE_WRITE_FAILED, err) from err
    try:
        with f:
            f.write(data)
    except OSError as err:
        _remove_quietly(path)
        raise CodedError.wrap(ErrorCode.FILE_WRITE_FAILED, err) from err


def save_png(data: bytes, opts: SaveOptions) -> ImageItem:
    """Write PNG bytes to disk and describe the saved file.

    The file is written, inspected and hashed; on any failure after writing
    the file is removed so no partial output is left behind.
    """
    if not data:
        raise CodedError(ErrorCode.FILE_WRITE_FAILED, "PNG data is empty")

    clock = opts.clock if opts.clock is not None else SystemClock()
    final_path = _resolve_final_path(opts, clock)
    _write_file(final_path, data)

    try:
        meta = inspect_file(final_path)
        digest = sha256_of_file(final_path)
        abs_path = os.path.abspath(final_path)
    except CodedError:
        _remove_quietly(final_path)
        raise
    except OSError as err:
        _remove_quietly(final_path)
        raise CodedError.wrap(ErrorCode.FILE_WRITE_FAILED, err) from err

    return ImageItem(
        index=opts.index,
        path=abs_path,
        filename=os.path.basename(abs_path),
        width=meta.width,
        height=meta.height,
        mime_type=meta.mime_type,
        sha256=digest,
        transparent_applied=opts.transparent_applied,
    )
"""Background removal by corner colour sampling, and transparent trimming."""

from __future__ import annotations

import math

from PIL import Image

from imgraft.errors import CodedError, ErrorCode

DEFAULT_THRESHOLD = 40.0

_CORNER_SAMPLE_SIZE = 3


def _premultiplied(pixel: tuple[int, int, int, int]) -> tuple[int, int, int]:
    """Return the 8-bit alpha-premultiplied RGB of a straight-alpha pixel."""
    r, g, b, a = pixel
    a16 = a * 0x101
    return tuple(((c * 0x101 * a16) // 0xFFFF) >> 8 for c in (r, g, b))  # type: ignore[return-value]


def _estimate_background(rows: list[list[tuple[int, int, int]]], w: int, h: int) -> tuple[float, float, float]:
    """Average the N×N pixels at each of the four corners."""
    n = min(_CORNER_SAMPLE_SIZE, w, h)
    regions = [
        (0, 0),
        (w - n, 0),
        (0, h - n),
        (w - n, h - n),
    ]
    samples = [
        rows[y][x]
        for x0, y0 in regions
        for y in range(y0, y0 + n)
        for x in range(x0, x0 + n)
    ]
    if not samples:
        return (0.0, 0.0, 0.0)
    count = len(samples)
    return tuple(sum(channel) / count for channel in zip(*samples))  # type: ignore[return-value]


def _alpha_for(dist: float, threshold: float) -> float:
    if threshold <= 0:
        return 255.0
    if dist < threshold:
        return 0.0
    fade = threshold * 0.5
    if dist < threshold + fade:
        return (dist - threshold) / fade * 255.0
    return 255.0


def _smooth(alpha: list[list[float]], w: int, h: int) -> list[list[float]]:
    """Apply a 3×3 mean filter that averages only in-bounds neighbours."""
    result = []
    for y in range(h):
        ys = range(max(0, y - 1), min(h, y + 2))
        row = []
        for x in range(w):
            xs = range(max(0, x - 1), min(w, x + 2))
            values = [alpha[ny][nx] for ny in ys for nx in xs]
            row.append(sum(values) / len(values))
        result.append(row)
    return result


def remove_background(img: Image.Image, threshold: float = DEFAULT_THRESHOLD) -> Image.Image:
    """Make pixels close to the corner-sampled background colour transparent.

    Returns a new RGBA image of the same size. Pixels within ``threshold`` of
    the background become transparent, those up to 1.5 × ``threshold`` fade in
    linearly, and the alpha is then smoothed with a 3×3 mean filter.
    """
    w, h = img.size
    if w == 0 or h == 0:
        return Image.new("RGBA", (w, h))

    flat = [_premultiplied(p) for p in img.convert("RGBA").getdata()]
    rows = [flat[y * w:(y + 1) * w] for y in range(h)]

    bg_r, bg_g, bg_b = _estimate_background(rows, w, h)
    alpha = [
        [
            _alpha_for(math.sqrt((r - bg_r) ** 2 + (g - bg_g) ** 2 + (b - bg_b) ** 2), threshold)
            for r, g, b in row
        ]
        for row in rows
    ]
    smoothed = _smooth(alpha, w, h)

    result = Image.new("RGBA", (w, h))
    result.putdata(
        [
            (r, g, b, min(255, int(math.floor(a + 0.5))))
            for row, alpha_row in zip(rows, smoothed)
            for (r, g, b), a in zip(row, alpha_row)
        ]
    )
    return result


def trim_transparent(img: Image.Image) -> Image.Image:
    """Crop to the bounding box of pixels whose alpha is above zero.

    Raises CodedError(INTERNAL) when every pixel is transparent.
    """
    rgba = img if img.mode == "RGBA" else img.convert("RGBA")
    bbox = rgba.getchannel("A").getbbox()
    if bbox is None:
        raise CodedError(ErrorCode.INTERNAL, "image is fully transparent after background removal")
    return rgba.crop(bbox)


def transparent_pipeline(img: Image.Image, threshold: float = DEFAULT_THRESHOLD) -> tuple[Image.Image, bool]:
    """Remove the background and trim; returns the image and the applied flag."""
    removed = remove_background(img, threshold)
    return trim_transparent(removed), True
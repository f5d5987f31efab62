"""Base64/PNG conversion helpers and image file I/O."""

from __future__ import annotations

import base64
import binascii
import io
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from PIL import Image, UnidentifiedImageError

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger(__name__)

DATA_URL_PREFIX = "data:image/png;base64,"

ImageInput = str | bytes | Path | Image.Image


@dataclass
class DecodedImages:
    """Result of best-effort decoding: PNG images, raw bytes, and how many entries were dropped.

    ``png`` holds the bytes behind each entry of ``images``, in the same order.
    ``raw`` also keeps entries that were valid base64 but not a readable PNG.
    """

    images: list[Image.Image] = field(default_factory=list)
    raw: list[bytes] = field(default_factory=list)
    png: list[bytes] = field(default_factory=list)
    skipped: int = 0


def strip_data_url(encoded: str) -> str:
    """Drop a ``data:...;base64,`` prefix; strings without a comma are returned unchanged."""
    _, sep, payload = encoded.partition(",")
    return payload if sep else encoded


def decode_image(encoded: str) -> tuple[Image.Image | None, bytes | None]:
    """Decode one base64 PNG (plain or data-URL). Returns ``(image, raw)``, either may be None."""
    try:
        raw = base64.b64decode(strip_data_url(encoded), validate=True)
    except (binascii.Error, ValueError) as e:
        logger.debug("skipping image: invalid base64: %s", e)
        return None, None
    try:
        img = Image.open(io.BytesIO(raw), formats=["PNG"])
        img.load()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, SyntaxError) as e:
        logger.debug("skipping image: not a readable PNG: %s", e)
        return None, raw
    return img, raw


def decode_images(encoded: Iterable[str]) -> DecodedImages:
    """Decode a sequence of base64 PNG strings, skipping entries that fail."""
    result = DecodedImages()
    total = 0
    for item in encoded:
        total += 1
        img, raw = decode_image(item)
        if raw is not None:
            result.raw.append(raw)
        if img is not None:
            result.images.append(img)
            result.png.append(raw)
    result.skipped = total - len(result.images)
    if result.skipped:
        logger.debug("decoded %d of %d image(s)", len(result.images), total)
    return result


def _png_bytes(img: Image.Image) -> bytes:
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def image_to_raw_base64(img: Image.Image) -> str:
    """Encode an image as a bare base64 PNG string."""
    return base64.b64encode(_png_bytes(img)).decode()


def image_to_base64(img: Image.Image) -> str:
    """Encode an image as a ``data:image/png;base64,`` URL."""
    return DATA_URL_PREFIX + image_to_raw_base64(img)


def png_bytes_to_base64(data: bytes) -> str:
    """Wrap already-encoded PNG bytes in a data URL."""
    return DATA_URL_PREFIX + base64.b64encode(data).decode()


def to_b64(image: ImageInput) -> str:
    """Convert a PIL image, file path, raw bytes, or base64 string to base64."""
    if isinstance(image, Image.Image):
        return image_to_raw_base64(image)
    if isinstance(image, (str, Path)):
        path = Path(image)
        try:
            is_file = path.is_file()
        except (OSError, ValueError):
            # Long base64 strings are not valid paths on every platform.
            is_file = False
        if is_file:
            logger.debug("encoding file: %s", path)
            return base64.b64encode(path.read_bytes()).decode()
        return str(image)
    if isinstance(image, bytes):
        return base64.b64encode(image).decode()
    raise TypeError(f"unsupported image type: {type(image)}")


def save_images(
    images: list[bytes],
    output_dir: str | Path = ".",
    prefix: str = "output",
) -> list[Path]:
    """Write raw PNG bytes to numbered files. Returns saved paths."""
    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)
    paths = []
    for i, data in enumerate(images):
        path = out / f"{prefix}_{i:04d}.png"
        path.write_bytes(data)
        logger.info("saved: %s", path)
        paths.append(path)
    return paths

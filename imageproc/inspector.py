"""
Image metadata inspector.

Every transform decodes through ``open_image`` so unsupported or corrupt input
is rejected with a typed error before any resize/crop work starts.
"""
from __future__ import annotations

import io

import pillow_heif
from PIL import Image, UnidentifiedImageError

from imageproc.exceptions import InvalidImage, UnsupportedFormat
from imageproc.formats import ImageFormat, format_for_pil
from imageproc.schemas import ImageInfo

pillow_heif.register_heif_opener()

# Enough of the head of a text file to find the root element.
_SNIFF_BYTES = 1024


def _looks_like_svg(buffer: bytes) -> bool:
    head = buffer[:_SNIFF_BYTES].lstrip(b"\xef\xbb\xbf \t\r\n").lower()
    return head.startswith(b"<svg") or (head.startswith(b"<?xml") and b"<svg" in head)


def open_image(buffer: bytes) -> tuple[Image.Image, ImageFormat]:
    """Fully decode ``buffer`` and return the image with its registry format."""
    if not buffer:
        raise InvalidImage("buffer is empty")
    if _looks_like_svg(buffer):
        raise UnsupportedFormat("svg")
    try:
        image = Image.open(io.BytesIO(buffer))
    except UnidentifiedImageError:
        raise InvalidImage("input buffer contains unsupported image format") from None

    if not image.format:
        raise InvalidImage("could not detect image format")
    fmt = format_for_pil(image.format)
    try:
        image.load()
    except (OSError, SyntaxError, ValueError) as exc:
        raise InvalidImage(f"could not decode {fmt.value} data ({exc})") from exc
    if image.width <= 0 or image.height <= 0:
        raise InvalidImage("image has no width or height")
    return image, fmt


def inspect(buffer: bytes) -> ImageInfo:
    """Return width, height and MIME type as stored in ``buffer``."""
    image, fmt = open_image(buffer)
    return ImageInfo(width=image.width, height=image.height, mime_type=fmt.mime_type)

"""
Format registry: supported image formats and their MIME types.

Only JPEG, PNG, HEIC and WebP are accepted.  Anything else (SVG, BMP, GIF, ...)
raises UnsupportedFormat instead of passing through.
"""
from __future__ import annotations

import enum

from imageproc.exceptions import UnsupportedFormat


class ImageFormat(str, enum.Enum):
    JPEG = "jpeg"
    PNG = "png"
    HEIC = "heic"
    WEBP = "webp"

    @property
    def mime_type(self) -> str:
        return f"image/{self.value}"

    @property
    def extension(self) -> str:
        """Canonical file extension (no leading dot)."""
        return "jpg" if self is ImageFormat.JPEG else self.value

    @property
    def pil_format(self) -> str:
        """Format name understood by ``Image.save``."""
        return _PIL_FORMATS[self]


_PIL_FORMATS: dict[ImageFormat, str] = {
    ImageFormat.JPEG: "JPEG",
    ImageFormat.PNG: "PNG",
    ImageFormat.HEIC: "HEIF",
    ImageFormat.WEBP: "WEBP",
}

# Decoder names reported by Pillow / pillow-heif.  MPO is a multi-frame JPEG
# written by many cameras.
_FROM_PIL: dict[str, ImageFormat] = {
    "JPEG": ImageFormat.JPEG,
    "MPO": ImageFormat.JPEG,
    "PNG": ImageFormat.PNG,
    "HEIF": ImageFormat.HEIC,
    "WEBP": ImageFormat.WEBP,
}

EXTENSION_MIME_TYPES: dict[str, str] = {
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "heic": "image/heic",
    "webp": "image/webp",
}

MIME_TYPE_EXTENSIONS: dict[str, str] = {fmt.mime_type: fmt.extension for fmt in ImageFormat}


def normalize_format(value: str | ImageFormat) -> ImageFormat:
    """Resolve an extension or format name (``"JPG"``, ``".png"``) to an ImageFormat."""
    if isinstance(value, ImageFormat):
        return value
    key = value.strip().lower().lstrip(".")
    if key == "jpg":
        key = "jpeg"
    try:
        return ImageFormat(key)
    except ValueError:
        raise UnsupportedFormat(value) from None


def format_for_pil(pil_format: str | None) -> ImageFormat:
    """Map the decoder name of an opened image to an ImageFormat."""
    if not pil_format:
        raise UnsupportedFormat("unknown")
    try:
        return _FROM_PIL[pil_format.upper()]
    except KeyError:
        raise UnsupportedFormat(pil_format.lower()) from None


def mime_type_for_extension(ext: str) -> str:
    key = ext.strip().lower().lstrip(".")
    try:
        return EXTENSION_MIME_TYPES[key]
    except KeyError:
        raise UnsupportedFormat(ext) from None


def extension_for_mime_type(mime_type: str) -> str:
    key = mime_type.split(";", 1)[0].strip().lower()
    try:
        return MIME_TYPE_EXTENSIONS[key]
    except KeyError:
        raise UnsupportedFormat(mime_type) from None

"""
Transform engine: aspect-fit resize, scale/crop resize, format conversion.

Pure functions over (bytes, params) -> bytes built on Pillow.  Each call decodes
its own copy of the input, so calls share no state and are safe to run in
parallel threads.

Geometry rules:
  - derived integer dimensions are floored
  - aspect-fit bounds are inclusive on both axes
  - crop offsets are in the *scaled* image's coordinate space; they are not
    rescaled from the original image
  - the noScaleUp check, the crop target width and the crop window bounds use
    the stored (pre-rotation) size that ``inspect`` reports
"""
from __future__ import annotations

import io
import math

from PIL import Image, ImageOps

from imageproc.exceptions import InvalidCropRegion, InvalidImage, InvalidScale
from imageproc.formats import ImageFormat, normalize_format
from imageproc.inspector import open_image
from imageproc.schemas import ResizeAspectFitParams, ResizeCropParams

JPEG_QUALITY = 90
WEBP_QUALITY = 85
HEIC_QUALITY = 85

# Background used when flattening transparency for JPEG output
_JPEG_BACKGROUND = (255, 255, 255)

# Modes the PNG encoder writes as-is
_PNG_MODES = ("1", "L", "LA", "I", "I;16", "P", "RGB", "RGBA")


def _decode(buffer: bytes, *, no_rotate: bool) -> tuple[Image.Image, ImageFormat, tuple[int, int]]:
    """Return the (optionally auto-rotated) image, its format and its stored size.

    The stored size is what ``inspect`` reports, i.e. before EXIF rotation.
    """
    image, fmt = open_image(buffer)
    stored_size = image.size
    if not no_rotate:
        image = ImageOps.exif_transpose(image)
    return image, fmt, stored_size


def _target_format(requested: str | None, source: ImageFormat) -> ImageFormat:
    if requested is None:
        return source
    return normalize_format(requested)


def _has_alpha(image: Image.Image) -> bool:
    return image.mode in ("RGBA", "LA", "PA") or "transparency" in image.info


def _to_rgb(image: Image.Image) -> Image.Image:
    """RGB or RGBA, keeping transparency when the source has any."""
    if image.mode in ("RGB", "RGBA"):
        return image
    return image.convert("RGBA" if _has_alpha(image) else "RGB")


def _flatten(image: Image.Image) -> Image.Image:
    """Convert to RGB, compositing any alpha channel onto white."""
    if image.mode in ("RGB", "L"):
        return image
    image = _to_rgb(image)
    if image.mode == "RGBA":
        background = Image.new("RGB", image.size, _JPEG_BACKGROUND)
        background.paste(image, mask=image.split()[-1])
        return background
    return image


def _encode(image: Image.Image, fmt: ImageFormat) -> bytes:
    """Encode ``image`` as ``fmt``.  No EXIF block is written."""
    buf = io.BytesIO()
    try:
        if fmt is ImageFormat.JPEG:
            _flatten(image).save(buf, format=fmt.pil_format, quality=JPEG_QUALITY)
        elif fmt is ImageFormat.WEBP:
            _to_rgb(image).save(buf, format=fmt.pil_format, quality=WEBP_QUALITY, method=4)
        elif fmt is ImageFormat.HEIC:
            _to_rgb(image).save(buf, format=fmt.pil_format, quality=HEIC_QUALITY)
        else:
            if image.mode not in _PNG_MODES:
                image = _to_rgb(image)
            image.save(buf, format=fmt.pil_format)
    except (OSError, ValueError) as exc:
        raise InvalidImage(f"could not encode {image.mode} image as {fmt.value} ({exc})") from exc
    return buf.getvalue()


def fit_inside(width: int, height: int, max_width: int, max_height: int) -> tuple[int, int]:
    """Largest (w, h) with the same aspect ratio that fits max_width x max_height.

    Uses integer cross-multiplication so the limiting side lands exactly on its
    bound; the other side is floored (never below 1).
    """
    if max_width * height <= max_height * width:
        return max_width, max(1, height * max_width // width)
    return max(1, width * max_height // height), max_height


def resize_aspect_fit(buffer: bytes, params: ResizeAspectFitParams) -> bytes:
    """Resize so the image fits inside the max box, preserving aspect ratio.

    The ``no_scale_up`` check compares the stored (pre-rotation) size with the
    box; when it fits, the image is returned unresized (still auto-rotated and
    re-encoded to the requested format).  Otherwise the rotated image is scaled
    up or down until one side touches its bound.
    """
    image, source_fmt, (width, height) = _decode(buffer, no_rotate=params.no_rotate)
    fmt = _target_format(params.format, source_fmt)

    if params.no_scale_up and width <= params.max_width and height <= params.max_height:
        return _encode(image, fmt)

    size = fit_inside(image.width, image.height, params.max_width, params.max_height)
    if size != image.size:
        image = image.resize(size, Image.LANCZOS)
    return _encode(image, fmt)


def crop_region(
    width: int, height: int, params: ResizeCropParams,
) -> tuple[int, int, int]:
    """Return (resize_width, extract_width, extract_height).

    ``width``/``height`` are the stored source dimensions as reported by
    ``inspect``.
    """
    scale = params.scale
    resize_width = math.floor(scale * width)
    if resize_width <= 0:
        raise InvalidScale(width, height, scale)

    extract_width = min(params.width, math.floor(scale * width) - params.offset_x)
    extract_height = min(params.height, math.floor(scale * height) - params.offset_y)
    if extract_width <= 0 or extract_height <= 0:
        raise InvalidCropRegion(width, height, params.offset_x, params.offset_y, scale)
    return resize_width, extract_width, extract_height


def resize_crop(buffer: bytes, params: ResizeCropParams) -> bytes:
    """Scale the image by ``params.scale``, then extract a fixed-size window.

    The target width and the window bounds come from the stored size; the
    (rotated) image is then resized to that width, keeping its own aspect ratio.
    """
    image, source_fmt, (width, height) = _decode(buffer, no_rotate=params.no_rotate)
    fmt = _target_format(params.format, source_fmt)

    resize_width, extract_width, extract_height = crop_region(width, height, params)
    resize_height = max(1, image.height * resize_width // image.width)
    if (resize_width, resize_height) != image.size:
        image = image.resize((resize_width, resize_height), Image.LANCZOS)

    # floor(scale * height) can exceed the proportional height by one pixel
    right = min(params.offset_x + extract_width, image.width)
    bottom = min(params.offset_y + extract_height, image.height)
    if right <= params.offset_x or bottom <= params.offset_y:
        raise InvalidCropRegion(
            resize_width, resize_height, params.offset_x, params.offset_y, params.scale,
        )
    image = image.crop((params.offset_x, params.offset_y, right, bottom))
    return _encode(image, fmt)


def convert_format(buffer: bytes, format: str) -> bytes:
    """Re-encode ``buffer`` as ``format`` without any geometric change."""
    fmt = normalize_format(format)
    image, _ = open_image(buffer)
    return _encode(image, fmt)

import pytest

from conftest import make_image
from imageproc.exceptions import InvalidImage, UnsupportedFormat
from imageproc.inspector import inspect, open_image
from imageproc.formats import ImageFormat
from imageproc.schemas import ImageInfo


def test_inspect_png(penguin_png: bytes) -> None:
    info = inspect(penguin_png)
    assert info == ImageInfo(width=1250, height=1250, mime_type="image/png")


def test_inspect_jpeg(cat_jpg: bytes) -> None:
    info = inspect(cat_jpg)
    assert (info.width, info.height, info.mime_type) == (200, 300, "image/jpeg")


def test_inspect_webp() -> None:
    info = inspect(make_image(40, 20, "WEBP"))
    assert (info.width, info.height, info.mime_type) == (40, 20, "image/webp")


def test_inspect_is_stable(cat_jpg: bytes) -> None:
    assert inspect(cat_jpg) == inspect(cat_jpg)


def test_inspect_reports_stored_dimensions_ignoring_orientation() -> None:
    rotated = make_image(200, 100, "JPEG", orientation=6)
    info = inspect(rotated)
    assert (info.width, info.height) == (200, 100)


def test_image_info_serializes_camel_case() -> None:
    info = ImageInfo(width=1, height=2, mime_type="image/png")
    assert info.model_dump(by_alias=True) == {"width": 1, "height": 2, "mimeType": "image/png"}


def test_open_image_returns_format(small_png: bytes) -> None:
    image, fmt = open_image(small_png)
    assert fmt is ImageFormat.PNG
    assert image.size == (100, 150)


def test_empty_buffer_is_invalid() -> None:
    with pytest.raises(InvalidImage, match="empty"):
        inspect(b"")


def test_garbage_buffer_is_invalid(garbage: bytes) -> None:
    with pytest.raises(InvalidImage):
        inspect(garbage)


def test_non_image_bytes_are_invalid() -> None:
    with pytest.raises(InvalidImage):
        inspect(b"this is definitely a text file, not a picture")


def test_truncated_buffer_is_invalid(penguin_png: bytes) -> None:
    with pytest.raises(InvalidImage):
        inspect(penguin_png[: len(penguin_png) // 2])


def test_svg_is_unsupported(svg_bytes: bytes) -> None:
    with pytest.raises(UnsupportedFormat) as exc_info:
        inspect(svg_bytes)
    assert exc_info.value.format == "svg"


def test_bare_svg_without_prolog_is_unsupported() -> None:
    with pytest.raises(UnsupportedFormat):
        inspect(b'<svg xmlns="http://www.w3.org/2000/svg"></svg>')


def test_decodable_but_unsupported_format() -> None:
    with pytest.raises(UnsupportedFormat, match="bmp"):
        inspect(make_image(10, 10, "BMP"))

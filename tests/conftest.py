import io

import pytest
from PIL import Image

from imageproc.storage import StoredObject

# EXIF tag id for Orientation
ORIENTATION = 0x0112


def make_image(
    width: int,
    height: int,
    fmt: str = "PNG",
    *,
    mode: str = "RGB",
    color: tuple | int = (200, 30, 30),
    orientation: int | None = None,
) -> bytes:
    image = Image.new(mode, (width, height), color)
    buf = io.BytesIO()
    kwargs = {}
    if orientation is not None:
        exif = Image.Exif()
        exif[ORIENTATION] = orientation
        kwargs["exif"] = exif.tobytes()
    image.save(buf, format=fmt, **kwargs)
    return buf.getvalue()


def make_coordinate_png(width: int, height: int) -> bytes:
    """PNG whose pixel (x, y) is (x % 256, y % 256, (x // 256) * 16 + y // 256)."""
    data = bytes(
        v
        for y in range(height)
        for x in range(width)
        for v in (x % 256, y % 256, (x // 256) * 16 + y // 256)
    )
    buf = io.BytesIO()
    Image.frombytes("RGB", (width, height), data).save(buf, format="PNG")
    return buf.getvalue()


def open_bytes(data: bytes) -> Image.Image:
    image = Image.open(io.BytesIO(data))
    image.load()
    return image


@pytest.fixture
def cat_jpg() -> bytes:
    return make_image(200, 300, "JPEG")


@pytest.fixture(scope="session")
def penguin_png() -> bytes:
    return make_coordinate_png(1250, 1250)


@pytest.fixture
def small_png() -> bytes:
    return make_image(100, 150, "PNG")


@pytest.fixture
def svg_bytes() -> bytes:
    return (
        b'<?xml version="1.0" encoding="UTF-8"?>\n'
        b'<svg xmlns="http://www.w3.org/2000/svg" width="10" height="10">'
        b'<rect width="10" height="10" fill="red"/></svg>'
    )


@pytest.fixture
def garbage() -> bytes:
    return bytes(10)


class InMemoryObjectStore:
    """ObjectStore fake: buckets map to {key: StoredObject}."""

    def __init__(self, *buckets: str) -> None:
        self.buckets: dict[str, dict[str, StoredObject]] = {b: {} for b in buckets}

    def put(self, bucket: str, key: str, body: bytes, content_type: str = "image/png") -> None:
        self.buckets[bucket][key] = StoredObject(body=body, content_type=content_type)

    def read(self, bucket: str, key: str) -> StoredObject:
        return self.buckets[bucket][key]

    def write(self, bucket: str, key: str, body: bytes, content_type: str) -> None:
        self.buckets[bucket][key] = StoredObject(body=body, content_type=content_type)

    def exists(self, bucket: str) -> bool:
        return bucket in self.buckets


def s3_event(bucket: str, key: str, event_name: str = "ObjectCreated:Put") -> dict:
    return {
        "Records": [
            {
                "eventSource": "aws:s3",
                "eventName": event_name,
                "s3": {"bucket": {"name": bucket}, "object": {"key": key}},
            }
        ]
    }

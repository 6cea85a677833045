"""
Image processing: domain exceptions.

Raised by the engine, never caught by it.  The event handler decides whether a
failure is logged and dropped or propagated to the function runtime.
"""


class ImageProcessingError(Exception):
    """Base class for every terminal transform failure."""


class InvalidImage(ImageProcessingError):
    """Buffer is empty, truncated or not an image at all."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Invalid image: {reason}.")


class UnsupportedFormat(ImageProcessingError):
    def __init__(self, fmt: str) -> None:
        self.format = fmt
        super().__init__(f"Unsupported image file type: {fmt}.")


class InvalidScale(ImageProcessingError):
    def __init__(self, width: int, height: int, scale: float) -> None:
        self.width = width
        self.height = height
        self.scale = scale
        super().__init__(f"Can't scale {width}x{height} by {scale}.")


class InvalidCropRegion(ImageProcessingError):
    """The crop window lies entirely outside the scaled image."""

    def __init__(
        self,
        width: int,
        height: int,
        offset_x: int,
        offset_y: int,
        scale: float,
    ) -> None:
        self.width = width
        self.height = height
        self.offset_x = offset_x
        self.offset_y = offset_y
        self.scale = scale
        super().__init__(
            f"Invalid crop region: offset ({offset_x}, {offset_y}) is outside "
            f"{width}x{height} scaled by {scale}."
        )


class UnknownOperation(ImageProcessingError):
    def __init__(self, name: object) -> None:
        self.name = name
        super().__init__(f"Unknown operation: {name!r}.")


# ── Orchestration ────────────────────────────────────────────────────────────

class BucketNotFound(Exception):
    def __init__(self, bucket: str) -> None:
        self.bucket = bucket
        super().__init__(f"Bucket {bucket} does not exist.")

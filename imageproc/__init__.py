from imageproc.dispatcher import dispatch, dispatch_async, parse_operation
from imageproc.exceptions import (
    ImageProcessingError,
    InvalidCropRegion,
    InvalidImage,
    InvalidScale,
    UnknownOperation,
    UnsupportedFormat,
)
from imageproc.formats import (
    ImageFormat,
    extension_for_mime_type,
    mime_type_for_extension,
    normalize_format,
)
from imageproc.inspector import inspect
from imageproc.processor import convert_format, resize_aspect_fit, resize_crop
from imageproc.schemas import (
    ConvertFormatParams,
    ImageInfo,
    Operation,
    ResizeAspectFitParams,
    ResizeCropParams,
)

__all__ = [
    "ConvertFormatParams",
    "ImageFormat",
    "ImageInfo",
    "ImageProcessingError",
    "InvalidCropRegion",
    "InvalidImage",
    "InvalidScale",
    "Operation",
    "ResizeAspectFitParams",
    "ResizeCropParams",
    "UnknownOperation",
    "UnsupportedFormat",
    "convert_format",
    "dispatch",
    "dispatch_async",
    "extension_for_mime_type",
    "inspect",
    "mime_type_for_extension",
    "normalize_format",
    "parse_operation",
    "resize_aspect_fit",
    "resize_crop",
]

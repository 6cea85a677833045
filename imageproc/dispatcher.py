"""
Operation dispatcher: maps a tagged operation to its transform.

Adding an operation kind means: a params model and an ``*Operation`` model in
schemas, a transform in processor, and one branch in ``dispatch``.
"""
from __future__ import annotations

import asyncio
import functools
from collections.abc import Mapping
from typing import Any

from pydantic import TypeAdapter

from imageproc import processor
from imageproc.exceptions import UnknownOperation
from imageproc.schemas import (
    OPERATION_NAMES,
    ConvertFormatOperation,
    Operation,
    ResizeAspectFitOperation,
    ResizeCropOperation,
)

_operation_adapter: TypeAdapter[Operation] = TypeAdapter(Operation)


def parse_operation(raw: Operation | Mapping[str, Any]) -> Operation:
    """Build an Operation from ``{"name": ..., "params": {...}}``.

    Unknown names raise UnknownOperation; malformed params raise pydantic's
    ValidationError.
    """
    if isinstance(raw, (ResizeAspectFitOperation, ResizeCropOperation, ConvertFormatOperation)):
        return raw
    if not isinstance(raw, Mapping):
        raise UnknownOperation(type(raw).__name__)
    name = raw.get("name")
    if name not in OPERATION_NAMES:
        raise UnknownOperation(name)
    return _operation_adapter.validate_python(dict(raw))


def dispatch(buffer: bytes, operation: Operation | Mapping[str, Any]) -> bytes:
    """Run ``operation`` on ``buffer`` and return the encoded result."""
    operation = parse_operation(operation)
    if isinstance(operation, ResizeAspectFitOperation):
        return processor.resize_aspect_fit(buffer, operation.params)
    if isinstance(operation, ResizeCropOperation):
        return processor.resize_crop(buffer, operation.params)
    if isinstance(operation, ConvertFormatOperation):
        return processor.convert_format(buffer, operation.params.format)
    raise UnknownOperation(operation.name)


async def dispatch_async(buffer: bytes, operation: Operation | Mapping[str, Any]) -> bytes:
    """Run ``dispatch`` in the default executor (decode/encode is CPU-bound)."""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, functools.partial(dispatch, buffer, operation))

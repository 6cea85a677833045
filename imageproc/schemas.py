"""
Image processing: Pydantic V2 models for image info and operation params.

Field names are snake_case in Python; the camelCase aliases (``maxWidth``,
``noScaleUp``, ...) are what configuration and event payloads carry.  Both
spellings are accepted on input.
"""
from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# ── Base ─────────────────────────────────────────────────────────────────────

class _Base(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="forbid",
        frozen=True,
    )


# ── Image info ───────────────────────────────────────────────────────────────

class ImageInfo(_Base):
    """Dimensions and MIME type of a decoded image buffer."""
    width: int = Field(gt=0)
    height: int = Field(gt=0)
    mime_type: str


# ── Operation params ─────────────────────────────────────────────────────────

class ResizeAspectFitParams(_Base):
    """Fit the image inside a max_width x max_height box."""
    max_width: int = Field(gt=0)
    max_height: int = Field(gt=0)
    no_scale_up: bool = False
    format: str | None = Field(default=None, description="Output format, source format when omitted")
    no_rotate: bool = False


class ResizeCropParams(_Base):
    """Scale by ``scale`` then extract width x height at (offset_x, offset_y)."""
    width: int = Field(gt=0)
    height: int = Field(gt=0)
    offset_x: int = Field(default=0, ge=0)
    offset_y: int = Field(default=0, ge=0)
    scale: float = Field(default=1.0, gt=0)
    format: str | None = None
    no_rotate: bool = False


class ConvertFormatParams(_Base):
    format: str = Field(min_length=1)


# ── Operations ───────────────────────────────────────────────────────────────

class ResizeAspectFitOperation(_Base):
    name: Literal["resizeAspectFit"] = "resizeAspectFit"
    params: ResizeAspectFitParams


class ResizeCropOperation(_Base):
    name: Literal["resizeCrop"] = "resizeCrop"
    params: ResizeCropParams


class ConvertFormatOperation(_Base):
    name: Literal["convertFormat"] = "convertFormat"
    params: ConvertFormatParams


Operation = Annotated[
    Union[ResizeAspectFitOperation, ResizeCropOperation, ConvertFormatOperation],
    Field(discriminator="name"),
]

OPERATION_NAMES: frozenset[str] = frozenset(
    {"resizeAspectFit", "resizeCrop", "convertFormat"}
)

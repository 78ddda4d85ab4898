"""Pillow integrations - image formats and resizing."""

from .formats import (
    Format,
    FormatRegistry,
    JPEGFormat,
    PNG2JPEGFormat,
    PNGFormat,
    decode_image,
    format_by_name,
)
from .resizer import DEFAULT_RESIZER, PillowResizer, Resizer

__all__ = [
    "Format",
    "FormatRegistry",
    "JPEGFormat",
    "PNGFormat",
    "PNG2JPEGFormat",
    "decode_image",
    "format_by_name",
    "Resizer",
    "PillowResizer",
    "DEFAULT_RESIZER",
]

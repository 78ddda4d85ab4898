"""Core logic - checksums, directory layout and data models."""

from .checksum import compute_checksum, crc64_iso
from .dataurl import DataURL, decode_data_url
from .layout import PathResolver, structured_path
from .models import ORIGINAL_NAME, ImageFile, Size

__all__ = [
    "compute_checksum",
    "crc64_iso",
    "DataURL",
    "decode_data_url",
    "PathResolver",
    "structured_path",
    "ORIGINAL_NAME",
    "ImageFile",
    "Size",
]

"""imstor - Store images and their resized copies by content checksum.

Package structure:
    imstor/
    ├── cli.py              # Command-line interface
    ├── config.py           # Config (root path, sizes, formats) from YAML/env
    ├── errors.py           # Exception hierarchy
    ├── core/               # Checksums, directory layout, data models
    │   ├── checksum.py     # CRC-64 decimal checksums
    │   ├── layout.py       # <last2>/<checksum>/ path resolution
    │   ├── dataurl.py      # data: URL decoding
    │   └── models.py       # Size, ImageFile
    ├── imaging/            # Pillow integrations
    │   ├── formats.py      # JPEG, PNG and PNG->JPEG formats
    │   └── resizer.py      # Thumbnail/resize
    └── storage/
        └── engine.py       # ImageStorage: store and retrieve
"""

from .config import Config, load_config
from .core.checksum import compute_checksum
from .core.dataurl import DataURL, decode_data_url
from .core.layout import PathResolver, structured_path
from .core.models import ORIGINAL_NAME, Size
from .errors import (
    ConfigError,
    DecodeError,
    EncodeError,
    ImstorError,
    InvalidDataURLError,
    NotFoundError,
    StorageIOError,
    UnsupportedFormatError,
    WriteError,
)
from .imaging.formats import (
    Format,
    FormatRegistry,
    JPEGFormat,
    PNG2JPEGFormat,
    PNGFormat,
    format_by_name,
)
from .imaging.resizer import DEFAULT_RESIZER, PillowResizer, Resizer
from .storage.engine import ImageStorage

__all__ = [
    # Engine
    "ImageStorage",
    "Config",
    "load_config",
    "Size",
    "ORIGINAL_NAME",
    # Core
    "compute_checksum",
    "structured_path",
    "PathResolver",
    "DataURL",
    "decode_data_url",
    # Imaging
    "Format",
    "FormatRegistry",
    "JPEGFormat",
    "PNGFormat",
    "PNG2JPEGFormat",
    "format_by_name",
    "Resizer",
    "PillowResizer",
    "DEFAULT_RESIZER",
    # Errors
    "ImstorError",
    "ConfigError",
    "UnsupportedFormatError",
    "DecodeError",
    "EncodeError",
    "InvalidDataURLError",
    "NotFoundError",
    "StorageIOError",
    "WriteError",
]

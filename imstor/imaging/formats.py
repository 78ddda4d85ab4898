"""Image formats: decode one media type, encode to one file extension.

A Format couples what a stored image may arrive as with what it is written
as. The two sides need not agree; ``PNG2JPEGFormat`` accepts PNG uploads and
stores JPEG files.
"""

import io
from typing import BinaryIO, Iterable, Protocol, runtime_checkable

from PIL import Image

from ..errors import DecodeError, UnsupportedFormatError

# Quality used for every JPEG written by imstor
JPEG_QUALITY = 75

# Modes the JPEG encoder accepts as-is
_JPEG_MODES = {"1", "L", "RGB", "CMYK"}


@runtime_checkable
class Format(Protocol):
    """Describes how an image of a certain media type is decoded and then encoded."""

    def decodable_media_type(self) -> str:
        ...

    def decode(self, data: bytes) -> Image.Image:
        ...

    def encode(self, image: Image.Image, fp: BinaryIO) -> None:
        ...

    def encoded_extension(self) -> str:
        ...


def decode_image(data: bytes, formats: list[str] | None = None) -> Image.Image:
    """Decode image bytes with Pillow, optionally restricted to some Pillow formats.

    Raises:
        DecodeError: If Pillow cannot identify or fully read the image
    """
    try:
        img = Image.open(io.BytesIO(data), formats=formats)
        img.load()
    except (OSError, ValueError, Image.DecompressionBombError) as e:
        raise DecodeError(f"Could not decode image: {e}") from e
    return img


def to_jpeg_mode(img: Image.Image) -> Image.Image:
    """Convert an image to a mode the JPEG encoder can write."""
    if img.mode in _JPEG_MODES:
        return img
    if img.mode.startswith("I") or img.mode == "F":
        return img.convert("L")
    return img.convert("RGB")


def encode_jpeg(img: Image.Image, fp: BinaryIO) -> None:
    to_jpeg_mode(img).save(fp, format="JPEG", quality=JPEG_QUALITY)


class JPEGFormat:
    """Decodes ``image/jpeg`` and stores JPEG."""

    def decodable_media_type(self) -> str:
        return "image/jpeg"

    def decode(self, data: bytes) -> Image.Image:
        return decode_image(data, formats=["JPEG"])

    def encode(self, image: Image.Image, fp: BinaryIO) -> None:
        encode_jpeg(image, fp)

    def encoded_extension(self) -> str:
        return "jpg"


class PNGFormat:
    """Decodes ``image/png`` and stores PNG."""

    def decodable_media_type(self) -> str:
        return "image/png"

    def decode(self, data: bytes) -> Image.Image:
        return decode_image(data, formats=["PNG"])

    def encode(self, image: Image.Image, fp: BinaryIO) -> None:
        if image.mode == "CMYK":
            image = image.convert("RGB")
        image.save(fp, format="PNG")

    def encoded_extension(self) -> str:
        return "png"


class PNG2JPEGFormat:
    """Decodes ``image/png`` and stores JPEG."""

    def decodable_media_type(self) -> str:
        return "image/png"

    def decode(self, data: bytes) -> Image.Image:
        return decode_image(data, formats=["PNG"])

    def encode(self, image: Image.Image, fp: BinaryIO) -> None:
        encode_jpeg(image, fp)

    def encoded_extension(self) -> str:
        return "jpg"


# Names usable in configuration files
FORMATS_BY_NAME: dict[str, type] = {
    "jpeg": JPEGFormat,
    "png": PNGFormat,
    "png2jpeg": PNG2JPEGFormat,
}


def format_by_name(name: str) -> Format:
    """Instantiate a built-in format from its configuration name."""
    try:
        return FORMATS_BY_NAME[name.lower()]()
    except KeyError:
        known = ", ".join(sorted(FORMATS_BY_NAME))
        raise ValueError(f"Unknown format {name!r} (known: {known})") from None


class FormatRegistry:
    """Ordered set of formats; the first one decoding a media type wins."""

    def __init__(self, formats: Iterable[Format]):
        self.formats = list(formats)

    def for_media_type(self, media_type: str) -> Format:
        """Select the format for ``media_type``.

        Raises:
            UnsupportedFormatError: If no format decodes the media type
        """
        for fmt in self.formats:
            if fmt.decodable_media_type() == media_type:
                return fmt
        raise UnsupportedFormatError(media_type)

    def media_types(self) -> list[str]:
        """Media types accepted for storing, in registry order, without duplicates."""
        seen: list[str] = []
        for fmt in self.formats:
            media_type = fmt.decodable_media_type()
            if media_type not in seen:
                seen.append(media_type)
        return seen

    def __len__(self) -> int:
        return len(self.formats)

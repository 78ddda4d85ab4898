"""Shared fixtures: recording format/resizer doubles and a temporary store."""

import io
from pathlib import Path

import pytest
from PIL import Image

from imstor import Config, ImageStorage, Size

DATA = b"somedata"
CHECKSUM = "06343430109577305132"
FOLDER = Path("32") / CHECKSUM

SIZES = (
    Size(name="small", width=30, height=30),
    Size(name="large", width=300, height=300),
)


class FakeJPEGFormat:
    """Accepts any bytes as ``image/jpeg`` and writes a marker per image."""

    def __init__(self, image: Image.Image):
        self.image = image
        self.decoded: list[bytes] = []
        self.encoded: list[Image.Image] = []

    def decodable_media_type(self) -> str:
        return "image/jpeg"

    def decode(self, data: bytes) -> Image.Image:
        self.decoded.append(data)
        return self.image

    def encode(self, image: Image.Image, fp) -> None:
        self.encoded.append(image)
        fp.write(f"{image.size[0]}x{image.size[1]}".encode())

    def encoded_extension(self) -> str:
        return "jpg"


class FakePNGFormat(FakeJPEGFormat):
    def decodable_media_type(self) -> str:
        return "image/png"


class RecordingResizer:
    """Thumbnails to a fresh blank image of a size derived from the box."""

    def __init__(self):
        self.calls: list[tuple[int, int]] = []

    def resize(self, width, height, image):
        return Image.new("L", (width, height))

    def thumbnail(self, max_width, max_height, image):
        self.calls.append((max_width, max_height))
        return Image.new("L", (max_width // 10 or 1, max_height // 10 or 1))


@pytest.fixture
def gray_image() -> Image.Image:
    return Image.new("L", (3, 3))


@pytest.fixture
def jpeg_format(gray_image) -> FakeJPEGFormat:
    return FakeJPEGFormat(gray_image)


@pytest.fixture
def resizer() -> RecordingResizer:
    return RecordingResizer()


@pytest.fixture
def config(tmp_path: Path, gray_image, jpeg_format) -> Config:
    return Config(
        root_path=tmp_path,
        sizes=SIZES,
        formats=(FakePNGFormat(gray_image), jpeg_format),
    )


@pytest.fixture
def storage(config: Config, resizer: RecordingResizer) -> ImageStorage:
    return ImageStorage(config, resizer=resizer)


def encode_image(image: Image.Image, fmt: str) -> bytes:
    buffer = io.BytesIO()
    image.save(buffer, format=fmt)
    return buffer.getvalue()

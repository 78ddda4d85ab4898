"""Data models for stored images and their size variants."""

from dataclasses import dataclass

from PIL import Image

ORIGINAL_NAME = "original"


@dataclass(frozen=True)
class Size:
    """A named bounding box a copy of every stored image is made for.

    A width or height of 0 leaves that dimension unbounded.
    """

    name: str
    width: int
    height: int

    def to_dict(self) -> dict:
        return {"name": self.name, "width": self.width, "height": self.height}

    @classmethod
    def from_dict(cls, data: dict) -> "Size":
        return cls(
            name=str(data["name"]),
            width=int(data.get("width", 0)),
            height=int(data.get("height", 0)),
        )


@dataclass
class ImageFile:
    """An in-memory image waiting to be written as ``<name>.<ext>``."""

    name: str
    image: Image.Image

"""Storage engine - writes and finds images on the filesystem."""

from .engine import ImageStorage

__all__ = ["ImageStorage"]

"""Resizing of images into size variants."""

from typing import Protocol, runtime_checkable

from PIL import Image


@runtime_checkable
class Resizer(Protocol):
    """Can resize an image into given dimensions."""

    def resize(self, width: int, height: int, image: Image.Image) -> Image.Image:
        """Scale an image to a new width and height.

        If one of width or height is 0, it is calculated so that the aspect
        ratio is that of the originating image.
        """
        ...

    def thumbnail(self, max_width: int, max_height: int, image: Image.Image) -> Image.Image:
        """Downscale an image to fit max width and height, preserving aspect ratio.

        Return the original image, without processing, if it already fits.
        """
        ...


class PillowResizer:
    """Resizer backed by Pillow's LANCZOS resampling."""

    def __init__(self, resample: Image.Resampling = Image.Resampling.LANCZOS):
        self.resample = resample

    def resize(self, width: int, height: int, image: Image.Image) -> Image.Image:
        orig_width, orig_height = image.size
        if width == 0 and height == 0:
            return image
        if width == 0:
            width = max(1, round(orig_width * height / orig_height))
        elif height == 0:
            height = max(1, round(orig_height * width / orig_width))
        return image.resize((width, height), self.resample)

    def thumbnail(self, max_width: int, max_height: int, image: Image.Image) -> Image.Image:
        width, height = image.size
        fits_width = max_width == 0 or width <= max_width
        fits_height = max_height == 0 or height <= max_height

        # No downscaling needed if within limits
        if fits_width and fits_height:
            return image

        scales = []
        if max_width:
            scales.append(max_width / width)
        if max_height:
            scales.append(max_height / height)
        scale = min(scales)
        new_width = max(1, int(width * scale))
        new_height = max(1, int(height * scale))
        return image.resize((new_width, new_height), self.resample)


DEFAULT_RESIZER = PillowResizer()

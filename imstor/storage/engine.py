"""ImageStorage: stores images and their size variants by content checksum.

An image and its copies are stored in a directory named after the
(zero-prefixed, decimal) CRC-64 checksum of the original bytes. Storing is a
sequence of independent exclusive-create file writes, so storing the same
image again only adds variants that are missing and never rewrites a file.
"""

import io
import logging
import os
from pathlib import Path
from typing import Iterable, Optional

from PIL import Image

from ..config import Config
from ..core.checksum import compute_checksum
from ..core.dataurl import decode_data_url
from ..core.layout import PathResolver, structured_path
from ..core.models import ORIGINAL_NAME, ImageFile, Size
from ..errors import DecodeError, EncodeError, NotFoundError, StorageIOError, WriteError
from ..imaging.formats import Format, FormatRegistry, decode_image
from ..imaging.resizer import DEFAULT_RESIZER, Resizer

logger = logging.getLogger(__name__)

# rw-r-----
FILE_PERMISSION = 0o640
# rwxr-x---
DIR_PERMISSION = 0o750


class ImageStorage:
    """Storage engine used to store images and retrieve their paths."""

    def __init__(self, config: Config, resizer: Optional[Resizer] = None):
        """Initialize the engine.

        Args:
            config: Root path, sizes and formats to store with
            resizer: Produces the size variants. Defaults to a Pillow LANCZOS resizer.
        """
        self.config = config
        self.resizer = resizer if resizer is not None else DEFAULT_RESIZER
        self.registry = FormatRegistry(config.formats)
        self.paths = PathResolver(config.root_path)

    @property
    def root_path(self) -> Path:
        return self.config.root_path

    # ------------------------------------------------------------------
    # Checksums
    # ------------------------------------------------------------------

    def checksum(self, data: bytes) -> str:
        """Return the checksum ``data`` would be stored under."""
        return compute_checksum(data)

    def checksum_data_url(self, url: str) -> str:
        """Return the checksum of the payload of a data URL."""
        return self.checksum(decode_data_url(url).data)

    # ------------------------------------------------------------------
    # Storing
    # ------------------------------------------------------------------

    def store_data_url(self, url: str) -> str:
        """Store the image embedded in a data URL. Returns its checksum."""
        data_url = decode_data_url(url)
        return self.store(data_url.media_type, data_url.data)

    def store(self, media_type: str, data: bytes) -> str:
        """Store an image and its configured size variants.

        Files already present for the checksum are left untouched, so this
        can be called again to add variants for newly configured sizes.

        Args:
            media_type: Media type the data is encoded in, e.g. ``image/png``
            data: Raw image bytes

        Returns:
            The checksum the image is stored under

        Raises:
            UnsupportedFormatError: If no configured format decodes media_type
            DecodeError: If the data cannot be decoded
            StorageIOError: If the object directory cannot be created
            WriteError: If writing a file fails (files written before stay)
            EncodeError: If encoding a file fails (files written before stay)
        """
        checksum = self.checksum(data)
        fmt = self.registry.for_media_type(media_type)
        self._store_in_format(data, checksum, fmt)
        return checksum

    def _store_in_format(self, data: bytes, checksum: str, fmt: Format) -> None:
        image = fmt.decode(data)
        copies = self._create_copies(image, self.config.sizes)
        folder = self.root_path / structured_path(checksum)
        self._create_folder(folder)

        image_files = [ImageFile(name=ORIGINAL_NAME, image=image)] + copies
        try:
            written = self._write_image_files(folder, image_files, fmt)
        except (WriteError, EncodeError):
            logger.warning(
                "Writing an image failed, but a new folder and some files may have "
                "already been created in %s. Please check your filesystem for clutter.",
                folder,
            )
            raise
        logger.debug("Stored %s: %d new file(s) in %s", checksum, written, folder)

    def _create_copies(self, image: Image.Image, sizes: Iterable[Size]) -> list[ImageFile]:
        return [
            ImageFile(name=size.name, image=self.resizer.thumbnail(size.width, size.height, image))
            for size in sizes
        ]

    def _create_folder(self, folder: Path) -> None:
        try:
            folder.parent.mkdir(mode=DIR_PERMISSION, parents=True, exist_ok=True)
            folder.mkdir(mode=DIR_PERMISSION, exist_ok=True)
        except OSError as e:
            raise StorageIOError(str(folder), e.strerror or str(e)) from e

    def _write_image_files(self, folder: Path, image_files: list[ImageFile], fmt: Format) -> int:
        """Write each file that does not exist yet. Returns the number written."""
        written = 0
        for image_file in image_files:
            path = folder / f"{image_file.name}.{fmt.encoded_extension()}"
            if path.exists():
                logger.debug("Skipping existing file %s", path)
                continue

            # Encode before creating the file so a rejected image leaves nothing behind
            buffer = io.BytesIO()
            try:
                fmt.encode(image_file.image, buffer)
            except Exception as e:
                raise EncodeError(str(path), str(e)) from e

            try:
                fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, FILE_PERMISSION)
            except FileExistsError:
                logger.debug("Skipping file created concurrently %s", path)
                continue
            except OSError as e:
                raise WriteError(str(path), e.strerror or str(e)) from e
            try:
                with os.fdopen(fd, "wb") as f:
                    f.write(buffer.getvalue())
            except OSError as e:
                raise WriteError(str(path), e.strerror or str(e)) from e
            written += 1
        return written

    # ------------------------------------------------------------------
    # Retrieving
    # ------------------------------------------------------------------

    def path_for(self, checksum: str) -> str:
        """Root-relative path of the original image stored under ``checksum``."""
        return self.path_for_size(checksum, ORIGINAL_NAME)

    def path_for_size(self, checksum: str, size: str) -> str:
        """Root-relative path of the ``size`` variant stored under ``checksum``.

        Raises:
            NotFoundError: If the checksum or the size is not stored
        """
        return self.paths.resolve_variant_path(checksum, size)

    def has_sizes_for_checksum(self, checksum: str, sizes: Iterable[str]) -> bool:
        """Check whether all ``sizes`` are stored for ``checksum``."""
        return self.paths.has_variants(checksum, sizes)

    def get_size(self, checksum: str, size: str) -> Image.Image:
        """Decode the ``size`` variant stored under ``checksum``.

        The file is decoded by content, so any format Pillow reads works
        regardless of which Format wrote it.

        Raises:
            NotFoundError: If the checksum or the size is not stored
            DecodeError: If the stored file cannot be decoded
        """
        rel_path = self.path_for_size(checksum, size)
        abs_path = self.root_path / rel_path
        try:
            data = abs_path.read_bytes()
        except FileNotFoundError:
            raise NotFoundError(checksum, size) from None
        except OSError as e:
            raise StorageIOError(str(abs_path), e.strerror or str(e)) from e
        try:
            return decode_image(data)
        except DecodeError as e:
            raise DecodeError(f"Could not decode {rel_path}: {e}") from e

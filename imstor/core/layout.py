"""Checksum -> directory layout and lookups within a stored object.

Objects live two levels below the root: the last two characters of the
checksum name the first level, the checksum itself the second::

    <root>/15/08446744073709551615/original.jpg
    <root>/15/08446744073709551615/small.jpg
"""

import os
from pathlib import Path
from typing import Iterable, Optional

from ..errors import NotFoundError, StorageIOError


def structured_path(checksum: str) -> str:
    """Return ``<last two chars>/<checksum>`` joined with the platform separator."""
    if len(checksum) < 2:
        raise ValueError(f"Checksum too short for a structured path: {checksum!r}")
    return os.path.join(checksum[-2:], checksum)


def has_name_without_extension(file_name: str, name: str) -> bool:
    """Check whether ``file_name`` minus its last extension is exactly ``name``."""
    stem, _ext = os.path.splitext(file_name)
    return stem == name


class PathResolver:
    """Locates stored objects and their variant files under a root directory."""

    def __init__(self, root: str | Path):
        self.root = Path(root)

    def object_dir(self, checksum: str) -> Optional[Path]:
        """Directory of an object under the root, or None if the checksum cannot name one.

        Checksums that are too short, contain path separators or would step
        out of the root (e.g. ``".."``) do not name an object. The check is
        lexical, so symlinked shard directories inside the root are followed.
        """
        if len(checksum) < 2 or checksum[-2:] == "..":
            return None
        separators = {"/", "\0", os.sep, os.altsep} - {None}
        if any(sep in checksum for sep in separators):
            return None
        return self.root / structured_path(checksum)

    def _list_files(self, checksum: str) -> Optional[list[str]]:
        """Sorted names of the regular entries of an object directory.

        Returns None when the object does not exist.
        """
        directory = self.object_dir(checksum)
        if directory is None:
            return None
        try:
            with os.scandir(directory) as entries:
                return sorted(e.name for e in entries if not e.is_dir())
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StorageIOError(str(directory), e.strerror or str(e)) from e

    def resolve_variant_path(self, checksum: str, name: str) -> str:
        """Return the root-relative path of the ``name`` file of an object.

        Raises:
            NotFoundError: If the object or the named file does not exist
            StorageIOError: If the object directory cannot be listed
        """
        files = self._list_files(checksum)
        if files is not None:
            for file_name in files:
                if has_name_without_extension(file_name, name):
                    return os.path.join(structured_path(checksum), file_name)
        raise NotFoundError(checksum, name)

    def has_variants(self, checksum: str, names: Iterable[str]) -> bool:
        """Check that every name in ``names`` is stored for ``checksum``.

        A checksum that was never stored is answered with False, not an error.
        """
        files = self._list_files(checksum)
        if files is None:
            return False
        for name in names:
            if not any(has_name_without_extension(f, name) for f in files):
                return False
        return True

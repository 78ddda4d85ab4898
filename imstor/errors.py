"""Typed errors for imstor."""


class ImstorError(Exception):
    """Base exception for all imstor errors."""


class ConfigError(ImstorError):
    """Raised when a storage configuration is invalid or incomplete."""


class UnsupportedFormatError(ImstorError):
    """Raised when no configured Format decodes the requested media type."""

    def __init__(self, media_type: str) -> None:
        self.media_type = media_type
        super().__init__(f"Not a supported format: {media_type}")


class DecodeError(ImstorError):
    """Raised when image bytes cannot be decoded."""


class EncodeError(ImstorError):
    """Raised when an image cannot be encoded into its target file."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        super().__init__(f"Could not encode {path}: {reason}")


class InvalidDataURLError(ImstorError):
    """Raised when a data URL is malformed."""


class NotFoundError(ImstorError):
    """Raised when a checksum or one of its variants is not stored."""

    def __init__(self, checksum: str, name: str) -> None:
        self.checksum = checksum
        self.name = name
        super().__init__(f"File not found: {name!r} for checksum {checksum!r}")


class StorageIOError(ImstorError):
    """Raised when the filesystem refuses an operation (other than not-found)."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        super().__init__(f"I/O error at {path}: {reason}")


class WriteError(StorageIOError):
    """Raised when writing one image file of a stored object fails."""

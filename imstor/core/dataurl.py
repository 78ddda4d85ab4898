"""Decoding of RFC 2397 ``data:`` URLs."""

import base64
import binascii
from dataclasses import dataclass, field
from urllib.parse import unquote, unquote_to_bytes

from ..errors import InvalidDataURLError

DEFAULT_MEDIA_TYPE = "text/plain"
DEFAULT_CHARSET = "US-ASCII"


@dataclass
class DataURL:
    """A decoded data URL."""

    media_type: str
    data: bytes
    params: dict[str, str] = field(default_factory=dict)
    base64: bool = False


def _parse_media_type(header: str) -> tuple[str, dict[str, str], bool]:
    parts = header.split(";")
    is_base64 = False
    if parts[-1].strip().lower() == "base64":
        is_base64 = True
        parts = parts[:-1]

    media_type = parts[0].strip().lower()
    params: dict[str, str] = {}
    if not media_type:
        media_type = DEFAULT_MEDIA_TYPE
        params["charset"] = DEFAULT_CHARSET
    else:
        major, sep, minor = media_type.partition("/")
        if not sep or not major or not minor or "/" in minor:
            raise InvalidDataURLError(f"Invalid media type: {parts[0]!r}")

    for param in parts[1:]:
        key, sep, value = param.partition("=")
        if not sep or not key.strip():
            raise InvalidDataURLError(f"Invalid media type parameter: {param!r}")
        params[key.strip().lower()] = unquote(value.strip())

    return media_type, params, is_base64


def decode_data_url(url: str) -> DataURL:
    """Decode a data URL such as ``data:image/png;base64,iVBORw0...``.

    Args:
        url: The full data URL string

    Returns:
        DataURL holding the media type, its parameters and the payload bytes

    Raises:
        InvalidDataURLError: If the URL is not a well-formed data URL
    """
    url = url.strip()
    scheme, sep, rest = url.partition(":")
    if not sep or scheme.lower() != "data":
        raise InvalidDataURLError("Missing 'data:' scheme")

    header, sep, payload = rest.partition(",")
    if not sep:
        raise InvalidDataURLError("Missing ',' between header and data")

    media_type, params, is_base64 = _parse_media_type(header)

    if is_base64:
        try:
            data = base64.b64decode(unquote(payload), validate=True)
        except (binascii.Error, ValueError) as e:
            raise InvalidDataURLError(f"Invalid base64 data: {e}") from e
    else:
        data = unquote_to_bytes(payload)

    return DataURL(media_type=media_type, data=data, params=params, base64=is_base64)

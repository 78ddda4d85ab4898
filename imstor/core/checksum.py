"""Content checksums: zero-padded decimal CRC-64 (ISO polynomial)."""

# Reversed representation of x^64 + x^4 + x^3 + x + 1
ISO_POLYNOMIAL = 0xD800000000000000
CHECKSUM_WIDTH = 20

_MASK = 0xFFFFFFFFFFFFFFFF


def _make_table(poly: int) -> tuple[int, ...]:
    table = []
    for i in range(256):
        crc = i
        for _ in range(8):
            if crc & 1:
                crc = (crc >> 1) ^ poly
            else:
                crc >>= 1
        table.append(crc)
    return tuple(table)


_ISO_TABLE = _make_table(ISO_POLYNOMIAL)


def crc64_iso(data: bytes) -> int:
    """Compute the CRC-64/ISO of ``data``.

    Both the initial register and the final value are inverted, so the
    result matches Go's ``crc64.Checksum(data, crc64.MakeTable(crc64.ISO))``.
    """
    crc = _MASK
    table = _ISO_TABLE
    for byte in data:
        crc = table[(crc ^ byte) & 0xFF] ^ (crc >> 8)
    return crc ^ _MASK


def compute_checksum(data: bytes) -> str:
    """Return the 20-digit, zero-padded decimal checksum of ``data``."""
    return f"{crc64_iso(data):0{CHECKSUM_WIDTH}d}"

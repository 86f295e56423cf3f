"""
Identity tags for cyclic references and UUID detection.

A cyclic node is tagged with a short token derived from its identity, e.g. `#q1Jv3Kx0aBc`,
colored with one entry of the pointer gamut. The back-reference emitted where recursion was
cut off carries the same token after an arrow, `→#q1Jv3Kx0aBc`, so both ends of a cycle
can be matched visually. Tags are stable within a process run only (ids are memory addresses).

UUIDs, as 16 raw bytes or as canonical 36-character text, are colored by the same
hash-to-gamut scheme.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import base64
import re

# Local ----------------------------------------------------------------------------------------------------------------
from .styles import Styles, colorize

# Constants ------------------------------------------------------------------------------------------------------------

_FNV_OFFSET = 0xCBF29CE484222325
_FNV_PRIME = 0x100000001B3
_MASK_64 = 0xFFFFFFFFFFFFFFFF

_UUID_TEXT = re.compile(r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}")

BACK_REFERENCE_ARROW = "→"
TAG_SEPARATOR = "#"


# Methods --------------------------------------------------------------------------------------------------------------

def fnv1a_64(data: bytes) -> int:
    """
    64-bit FNV-1a hash of data.

    Examples:
        >>> hex(fnv1a_64(b""))
        '0xcbf29ce484222325'
        >>> hex(fnv1a_64(b"a"))
        '0xaf63dc4c8601ec8c'
    """
    h = _FNV_OFFSET
    for byte in data:
        h ^= byte
        h = (h * _FNV_PRIME) & _MASK_64
    return h


def hash_identity(identity: int) -> int:
    """Hash an object identity (as returned by id()) packed as 8 little-endian bytes."""
    return fnv1a_64((identity & _MASK_64).to_bytes(8, "little"))


def encode_hash(hashed: int) -> str:
    """Encode a 64-bit hash as unpadded standard base64 (11 characters)."""
    return base64.b64encode(hashed.to_bytes(8, "little")).decode("ascii").rstrip("=")


def identity_tag(identity: int, styles: Styles, colors: bool) -> str:
    """Tag appended to a node that was found on a cycle, e.g. `#q1Jv3Kx0aBc`."""
    hashed = hash_identity(identity)
    return colorize(TAG_SEPARATOR, styles.comment, colors) + colorize(encode_hash(hashed),
                                                                      styles.gamut_style(hashed), colors)


def back_reference(identity: int, styles: Styles, colors: bool) -> str:
    """Token emitted instead of descending into an identity already on the recursion stack."""
    return colorize(BACK_REFERENCE_ARROW, styles.comment, colors) + identity_tag(identity, styles, colors)


def is_uuid_bytes(data: bytes | bytearray) -> bool:
    """
    Check whether 16 raw bytes carry an RFC 4122 UUID (version 1-5, variant 10).

    Examples:
        >>> is_uuid_bytes(bytes.fromhex("6ba7b8109dad411fadc8000c2948e922"))
        True
        >>> is_uuid_bytes(bytes(16))
        False
    """
    if len(data) != 16:
        return False

    version = (data[6] >> 4) & 0x0F
    if version < 1 or version > 5:
        return False

    variant = (data[8] >> 6) & 0x03
    return variant == 0b10


def is_uuid_string(text: str) -> bool:
    """Check for the canonical 8-4-4-4-12 hex layout, either case."""
    return len(text) == 36 and _UUID_TEXT.fullmatch(text) is not None


def uuid_text(data: bytes | bytearray) -> str:
    """Canonical lowercase text of 16 UUID bytes."""
    h = bytes(data).hex()
    return f"{h[0:8]}-{h[8:12]}-{h[12:16]}-{h[16:20]}-{h[20:32]}"


def format_uuid_bytes(data: bytes | bytearray, styles: Styles, colors: bool) -> str:
    """Render UUID bytes as canonical text, colored by the hash of the raw bytes."""
    return colorize(uuid_text(data), styles.gamut_style(fnv1a_64(bytes(data))), colors)


def format_uuid_string(text: str, styles: Styles, colors: bool) -> str:
    """Render UUID text unquoted, colored by the hash of its bytes."""
    return colorize(text, styles.gamut_style(fnv1a_64(text.encode("utf-8"))), colors)

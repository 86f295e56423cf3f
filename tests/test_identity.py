#
# PRETTYVAL - Identity Tests
#

# Standard library -----------------------------------------------------------------------------------------------------
import base64

# Third party ----------------------------------------------------------------------------------------------------------
import pytest
from rich.text import Text

# Local ----------------------------------------------------------------------------------------------------------------
from prettyval.identity import (
    back_reference, encode_hash, fnv1a_64, format_uuid_bytes, format_uuid_string, hash_identity,
    identity_tag, is_uuid_bytes, is_uuid_string, uuid_text,
)
from prettyval.styles import POINTER_GAMUT, Styles

UUID_HEX = "6ba7b8109dad411fadc8000c2948e922"
UUID_TEXT = "6ba7b810-9dad-411f-adc8-000c2948e922"


# Local Classes & Methods ----------------------------------------------------------------------------------------------

def with_byte(data: bytes, index: int, value: int) -> bytes:
    buf = bytearray(data)
    buf[index] = value
    return bytes(buf)


# Tests ----------------------------------------------------------------------------------------------------------------

class TestHashing:
    @pytest.mark.parametrize(
        "data, expected",
        [
            pytest.param(b"", 0xCBF29CE484222325, id="empty"),
            pytest.param(b"a", 0xAF63DC4C8601EC8C, id="a"),
            pytest.param(b"foobar", 0x85944171F73967E8, id="foobar"),
        ],
    )
    def test_fnv1a_64(self, data, expected):
        """Match the published FNV-1a 64-bit test vectors."""
        assert fnv1a_64(data) == expected

    def test_hash_identity_little_endian(self):
        assert hash_identity(0x0102) == fnv1a_64(bytes([0x02, 0x01, 0, 0, 0, 0, 0, 0]))

    def test_encode_hash_unpadded(self):
        encoded = encode_hash(0xAF63DC4C8601EC8C)
        assert len(encoded) == 11
        assert "=" not in encoded
        assert base64.b64decode(encoded + "=") == (0xAF63DC4C8601EC8C).to_bytes(8, "little")


class TestTags:
    def test_tag_plain(self):
        tag = identity_tag(12345, Styles(), colors=False)
        assert tag == "#" + encode_hash(hash_identity(12345))

    def test_back_reference_plain(self):
        assert back_reference(12345, Styles(), colors=False) == "→" + identity_tag(12345, Styles(), False)

    def test_tag_deterministic(self):
        assert identity_tag(999, Styles(), True) == identity_tag(999, Styles(), True)

    def test_tag_color_from_gamut(self):
        """Color the encoded hash with gamut entry hash % len(gamut)."""
        hashed = hash_identity(4242)
        styles = Styles()
        expected = POINTER_GAMUT[hashed % len(POINTER_GAMUT)]
        assert styles.gamut_style(hashed) == expected
        colored = identity_tag(4242, styles, True)
        assert Text.from_ansi(colored).plain == "#" + encode_hash(hashed)

    def test_single_color_gamut(self):
        styles = Styles(pointer_gamut=("red",))
        assert all(styles.gamut_style(h) == styles.pointer_gamut[0] for h in range(20))


class TestUUID:
    @pytest.mark.parametrize(
        "data, expected",
        [
            pytest.param(bytes.fromhex(UUID_HEX), True, id="version-4"),
            pytest.param(with_byte(bytes.fromhex(UUID_HEX), 6, 0x11), True, id="version-1"),
            pytest.param(with_byte(bytes.fromhex(UUID_HEX), 6, 0x51), True, id="version-5"),
            pytest.param(with_byte(bytes.fromhex(UUID_HEX), 6, 0x01), False, id="version-0"),
            pytest.param(with_byte(bytes.fromhex(UUID_HEX), 6, 0x61), False, id="version-6"),
            pytest.param(with_byte(bytes.fromhex(UUID_HEX), 8, 0x2D), False, id="variant-ncs"),
            pytest.param(with_byte(bytes.fromhex(UUID_HEX), 8, 0xED), False, id="variant-microsoft"),
            pytest.param(bytes(16), False, id="all-zero"),
            pytest.param(bytes.fromhex(UUID_HEX)[:15], False, id="too-short"),
            pytest.param(bytes.fromhex(UUID_HEX) + b"\x00", False, id="too-long"),
        ],
    )
    def test_is_uuid_bytes(self, data, expected):
        assert is_uuid_bytes(data) is expected

    @pytest.mark.parametrize(
        "text, expected",
        [
            pytest.param(UUID_TEXT, True, id="lower"),
            pytest.param(UUID_TEXT.upper(), True, id="upper"),
            pytest.param(UUID_TEXT.replace("-", ""), False, id="no-dashes"),
            pytest.param(UUID_TEXT[:-1] + "g", False, id="non-hex"),
            pytest.param("{" + UUID_TEXT[1:-1] + "}", False, id="braces"),
            pytest.param(UUID_TEXT + "\n", False, id="trailing-newline"),
        ],
    )
    def test_is_uuid_string(self, text, expected):
        assert is_uuid_string(text) is expected

    def test_uuid_text(self):
        assert uuid_text(bytes.fromhex(UUID_HEX)) == UUID_TEXT

    def test_format_uuid_plain(self):
        assert format_uuid_bytes(bytes.fromhex(UUID_HEX), Styles(), False) == UUID_TEXT
        assert format_uuid_string(UUID_TEXT.upper(), Styles(), False) == UUID_TEXT.upper()

    def test_format_uuid_colored(self):
        out = format_uuid_string(UUID_TEXT, Styles(), True)
        assert "\x1b[" in out
        assert Text.from_ansi(out).plain == UUID_TEXT

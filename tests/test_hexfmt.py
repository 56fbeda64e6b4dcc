"""Tests for the raw extension hex formatter."""

from certinspect.extensions.hexfmt import bytes_to_hex


def test_empty():
    assert bytes_to_hex(b"") == ""


def test_single_byte_has_no_trailing_space():
    assert bytes_to_hex(b"\xab") == "ab"


def test_lowercase_two_digits_per_byte():
    result = bytes_to_hex(bytes([0x00, 0x0A, 0xFF]))
    assert result.replace(" ", "") == "000aff"


def test_spacing_follows_output_length():
    # The space after the first byte makes the running length odd,
    # so no further separators are inserted.
    assert bytes_to_hex(bytes([0x00, 0x01, 0x02])) == "00 0102"


def test_twenty_bytes():
    result = bytes_to_hex(b"\xff" * 20)
    assert result == "ff " + "ff" * 19
    assert "\n" not in result


def test_extension_value_rendering():
    # OCTET STRING wrapping BasicConstraints(cA=TRUE)
    assert bytes_to_hex(bytes.fromhex("040530030101ff")) == "04 0530030101ff"

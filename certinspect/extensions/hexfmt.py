"""Hex rendering of raw extension bytes for the report."""

HEX_CHARS_PER_LINE = 32
HEX_SPACING = 2
LINE_BREAK = "\n    "


def bytes_to_hex(data: bytes) -> str:
    """
    Render bytes as lowercase hex for display.

    Separators are placed from the running length of the output, not from the
    byte index: after each byte, a line break (plus a 4-space indent) goes in
    when the output length is a multiple of 32, otherwise a space when it is a
    multiple of 2. Because a separator can make the length odd, the grouping
    is uneven; the output is kept that way for compatibility with existing
    reports.

    Args:
        data: Raw bytes (may be empty)

    Returns:
        Hex string with leading/trailing whitespace trimmed
    """
    result = []
    length = 0
    for b in data:
        chunk = f"{b:02x}"
        result.append(chunk)
        length += len(chunk)
        if length % HEX_CHARS_PER_LINE == 0:
            result.append(LINE_BREAK)
            length += len(LINE_BREAK)
        elif length % HEX_SPACING == 0:
            result.append(" ")
            length += 1
    return "".join(result).strip()

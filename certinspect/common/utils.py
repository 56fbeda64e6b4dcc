"""Helper functions for console output."""

SEPARATOR_LENGTH = 80


def separator(char: str = "=", length: int = SEPARATOR_LENGTH) -> str:
    """Visual separator line for console output."""
    return char * length

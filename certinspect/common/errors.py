"""Exception hierarchy for keystore loading and extension decoding."""


class InspectError(Exception):
    """Base exception for certificate inspection errors."""
    pass


class LoadError(InspectError):
    """Keystore cannot be opened (missing file, wrong password, bad format)."""
    pass


class NotX509Error(InspectError):
    """An aliased keystore entry is not an X.509 certificate."""
    pass


class ExtensionDecodeError(InspectError):
    """Structured extension data (EKU, SAN, IAN) is malformed."""
    pass

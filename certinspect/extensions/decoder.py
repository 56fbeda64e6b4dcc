"""Decode Basic Constraints, Key Usage, EKU and SAN/IAN from a certificate view."""

from typing import Iterable, List, Optional, Sequence, Union

from certinspect.common.errors import ExtensionDecodeError
from certinspect.common.models import (
    ALT_NAME_TYPES,
    BasicConstraintsInfo,
    DecodedExtensions,
    DecodeFailure,
    ExtensionEntry,
    UnknownAltName,
)
from certinspect.extensions import oids
from certinspect.extensions.view import MAX_PATH_LENGTH, NOT_A_CA


KEY_USAGE_COUNT = len(oids.KEY_USAGE_NAMES)
UNLIMITED = "unlimited"


def decode_basic_constraints(value: int) -> BasicConstraintsInfo:
    """
    Interpret the platform's single-integer Basic Constraints value.

    Args:
        value: -1 for "not a CA", otherwise the path length
            (MAX_PATH_LENGTH when unconstrained)

    Returns:
        Decoded basic constraints
    """
    if value == NOT_A_CA:
        return BasicConstraintsInfo(is_ca=False)
    if value == MAX_PATH_LENGTH:
        return BasicConstraintsInfo(is_ca=True, path_length=UNLIMITED)
    return BasicConstraintsInfo(is_ca=True, path_length=value)


def decode_key_usage(bits: Optional[Sequence[bool]]) -> Optional[List[bool]]:
    """Keep the first nine Key Usage positions; None stays None."""
    if bits is None:
        return None
    return [bool(bit) for bit in bits[:KEY_USAGE_COUNT]]


def _display_value(value) -> str:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).hex()
    return str(value)


def alt_name_from_pair(pair: Sequence):
    """
    Build a typed alternative name entry from a loosely typed (tag, value) pair.

    Args:
        pair: Sequence whose first element is the numeric tag and whose
            second element is the printable value

    Returns:
        Alternative name variant, or None if the pair has fewer than two elements
    """
    if len(pair) < 2:
        return None
    tag = int(pair[0])
    value = _display_value(pair[1])
    cls = ALT_NAME_TYPES.get(tag)
    if cls is None:
        return UnknownAltName(tag=tag, raw=value)
    return cls(value=value)


def decode_alt_names(pairs: Optional[Iterable[Sequence]]) -> Optional[list]:
    """Convert SAN/IAN pairs to typed entries, skipping short pairs."""
    if not pairs:
        return None
    entries = []
    for pair in pairs:
        entry = alt_name_from_pair(pair)
        if entry is not None:
            entries.append(entry)
    return entries


def _decode_extended_key_usage(cert) -> Optional[Union[List[str], DecodeFailure]]:
    try:
        usages = cert.extended_key_usage()
    except (ExtensionDecodeError, ValueError) as e:
        return DecodeFailure(message=str(e))
    if not usages:
        return None
    return [str(oid) for oid in usages]


def _decode_alt_name_field(accessor) -> Optional[Union[list, DecodeFailure]]:
    try:
        return decode_alt_names(accessor())
    except (ExtensionDecodeError, ValueError, TypeError) as e:
        return DecodeFailure(message=str(e))


def decode_extensions(cert) -> DecodedExtensions:
    """
    Decode the structured extensions of a certificate.

    Every field is decoded independently: a malformed EKU, SAN or IAN is
    recorded as a DecodeFailure on that field only.

    Args:
        cert: Certificate view (see X509CertificateView)

    Returns:
        Decoded extensions
    """
    return DecodedExtensions(
        basic_constraints=decode_basic_constraints(cert.basic_constraints()),
        key_usage=decode_key_usage(cert.key_usage()),
        extended_key_usage=_decode_extended_key_usage(cert),
        subject_alt_names=_decode_alt_name_field(cert.subject_alternative_names),
        issuer_alt_names=_decode_alt_name_field(cert.issuer_alternative_names),
    )


def extension_entries(cert, critical: bool) -> List[ExtensionEntry]:
    """
    List the critical (or non-critical) extensions with their raw bytes.

    OIDs are sorted lexicographically so the dump is deterministic.
    """
    oid_set = cert.critical_extension_oids if critical else cert.non_critical_extension_oids
    entries = []
    for oid in sorted(oid_set or ()):
        entries.append(ExtensionEntry(
            oid=oid,
            name=oids.extension_name(oid),
            critical=critical,
            raw=cert.extension_value(oid),
        ))
    return entries

"""Render a certificate and its decoded extensions as report lines."""

from typing import List, Optional

from certinspect.common.models import DecodedExtensions, DecodeFailure, ExtensionEntry
from certinspect.extensions import oids
from certinspect.extensions.decoder import decode_extensions, extension_entries
from certinspect.extensions.hexfmt import bytes_to_hex
from certinspect.extensions.view import CERTIFICATE_V3


COMMON_HEADER = "--- Common Extensions (Parsed) ---"
V3_HEADER = "--- X.509 v3 Extensions ---"
NOT_V3_LINE = "This is not a v3 certificate. No extensions available."
NULL_CERT_LINE = "Error: Certificate is null"


def _bool_text(flag: bool) -> str:
    return "true" if flag else "false"


def render_header(cert, verbose: bool = False) -> List[str]:
    """Subject, issuer and serial; validity, version and algorithm when verbose."""
    lines = [
        f"Subject: {cert.subject}",
        f"Issuer: {cert.issuer}",
        f"Serial Number: {cert.serial_number}",
    ]
    if verbose:
        lines.extend([
            f"Valid From: {cert.not_before}",
            f"Valid Until: {cert.not_after}",
            f"Version: {cert.version}",
            f"Signature Algorithm: {cert.signature_algorithm}",
        ])
    return lines


def render_extension_entry(entry: ExtensionEntry) -> List[str]:
    """One block of the critical/non-critical extension dump."""
    raw = entry.raw or b""
    lines = [
        f"  {entry.name} ({entry.oid})",
        f"    Critical: {_bool_text(entry.critical)}",
        f"    Length: {len(raw)} bytes",
    ]
    if raw:
        lines.append(f"    Raw Value: {bytes_to_hex(raw)}")
    return lines


def _render_alt_names(title: str, names) -> List[str]:
    if names is None:
        return []
    if isinstance(names, DecodeFailure):
        return [f"{title}: Error parsing - {names.message}"]
    lines = [f"{title}:"]
    for entry in names:
        lines.append(f"  {oids.san_type_name(entry.tag)}: {entry.value}")
    return lines


def render_common_extensions(decoded: Optional[DecodedExtensions]) -> List[str]:
    """
    Render the parsed common extensions section.

    Args:
        decoded: Decoded extensions, or None when there is no certificate

    Returns:
        Report lines, starting with the section header
    """
    lines = [COMMON_HEADER]
    if decoded is None:
        lines.append(NULL_CERT_LINE)
        return lines

    # Basic Constraints
    bc = decoded.basic_constraints
    if bc.is_ca:
        lines.append("Basic Constraints:")
        lines.append("  CA: true")
        lines.append(f"  Path Length: {bc.path_length}")
    else:
        lines.append("Basic Constraints: CA: false")

    # Key Usage
    if decoded.key_usage is not None:
        lines.append("Key Usage:")
        for index, flag in enumerate(decoded.key_usage):
            if flag:
                lines.append(f"  {oids.key_usage_name(index)}")

    # Extended Key Usage
    eku = decoded.extended_key_usage
    if isinstance(eku, DecodeFailure):
        lines.append(f"Extended Key Usage: Error parsing - {eku.message}")
    elif eku:
        lines.append("Extended Key Usage:")
        for oid in eku:
            lines.append(f"  {oids.extended_key_usage_name(oid)} ({oid})")

    lines.extend(_render_alt_names("Subject Alternative Names", decoded.subject_alt_names))
    lines.extend(_render_alt_names("Issuer Alternative Names", decoded.issuer_alt_names))
    return lines


def inspect_common_extensions(cert) -> List[str]:
    """Decode and render only the common extensions section; cert may be None."""
    if cert is None:
        return render_common_extensions(None)
    return render_common_extensions(decode_extensions(cert))


def render_report(cert, decoded: Optional[DecodedExtensions] = None, verbose: bool = False) -> List[str]:
    """
    Render the full inspection report for one certificate.

    Sections, in order: header, critical extensions, non-critical extensions,
    common extensions. Certificates older than v3 stop after the header.

    Args:
        cert: Certificate view, or None
        decoded: Pre-computed decoded extensions (decoded here if omitted)
        verbose: Include validity, version and signature algorithm

    Returns:
        Report lines
    """
    if cert is None:
        return render_common_extensions(None)

    lines = render_header(cert, verbose=verbose)

    if cert.version < CERTIFICATE_V3:
        lines.extend(["", NOT_V3_LINE])
        return lines

    lines.extend(["", V3_HEADER])

    critical = extension_entries(cert, critical=True)
    if critical:
        lines.extend(["", "Critical Extensions:"])
        for entry in critical:
            lines.extend(render_extension_entry(entry))

    non_critical = extension_entries(cert, critical=False)
    if non_critical:
        lines.extend(["", "Non-Critical Extensions:"])
        for entry in non_critical:
            lines.extend(render_extension_entry(entry))

    if decoded is None:
        decoded = decode_extensions(cert)
    lines.append("")
    lines.extend(render_common_extensions(decoded))
    return lines

"""Walk keystore aliases and emit an extension report per certificate."""

from pathlib import Path
from typing import Callable, Optional, Union

from cryptography import x509

from certinspect.common.errors import NotX509Error
from certinspect.extensions.decoder import decode_extensions
from certinspect.extensions.reporter import render_report
from certinspect.extensions.view import X509CertificateView
from certinspect.keystore.loader import Keystore, load_certificate_file, load_keystore_file


Sink = Callable[[str], None]


def _emit(sink: Sink, lines):
    for line in lines:
        sink(line)


def require_x509(keystore: Keystore, alias: str) -> x509.Certificate:
    """
    Fetch an aliased entry and check it is an X.509 certificate.

    Raises:
        NotX509Error: If the alias is missing or is not an X.509 certificate
    """
    cert = keystore.certificate(alias)
    if not isinstance(cert, x509.Certificate):
        raise NotX509Error(
            f"Certificate with alias '{alias}' is not an X.509 certificate or does not exist"
        )
    return cert


def inspect_certificate(cert: x509.Certificate, verbose: bool = False, sink: Sink = print):
    """Decode one certificate and write its report to the sink."""
    view = X509CertificateView(cert)
    _emit(sink, render_report(view, decode_extensions(view), verbose=verbose))


def inspect_keystore(
    keystore: Keystore,
    alias: Optional[str] = None,
    verbose: bool = False,
    sink: Sink = print,
) -> int:
    """
    Report one aliased certificate, or every certificate in the keystore.

    Args:
        keystore: Loaded keystore
        alias: Alias to inspect, or None for all aliases
        verbose: Include the detailed header fields
        sink: Line output callable

    Returns:
        Number of certificates reported
    """
    aliases = [alias] if alias is not None else keystore.aliases()
    count = 0
    for current in aliases:
        try:
            cert = require_x509(keystore, current)
        except NotX509Error as e:
            sink(f"WARNING: {e}")
            continue
        sink(f"=== Certificate: {current} ===")
        inspect_certificate(cert, verbose=verbose, sink=sink)
        if alias is None:
            sink("")
        count += 1
    return count


def inspect_keystore_file(
    path: Union[str, Path],
    password: Optional[str],
    alias: Optional[str] = None,
    verbose: bool = False,
    sink: Sink = print,
) -> int:
    """
    Load a keystore file and report its certificates.

    Raises:
        LoadError: If the keystore cannot be loaded
    """
    keystore = load_keystore_file(path, password)
    return inspect_keystore(keystore, alias=alias, verbose=verbose, sink=sink)


def inspect_certificate_file(path: Union[str, Path], verbose: bool = False, sink: Sink = print) -> int:
    """
    Report every certificate in a PEM or DER file, numbered from 1.

    Raises:
        LoadError: If the file cannot be read or holds no certificate
    """
    keystore = load_certificate_file(path)
    count = 0
    for current in keystore.aliases():
        count += 1
        sink(f"=== Certificate {count} ===")
        inspect_certificate(keystore.certificate(current), verbose=verbose, sink=sink)
        sink("")
    return count

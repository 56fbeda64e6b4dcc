"""Keystore loading: PKCS#12 containers and PEM certificate bundles."""

from pathlib import Path
from typing import Dict, List, Optional, Union

from cryptography import x509
from cryptography.hazmat.primitives.serialization import pkcs12

from certinspect.common.errors import LoadError


PEM_MARKER = b"-----BEGIN"


class Keystore:
    """Alias -> certificate mapping plus the optional private key entry."""

    def __init__(self, entries: Dict[str, x509.Certificate], private_key=None, key_alias: Optional[str] = None):
        self._entries = dict(entries)
        self._private_key = private_key
        self.key_alias = key_alias

    def aliases(self) -> List[str]:
        """Aliases in keystore order."""
        return list(self._entries)

    def certificate(self, alias: str) -> Optional[x509.Certificate]:
        """Certificate stored under `alias`, or None."""
        return self._entries.get(alias)

    def private_key(self):
        """Private key of the key entry, or None for a pure truststore."""
        return self._private_key

    def key_certificate(self) -> Optional[x509.Certificate]:
        """Certificate paired with the private key."""
        if self.key_alias is None:
            return None
        return self._entries.get(self.key_alias)

    def trusted_certificates(self) -> List[x509.Certificate]:
        """Every certificate that is not the key entry's own certificate."""
        return [cert for alias, cert in self._entries.items() if alias != self.key_alias]


def _unique_alias(entries: Dict[str, x509.Certificate], alias: str) -> str:
    candidate = alias
    n = 2
    while candidate in entries:
        candidate = f"{alias}-{n}"
        n += 1
    return candidate


def _alias_for(item: pkcs12.PKCS12Certificate, index: int) -> str:
    if item.friendly_name:
        return item.friendly_name.decode("utf-8", errors="replace")
    return f"entry-{index}"


def _load_pkcs12(data: bytes, password: Optional[str]) -> Keystore:
    secret = password.encode("utf-8") if password else None
    try:
        bundle = pkcs12.load_pkcs12(data, secret)
    except (ValueError, TypeError) as e:
        raise LoadError(f"Failed to load PKCS#12 keystore: {e}") from e

    entries: Dict[str, x509.Certificate] = {}
    key_alias = None
    index = 0
    if bundle.cert is not None:
        key_alias = _unique_alias(entries, _alias_for(bundle.cert, index))
        entries[key_alias] = bundle.cert.certificate
        index += 1
    for item in bundle.additional_certs:
        alias = _unique_alias(entries, _alias_for(item, index))
        entries[alias] = item.certificate
        index += 1
    return Keystore(entries, private_key=bundle.key, key_alias=key_alias)


def _load_pem_bundle(data: bytes) -> Keystore:
    try:
        certs = x509.load_pem_x509_certificates(data)
    except ValueError as e:
        raise LoadError(f"Failed to load PEM certificates: {e}") from e
    return Keystore({str(n): cert for n, cert in enumerate(certs, start=1)})


def load_keystore(source: bytes, password: Optional[str] = None) -> Keystore:
    """
    Load a keystore from bytes.

    Args:
        source: PKCS#12 (DER) or PEM certificate bundle bytes
        password: Keystore password (ignored for PEM)

    Returns:
        Loaded keystore

    Raises:
        LoadError: If the data is empty, corrupt, of an unsupported format
            (e.g. Java JKS) or the password is wrong
    """
    if not source:
        raise LoadError("Keystore is empty")
    if source.lstrip().startswith(PEM_MARKER):
        return _load_pem_bundle(source)
    return _load_pkcs12(source, password)


def load_certificates(source: bytes) -> Keystore:
    """
    Load bare certificates: a PEM bundle or a single DER certificate.

    Entries are aliased "1".."n" in file order.

    Raises:
        LoadError: If the data is empty or holds no readable certificate
    """
    if not source:
        raise LoadError("Certificate file is empty")
    if source.lstrip().startswith(PEM_MARKER):
        return _load_pem_bundle(source)
    try:
        cert = x509.load_der_x509_certificate(source)
    except ValueError as e:
        raise LoadError(f"Failed to load DER certificate: {e}") from e
    return Keystore({"1": cert})


def _read(path: Path) -> bytes:
    try:
        with open(path, "rb") as f:
            return f.read()
    except OSError as e:
        raise LoadError(f"Cannot read {path}: {e}") from e


def load_keystore_file(path: Union[str, Path], password: Optional[str] = None) -> Keystore:
    """
    Load a keystore file.

    Raises:
        LoadError: If the file cannot be read or parsed
    """
    return load_keystore(_read(Path(path)), password)


def load_certificate_file(path: Union[str, Path]) -> Keystore:
    """
    Load a PEM or DER certificate file.

    Raises:
        LoadError: If the file cannot be read or parsed
    """
    return load_certificates(_read(Path(path)))

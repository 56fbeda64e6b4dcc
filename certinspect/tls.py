"""SSL contexts for the mTLS echo server and client, built from keystores."""

import os
import ssl
import tempfile
from pathlib import Path

from cryptography.hazmat.primitives import serialization

from certinspect.common.errors import LoadError
from certinspect.keystore.loader import Keystore


def _load_identity(context: ssl.SSLContext, keystore: Keystore):
    """Hand the keystore's key entry to the SSL context."""
    cert = keystore.key_certificate()
    key = keystore.private_key()
    if cert is None or key is None:
        raise LoadError("Keystore has no private key entry")

    # ssl only loads key material from files; keep them in a private temp dir
    with tempfile.TemporaryDirectory() as tmp:
        cert_path = Path(tmp) / "cert.pem"
        key_path = Path(tmp) / "key.pem"
        with open(cert_path, "wb") as f:
            f.write(cert.public_bytes(serialization.Encoding.PEM))
            for chain_cert in keystore.trusted_certificates():
                f.write(chain_cert.public_bytes(serialization.Encoding.PEM))
        with open(key_path, "wb") as f:
            f.write(key.private_bytes(
                encoding=serialization.Encoding.PEM,
                format=serialization.PrivateFormat.PKCS8,
                encryption_algorithm=serialization.NoEncryption()
            ))
        os.chmod(key_path, 0o600)
        context.load_cert_chain(certfile=str(cert_path), keyfile=str(key_path))


def _load_trust(context: ssl.SSLContext, truststore: Keystore):
    certs = [truststore.certificate(alias) for alias in truststore.aliases()]
    if not certs:
        raise LoadError("Truststore holds no certificates")
    cadata = "".join(c.public_bytes(serialization.Encoding.PEM).decode("ascii") for c in certs)
    context.load_verify_locations(cadata=cadata)


def build_server_context(keystore: Keystore, truststore: Keystore) -> ssl.SSLContext:
    """
    Server context requiring a client certificate (mutual TLS).

    Args:
        keystore: Keystore with the server's key entry
        truststore: CA certificates used to verify clients

    Returns:
        Configured SSL context (TLS 1.2 or newer)
    """
    context = ssl.SSLContext(ssl.PROTOCOL_TLS_SERVER)
    context.minimum_version = ssl.TLSVersion.TLSv1_2
    context.verify_mode = ssl.CERT_REQUIRED
    _load_identity(context, keystore)
    _load_trust(context, truststore)
    return context


def build_client_context(keystore: Keystore, truststore: Keystore, check_hostname: bool = False) -> ssl.SSLContext:
    """Client context presenting the keystore's certificate and trusting the truststore's CAs."""
    context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
    context.minimum_version = ssl.TLSVersion.TLSv1_2
    context.check_hostname = check_hostname
    context.verify_mode = ssl.CERT_REQUIRED
    _load_identity(context, keystore)
    _load_trust(context, truststore)
    return context

"""Pytest fixtures: a throwaway CA, certificate issuing and PKCS#12 keystores."""

from datetime import datetime, timedelta, timezone

import pytest
from cryptography import x509
from cryptography.x509.oid import ExtendedKeyUsageOID, NameOID
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.serialization import pkcs12


PASSWORD = "changeit"


def _name(cn: str) -> x509.Name:
    return x509.Name([
        x509.NameAttribute(NameOID.ORGANIZATION_NAME, "certinspect"),
        x509.NameAttribute(NameOID.COMMON_NAME, cn),
    ])


def _key_usage(**flags) -> x509.KeyUsage:
    values = dict(
        digital_signature=False,
        content_commitment=False,
        key_encipherment=False,
        data_encipherment=False,
        key_agreement=False,
        key_cert_sign=False,
        crl_sign=False,
        encipher_only=False,
        decipher_only=False,
    )
    values.update(flags)
    return x509.KeyUsage(**values)


class CertificateAuthority:
    """Signs test certificates."""

    def __init__(self, path_length=None):
        self.key = ec.generate_private_key(ec.SECP256R1())
        now = datetime.now(timezone.utc)
        self.cert = x509.CertificateBuilder().subject_name(
            _name("Test Root CA")
        ).issuer_name(
            _name("Test Root CA")
        ).public_key(
            self.key.public_key()
        ).serial_number(
            x509.random_serial_number()
        ).not_valid_before(
            now - timedelta(days=1)
        ).not_valid_after(
            now + timedelta(days=30)
        ).add_extension(
            x509.BasicConstraints(ca=True, path_length=path_length), critical=True
        ).add_extension(
            _key_usage(digital_signature=True, key_cert_sign=True, crl_sign=True), critical=True
        ).add_extension(
            x509.SubjectKeyIdentifier.from_public_key(self.key.public_key()), critical=False
        ).sign(self.key, hashes.SHA256())

    def issue(self, cn: str, extensions=(), serial: int = 1000):
        """
        Issue a certificate.

        Args:
            cn: Subject common name
            extensions: Iterable of (ExtensionType, critical) pairs

        Returns:
            Tuple of (private key, certificate)
        """
        key = ec.generate_private_key(ec.SECP256R1())
        now = datetime.now(timezone.utc)
        builder = x509.CertificateBuilder().subject_name(
            _name(cn)
        ).issuer_name(
            self.cert.subject
        ).public_key(
            key.public_key()
        ).serial_number(
            serial
        ).not_valid_before(
            now - timedelta(days=1)
        ).not_valid_after(
            now + timedelta(days=30)
        )
        for ext, critical in extensions:
            builder = builder.add_extension(ext, critical=critical)
        return key, builder.sign(self.key, hashes.SHA256())

    def issue_tls(self, cn: str, usage):
        """Issue a TLS leaf certificate carrying the given EKU."""
        return self.issue(cn, [
            (x509.BasicConstraints(ca=False, path_length=None), True),
            (_key_usage(digital_signature=True, key_encipherment=True), True),
            (x509.ExtendedKeyUsage([usage]), False),
            (x509.SubjectAlternativeName([x509.DNSName(cn), x509.DNSName("localhost")]), False),
            (x509.AuthorityKeyIdentifier.from_issuer_public_key(self.key.public_key()), False),
        ])


@pytest.fixture(scope="session")
def ca():
    return CertificateAuthority()


@pytest.fixture(scope="session")
def key_usage():
    return _key_usage


@pytest.fixture(scope="session")
def server_entry(ca):
    return ca.issue_tls("server.local", ExtendedKeyUsageOID.SERVER_AUTH)


@pytest.fixture(scope="session")
def client_entry(ca):
    return ca.issue_tls("client.local", ExtendedKeyUsageOID.CLIENT_AUTH)


def serialize_keystore(alias, key, cert, ca_cert=None, password=PASSWORD) -> bytes:
    cas = [pkcs12.PKCS12Certificate(ca_cert, b"ca")] if ca_cert is not None else None
    return pkcs12.serialize_key_and_certificates(
        name=alias.encode("utf-8") if alias else None,
        key=key,
        cert=cert,
        cas=cas,
        encryption_algorithm=serialization.BestAvailableEncryption(password.encode("utf-8")),
    )


def serialize_truststore(ca_cert, password=PASSWORD) -> bytes:
    return pkcs12.serialize_key_and_certificates(
        name=None,
        key=None,
        cert=None,
        cas=[pkcs12.PKCS12Certificate(ca_cert, b"ca")],
        encryption_algorithm=serialization.BestAvailableEncryption(password.encode("utf-8")),
    )


@pytest.fixture(scope="session")
def server_p12(ca, server_entry):
    key, cert = server_entry
    return serialize_keystore("server", key, cert, ca.cert)


@pytest.fixture(scope="session")
def client_p12(ca, client_entry):
    key, cert = client_entry
    return serialize_keystore("client", key, cert, ca.cert)


@pytest.fixture(scope="session")
def truststore_p12(ca):
    return serialize_truststore(ca.cert)


@pytest.fixture
def keystore_dir(tmp_path, server_p12, client_p12, truststore_p12):
    """Directory laid out like the generated certs/ folder."""
    (tmp_path / "server.p12").write_bytes(server_p12)
    (tmp_path / "client.p12").write_bytes(client_p12)
    (tmp_path / "truststore.p12").write_bytes(truststore_p12)
    return tmp_path


@pytest.fixture(scope="session")
def make_keystore():
    return serialize_keystore


@pytest.fixture(scope="session")
def ca_factory():
    return CertificateAuthority

"""Create Root CA (RSA + self-signed X.509) and a PKCS#12 truststore holding it."""

import argparse
import os
from datetime import datetime, timedelta, timezone
from pathlib import Path

from cryptography import x509
from cryptography.x509.oid import NameOID
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.hazmat.primitives.serialization import pkcs12


def create_root_ca(name: str, output_dir: Path = Path("certs"), password: str = "changeit"):
    """
    Create a root CA with RSA keypair, self-signed certificate and truststore.

    Args:
        name: Common Name for the CA
        output_dir: Directory to store CA key, certificate and truststore.p12
        password: Truststore password
    """
    output_dir.mkdir(parents=True, exist_ok=True)

    private_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)

    subject = issuer = x509.Name([
        x509.NameAttribute(NameOID.COUNTRY_NAME, "US"),
        x509.NameAttribute(NameOID.ORGANIZATION_NAME, "certinspect"),
        x509.NameAttribute(NameOID.COMMON_NAME, name),
    ])

    now = datetime.now(timezone.utc)
    cert = x509.CertificateBuilder().subject_name(
        subject
    ).issuer_name(
        issuer
    ).public_key(
        private_key.public_key()
    ).serial_number(
        x509.random_serial_number()
    ).not_valid_before(
        now
    ).not_valid_after(
        now + timedelta(days=3650)  # 10 years
    ).add_extension(
        x509.BasicConstraints(ca=True, path_length=None),
        critical=True,
    ).add_extension(
        x509.KeyUsage(
            key_cert_sign=True,
            crl_sign=True,
            digital_signature=True,
            key_encipherment=False,
            content_commitment=False,
            data_encipherment=False,
            key_agreement=False,
            encipher_only=False,
            decipher_only=False,
        ),
        critical=True,
    ).add_extension(
        x509.SubjectKeyIdentifier.from_public_key(private_key.public_key()),
        critical=False,
    ).sign(private_key, hashes.SHA256())

    key_path = output_dir / "ca_key.pem"
    with open(key_path, "wb") as f:
        f.write(private_key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption()
        ))
    os.chmod(key_path, 0o600)
    print(f"[OK] CA private key saved to: {key_path}")

    cert_path = output_dir / "ca_cert.pem"
    with open(cert_path, "wb") as f:
        f.write(cert.public_bytes(serialization.Encoding.PEM))
    print(f"[OK] CA certificate saved to: {cert_path}")

    truststore_path = output_dir / "truststore.p12"
    with open(truststore_path, "wb") as f:
        f.write(pkcs12.serialize_key_and_certificates(
            name=None,
            key=None,
            cert=None,
            cas=[pkcs12.PKCS12Certificate(cert, b"ca")],
            encryption_algorithm=serialization.BestAvailableEncryption(password.encode("utf-8")),
        ))
    print(f"[OK] Truststore saved to: {truststore_path}")

    print(f"\n[OK] Root CA '{name}' created successfully!")
    print(f"  Valid until: {cert.not_valid_after_utc}")


def main():
    parser = argparse.ArgumentParser(description="Create Root CA and truststore")
    parser.add_argument(
        "--name",
        type=str,
        default="certinspect Root CA",
        help="Common Name for the CA"
    )
    parser.add_argument(
        "--out",
        type=str,
        default="certs",
        help="Output directory for CA files (default: certs)"
    )
    parser.add_argument(
        "--password",
        type=str,
        default="changeit",
        help="Truststore password (default: changeit)"
    )
    args = parser.parse_args()

    create_root_ca(args.name, Path(args.out), args.password)


if __name__ == "__main__":
    main()

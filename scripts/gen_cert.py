"""Issue a server/client cert signed by the Root CA and store it in a PKCS#12 keystore."""

import argparse
import ipaddress
from datetime import datetime, timedelta, timezone
from pathlib import Path

from cryptography import x509
from cryptography.x509.oid import ExtendedKeyUsageOID, NameOID
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.hazmat.primitives.serialization import pkcs12


EKU_CHOICES = {
    "serverAuth": ExtendedKeyUsageOID.SERVER_AUTH,
    "clientAuth": ExtendedKeyUsageOID.CLIENT_AUTH,
}


def issue_certificate(
    alias: str,
    cn: str,
    ca_key_path: Path,
    ca_cert_path: Path,
    output_dir: Path,
    usages: list,
    password: str = "changeit",
    valid_days: int = 365,
):
    """
    Issue an RSA X.509 certificate signed by the root CA.

    Writes <alias>_key.pem, <alias>_cert.pem and <alias>.p12 (friendly name
    = alias, CA certificate included as "ca").

    Args:
        alias: Keystore alias (also the output file stem)
        cn: Common Name (hostname) for the certificate
        ca_key_path: Path to CA private key
        ca_cert_path: Path to CA certificate
        output_dir: Output directory
        usages: Extended Key Usage names (see EKU_CHOICES)
        password: Keystore password
        valid_days: Certificate validity period in days
    """
    with open(ca_key_path, "rb") as f:
        ca_private_key = serialization.load_pem_private_key(f.read(), password=None)
    with open(ca_cert_path, "rb") as f:
        ca_cert = x509.load_pem_x509_certificate(f.read())

    private_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)

    subject = x509.Name([
        x509.NameAttribute(NameOID.COUNTRY_NAME, "US"),
        x509.NameAttribute(NameOID.ORGANIZATION_NAME, "certinspect"),
        x509.NameAttribute(NameOID.COMMON_NAME, cn),
    ])

    now = datetime.now(timezone.utc)
    cert = x509.CertificateBuilder().subject_name(
        subject
    ).issuer_name(
        ca_cert.subject
    ).public_key(
        private_key.public_key()
    ).serial_number(
        x509.random_serial_number()
    ).not_valid_before(
        now
    ).not_valid_after(
        now + timedelta(days=valid_days)
    ).add_extension(
        x509.BasicConstraints(ca=False, path_length=None),
        critical=True,
    ).add_extension(
        x509.SubjectAlternativeName([
            x509.DNSName(cn),
            x509.DNSName("localhost"),
            x509.IPAddress(ipaddress.ip_address("127.0.0.1")),
        ]),
        critical=False,
    ).add_extension(
        x509.KeyUsage(
            digital_signature=True,
            key_encipherment=True,
            key_agreement=False,
            content_commitment=False,
            data_encipherment=False,
            encipher_only=False,
            decipher_only=False,
            key_cert_sign=False,
            crl_sign=False,
        ),
        critical=True,
    ).add_extension(
        x509.ExtendedKeyUsage([EKU_CHOICES[u] for u in usages]),
        critical=False,
    ).add_extension(
        x509.SubjectKeyIdentifier.from_public_key(private_key.public_key()),
        critical=False,
    ).add_extension(
        x509.AuthorityKeyIdentifier.from_issuer_public_key(ca_private_key.public_key()),
        critical=False,
    ).sign(ca_private_key, hashes.SHA256())

    output_dir.mkdir(parents=True, exist_ok=True)

    cert_path = output_dir / f"{alias}_cert.pem"
    with open(cert_path, "wb") as f:
        f.write(cert.public_bytes(serialization.Encoding.PEM))
    print(f"[OK] Certificate saved to: {cert_path}")

    keystore_path = output_dir / f"{alias}.p12"
    with open(keystore_path, "wb") as f:
        f.write(pkcs12.serialize_key_and_certificates(
            name=alias.encode("utf-8"),
            key=private_key,
            cert=cert,
            cas=[pkcs12.PKCS12Certificate(ca_cert, b"ca")],
            encryption_algorithm=serialization.BestAvailableEncryption(password.encode("utf-8")),
        ))
    print(f"[OK] Keystore saved to: {keystore_path} (alias '{alias}')")

    print(f"\n[OK] Certificate for '{cn}' issued successfully!")
    print(f"  Extended Key Usage: {', '.join(usages)}")
    print(f"  Valid until: {cert.not_valid_after_utc}")
    print(f"  Signed by: {ca_cert.subject.get_attributes_for_oid(NameOID.COMMON_NAME)[0].value}")


def main():
    parser = argparse.ArgumentParser(description="Issue certificate signed by Root CA")
    parser.add_argument(
        "--alias",
        type=str,
        required=True,
        help="Keystore alias, e.g. server or client"
    )
    parser.add_argument(
        "--cn",
        type=str,
        required=True,
        help="Common Name (hostname) for the certificate"
    )
    parser.add_argument(
        "--eku",
        action="append",
        choices=sorted(EKU_CHOICES),
        help="Extended Key Usage (repeatable; default: serverAuth for alias 'server', else clientAuth)"
    )
    parser.add_argument(
        "--single-use",
        action="store_true",
        help="Add serverAuth to the EKU list (client certificates for single-use mode)"
    )
    parser.add_argument("--out", type=str, default="certs", help="Output directory (default: certs)")
    parser.add_argument("--ca-key", type=str, default="certs/ca_key.pem", help="Path to CA private key")
    parser.add_argument("--ca-cert", type=str, default="certs/ca_cert.pem", help="Path to CA certificate")
    parser.add_argument("--password", type=str, default="changeit", help="Keystore password")
    parser.add_argument("--valid-days", type=int, default=365, help="Validity period in days")
    args = parser.parse_args()

    usages = args.eku or (["serverAuth"] if args.alias == "server" else ["clientAuth"])
    if args.single_use and "serverAuth" not in usages:
        usages.append("serverAuth")

    issue_certificate(
        args.alias,
        args.cn,
        Path(args.ca_key),
        Path(args.ca_cert),
        Path(args.out),
        usages,
        args.password,
        args.valid_days,
    )


if __name__ == "__main__":
    main()

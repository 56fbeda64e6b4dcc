"""Inspect X.509 v3 extensions of every certificate in a PEM or DER file."""

import argparse
import sys
from pathlib import Path

from certinspect.common.errors import LoadError
from certinspect.keystore.walker import inspect_certificate_file


def main():
    parser = argparse.ArgumentParser(description="Inspect X.509 certificate extensions")
    parser.add_argument(
        "cert_path",
        type=str,
        help="Path to certificate file (PEM bundle or a single DER certificate)"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Show validity, version and signature algorithm"
    )
    args = parser.parse_args()

    cert_path = Path(args.cert_path)
    if not cert_path.exists():
        print(f"ERROR: Certificate file not found: {cert_path}")
        sys.exit(1)

    try:
        inspect_certificate_file(cert_path, verbose=args.verbose)
    except LoadError as e:
        print(f"ERROR: Failed to load certificate: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()

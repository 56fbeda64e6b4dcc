"""Inspect X.509 v3 extensions of certificates held in keystores.

Usage:
    python -m certinspect.analyzer                              inspect default keystores
    python -m certinspect.analyzer <keystore> <password>        inspect all certs in keystore
    python -m certinspect.analyzer <keystore> <password> <alias> inspect one cert
"""

import argparse
import sys
import traceback
from pathlib import Path
from typing import List, Optional

from certinspect.common.config import InspectConfig
from certinspect.common.errors import LoadError
from certinspect.common.utils import separator
from certinspect.keystore.walker import inspect_keystore_file


def run_inspection(path: Path, password: str, alias: Optional[str], verbose: bool) -> bool:
    """
    Inspect one keystore, reporting a load failure without raising.

    Returns:
        True if the keystore was loaded and walked
    """
    try:
        inspect_keystore_file(path, password, alias=alias, verbose=verbose)
        return True
    except LoadError as e:
        print(f"ERROR: Error inspecting certificate: {e}")
        traceback.print_exc()
        return False


def inspect_defaults(config: InspectConfig):
    """Inspect the server and client keystores from the configured directory."""
    for path in (config.server_keystore, config.client_keystore):
        if not path.exists():
            print(f"WARNING: Keystore not found at {path}")
            print("Please run: python scripts/gen_ca.py && python scripts/gen_cert.py --alias server --cn server.local")

    print("Inspecting server certificate...")
    run_inspection(config.server_keystore, config.password, "server", config.verbose)

    print("\n" + separator() + "\n")

    print("Inspecting client certificate...")
    run_inspection(config.client_keystore, config.password, "client", config.verbose)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Inspect X.509 v3 extensions of keystore certificates")
    parser.add_argument("keystore", nargs="?", help="Path to keystore (PKCS#12 or PEM bundle)")
    parser.add_argument("password", nargs="?", help="Keystore password")
    parser.add_argument("alias", nargs="?", help="Alias of the certificate to inspect (default: all)")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    config = InspectConfig.from_env()

    if args.keystore is None:
        inspect_defaults(config)
    elif args.password is None:
        parser.print_help()
    else:
        print(f"Inspecting certificate(s) from: {args.keystore}")
        run_inspection(Path(args.keystore), args.password, args.alias, config.verbose)
    return 0


if __name__ == "__main__":
    sys.exit(main())

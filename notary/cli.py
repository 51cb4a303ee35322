"""
Humanity Notary — Command Line

notary-keygen  Generate the RSA signing keypair ahead of deployment.
notary-serve   Run the API under uvicorn with the configured host/port.

Usage:
    notary-keygen --private data/keys/private.pem --public data/keys/public.pem
    notary-keygen --force --key-size 3072
    notary-serve --config config/default.yaml
"""

from __future__ import annotations

import argparse
import os
import sys

from notary.config import load_config
from notary.systems.identity.keys import MIN_KEY_SIZE, generate_keypair_files
from notary.systems.notary.errors import KeyProvisioningError


def keygen(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="notary-keygen",
        description="Generate the RSA keypair used to sign content certificates",
    )
    parser.add_argument(
        "--config", default=os.environ.get("NOTARY_CONFIG_PATH", "config/default.yaml"),
        help="Config file supplying default key paths (default: config/default.yaml)"
    )
    parser.add_argument("--private", default=None, help="Private key output path")
    parser.add_argument("--public", default=None, help="Public key output path")
    parser.add_argument(
        "--key-size", type=int, default=None,
        help=f"RSA modulus size in bits (minimum {MIN_KEY_SIZE})"
    )
    parser.add_argument(
        "--force", action="store_true",
        help="Overwrite existing key files (invalidates every issued certificate)"
    )
    args = parser.parse_args(argv)

    config = load_config(args.config)
    private_path = args.private or config.keys.private_key_path
    public_path = args.public or config.keys.public_key_path
    key_size = args.key_size or config.keys.key_size

    try:
        keypair = generate_keypair_files(
            private_path,
            public_path,
            key_size=key_size,
            overwrite=args.force,
        )
    except KeyProvisioningError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    print(f"Keys generated: {private_path}, {public_path}")
    print(f"  Fingerprint (SHA256): {keypair.fingerprint}")
    return 0


def serve(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="notary-serve",
        description="Run the Humanity Notary API",
    )
    parser.add_argument(
        "--config", default=os.environ.get("NOTARY_CONFIG_PATH", "config/default.yaml"),
        help="Config file (default: config/default.yaml)"
    )
    parser.add_argument("--host", default=None, help="Bind host (overrides config)")
    parser.add_argument("--port", type=int, default=None, help="Bind port (overrides config)")
    args = parser.parse_args(argv)

    import uvicorn

    os.environ["NOTARY_CONFIG_PATH"] = args.config
    config = load_config(args.config)
    uvicorn.run(
        "notary.main:app",
        host=args.host or config.server.host,
        port=args.port or config.server.port,
        log_config=None,
    )
    return 0


def main_keygen() -> None:
    sys.exit(keygen())


def main_serve() -> None:
    sys.exit(serve())


if __name__ == "__main__":
    main_keygen()

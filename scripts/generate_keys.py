#!/usr/bin/env python3
"""
Generate an RSA-2048 signing key for bank tokens.

Prints the values to put in JWT_PRIVATE_KEY and JWT_KEY_ID, plus the public
PEM and the JWK the bank will see at /.well-known/jwks.json. With --out-dir,
also writes them to timestamped files.
"""

import argparse
import json
import sys
from datetime import UTC, datetime
from pathlib import Path

from pulse.crypto.keys import generate_rsa_keypair, modulus_bits, validate_key_size
from pulse.crypto.types import KeyPair

RULE = "=" * 80


def _section(title: str, body: str) -> None:
    print(RULE)
    print(title)
    print(RULE)
    print(body)
    print()


def write_key_files(keypair: KeyPair, out_dir: Path) -> list[Path]:
    """Write PEMs, the JWK and a summary file; return the written paths."""
    now = datetime.now(UTC)
    stamp = now.strftime("%Y-%m-%dT%H-%M-%S")
    out_dir.mkdir(parents=True, exist_ok=True)
    private_path = out_dir / f"private-key-{stamp}.pem"
    files = {
        private_path: keypair.private_key_pem,
        out_dir / f"public-key-{stamp}.pem": keypair.public_key_pem,
        out_dir / f"jwk-{stamp}.json": json.dumps(keypair.jwk.model_dump(), indent=2),
        out_dir / f"key-info-{stamp}.txt": (
            f"Key ID: {keypair.kid}\n"
            f"Generated: {now.isoformat()}\n"
            f"Size: {keypair.key_size} bits\n"
            f"Algorithm: {keypair.alg}\n"
        ),
    }
    for path, content in files.items():
        path.write_text(content)
    private_path.chmod(0o600)
    return list(files)


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Generate a bank-token signing key")
    parser.add_argument("--kid", help="key id to use instead of pulse-key-<millis>")
    parser.add_argument("--out-dir", type=Path, help="also write key files here")
    args = parser.parse_args()

    keypair = generate_rsa_keypair(args.kid)
    if not validate_key_size(keypair.jwk):
        print(f"Generated key is only {modulus_bits(keypair.jwk)} bits", file=sys.stderr)
        sys.exit(1)

    print(f"Key ID: {keypair.kid} ({modulus_bits(keypair.jwk)} bits, {keypair.alg})\n")
    _section("PRIVATE KEY (JWT_PRIVATE_KEY)", keypair.private_key_pem)
    _section("KEY ID (JWT_KEY_ID)", keypair.kid)
    _section("PUBLIC KEY (JWT_PUBLIC_KEY, optional)", keypair.public_key_pem)
    _section("PUBLIC JWK", json.dumps(keypair.jwk.model_dump(), indent=2))

    if args.out_dir is not None:
        for path in write_key_files(keypair, args.out_dir):
            print(f"Wrote {path}")


if __name__ == "__main__":
    main()

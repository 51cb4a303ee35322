"""
Humanity Notary — Signing Key Provider

Owns the process-wide RSA keypair used to sign and verify certificates.

The keypair is loaded from two PEM files on startup. If either file is
missing a fresh pair is generated and both halves are persisted, so the
key (and therefore every previously issued certificate) survives restarts.

Any failure to read, parse, generate or persist the keypair raises
KeyProvisioningError. The application lifespan lets it propagate: the
service cannot run without a key.
"""

from __future__ import annotations

import hashlib
import os
from pathlib import Path
from typing import Any

import structlog
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.rsa import (
    RSAPrivateKey,
    RSAPublicKey,
    generate_private_key,
)

from notary.systems.notary.errors import KeyProvisioningError

logger = structlog.get_logger("notary.identity.keys")

MIN_KEY_SIZE = 2048
_PUBLIC_EXPONENT = 65537


class Keypair:
    """An RSA private/public key pair plus its public PEM and fingerprint."""

    __slots__ = ("private_key", "public_key", "public_key_pem", "fingerprint")

    def __init__(self, private_key: RSAPrivateKey, public_key: RSAPublicKey) -> None:
        self.private_key = private_key
        self.public_key = public_key
        self.public_key_pem = public_key.public_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        ).decode("utf-8")
        self.fingerprint = hashlib.sha256(self.public_key_pem.encode()).hexdigest()

    @classmethod
    def generate(cls, key_size: int = MIN_KEY_SIZE) -> Keypair:
        if key_size < MIN_KEY_SIZE:
            raise KeyProvisioningError(
                f"RSA key size {key_size} is below the minimum of {MIN_KEY_SIZE}"
            )
        private_key = generate_private_key(public_exponent=_PUBLIC_EXPONENT, key_size=key_size)
        return cls(private_key, private_key.public_key())


class KeyProvider:
    """
    Loads or creates the signing keypair.

    Construct once at startup and hand the instance to the issuer and
    verifier; ``load_or_create()`` is idempotent.
    """

    def __init__(
        self,
        private_key_path: str | Path,
        public_key_path: str | Path,
        *,
        key_size: int = MIN_KEY_SIZE,
    ) -> None:
        self._private_key_path = Path(private_key_path)
        self._public_key_path = Path(public_key_path)
        self._key_size = key_size
        self._keypair: Keypair | None = None
        self._generated = False
        self._logger = logger.bind(component="key_provider")

    # ─── Lifecycle ──────────────────────────────────────────────────

    def load_or_create(self) -> Keypair:
        """
        Return the process keypair, loading it from disk or generating it.

        Both files present -> load. Either missing -> generate and persist
        both halves. Called again, returns the already-loaded pair.
        """
        if self._keypair is not None:
            return self._keypair

        if self._private_key_path.exists() and self._public_key_path.exists():
            self._keypair = self._load()
            self._logger.info(
                "keypair_loaded",
                private_key_path=str(self._private_key_path),
                fingerprint=self._keypair.fingerprint[:16],
            )
        else:
            self._logger.info(
                "keypair_not_found",
                private_key_exists=self._private_key_path.exists(),
                public_key_exists=self._public_key_path.exists(),
            )
            self._keypair = Keypair.generate(self._key_size)
            write_keypair(self._keypair, self._private_key_path, self._public_key_path)
            self._generated = True
            self._logger.info(
                "keypair_generated",
                key_size=self._key_size,
                fingerprint=self._keypair.fingerprint[:16],
            )

        return self._keypair

    # ─── Properties ─────────────────────────────────────────────────

    @property
    def keypair(self) -> Keypair:
        if self._keypair is None:
            raise RuntimeError("KeyProvider not initialized: call load_or_create() first")
        return self._keypair

    @property
    def private_key(self) -> RSAPrivateKey:
        return self.keypair.private_key

    @property
    def public_key(self) -> RSAPublicKey:
        return self.keypair.public_key

    @property
    def stats(self) -> dict[str, Any]:
        return {
            "initialized": self._keypair is not None,
            "generated_this_run": self._generated,
            "fingerprint_prefix": self._keypair.fingerprint[:16] if self._keypair else None,
            "key_size": self._keypair.private_key.key_size if self._keypair else None,
        }

    # ─── Internals ──────────────────────────────────────────────────

    def _load(self) -> Keypair:
        try:
            private_bytes = self._private_key_path.read_bytes()
            public_bytes = self._public_key_path.read_bytes()
        except OSError as exc:
            raise KeyProvisioningError(f"Cannot read key files: {exc}") from exc

        try:
            private_key = serialization.load_pem_private_key(private_bytes, password=None)
        except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
            raise KeyProvisioningError(
                f"Unparsable private key at {self._private_key_path}: {exc}"
            ) from exc
        try:
            public_key = serialization.load_pem_public_key(public_bytes)
        except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
            raise KeyProvisioningError(
                f"Unparsable public key at {self._public_key_path}: {exc}"
            ) from exc

        if not isinstance(private_key, RSAPrivateKey):
            raise KeyProvisioningError(
                f"Signing key must be RSA, got {type(private_key).__name__}"
            )
        if not isinstance(public_key, RSAPublicKey):
            raise KeyProvisioningError(
                f"Verification key must be RSA, got {type(public_key).__name__}"
            )
        if private_key.public_key().public_numbers() != public_key.public_numbers():
            raise KeyProvisioningError(
                "Public key file does not match the private key"
            )
        if private_key.key_size < MIN_KEY_SIZE:
            raise KeyProvisioningError(
                f"RSA key size {private_key.key_size} is below the minimum of {MIN_KEY_SIZE}"
            )

        return Keypair(private_key, public_key)


# ─── Utility Functions ───────────────────────────────────────────


def write_keypair(keypair: Keypair, private_key_path: Path, public_key_path: Path) -> None:
    """Persist both halves of ``keypair`` as PEM (PKCS#8 / SubjectPublicKeyInfo)."""
    private_pem = keypair.private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )
    try:
        private_key_path.parent.mkdir(parents=True, exist_ok=True)
        public_key_path.parent.mkdir(parents=True, exist_ok=True)
        private_key_path.write_bytes(private_pem)
        try:
            os.chmod(private_key_path, 0o600)
        except OSError:
            # Not every filesystem supports POSIX modes.
            logger.debug("private_key_chmod_skipped", path=str(private_key_path))
        public_key_path.write_text(keypair.public_key_pem, encoding="utf-8")
    except OSError as exc:
        raise KeyProvisioningError(f"Cannot persist keypair: {exc}") from exc


def generate_keypair_files(
    private_key_path: str | Path,
    public_key_path: str | Path,
    *,
    key_size: int = MIN_KEY_SIZE,
    overwrite: bool = False,
) -> Keypair:
    """
    Generate a keypair and write it to disk ahead of deployment.

    Refuses to replace existing files unless ``overwrite`` is set, since
    doing so invalidates every certificate already issued.
    """
    private_path = Path(private_key_path)
    public_path = Path(public_key_path)
    if not overwrite:
        existing = [str(p) for p in (private_path, public_path) if p.exists()]
        if existing:
            raise KeyProvisioningError(
                f"Refusing to overwrite existing key files: {', '.join(existing)}"
            )

    keypair = Keypair.generate(key_size)
    write_keypair(keypair, private_path, public_path)
    logger.info(
        "keypair_files_written",
        private_key_path=str(private_path),
        public_key_path=str(public_path),
        fingerprint=keypair.fingerprint[:16],
    )
    return keypair

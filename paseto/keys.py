"""
PASETO v1/v2 - Key Model

Every key is bound to exactly one protocol version and one role:

- SymmetricKey: "local" tokens. 32 bytes for both versions; v1 feeds it to
  HKDF-SHA384, v2 uses it directly as the XChaCha20-Poly1305 key.
- PrivateKey / PublicKey: "public" tokens. v1 holds PEM-encoded RSA-2048,
  v2 holds Ed25519 (64-byte secret key, 32-byte public key).

Key material is validated when the key is constructed, and keys are
immutable afterwards.

SPDX-License-Identifier: AGPL-3.0-or-later
"""

import logging
from dataclasses import dataclass, field
from typing import ClassVar, Union

from . import primitives
from .exceptions import InvalidKeyError, InvalidVersionError
from .framing import b64url_decode, b64url_encode
from .protocol import KeyRole, ProtocolVersion, Purpose, get_parameters, parse_version


logger = logging.getLogger(__name__)

RawKey = Union[bytes, bytearray, str]


def _coerce_raw(raw: RawKey) -> bytes:
    if isinstance(raw, str):
        return raw.encode("utf-8")
    if isinstance(raw, (bytes, bytearray, memoryview)):
        return bytes(raw)
    raise TypeError(f"Raw key must be bytes or str, got {type(raw).__name__}")


class _KeyEncoding:
    """Constructors and encoders shared by all key kinds."""

    raw: bytes
    version: ProtocolVersion
    role: ClassVar[KeyRole]

    @classmethod
    def from_hex(cls, value: str, version=ProtocolVersion.V2):
        try:
            raw = bytes.fromhex(value)
        except (TypeError, ValueError) as exc:
            raise InvalidKeyError("Key is not valid hex") from exc
        return cls(raw, version)

    @classmethod
    def from_base64(cls, value: Union[str, bytes], version=ProtocolVersion.V2):
        """Build a key from unpadded base64url, as produced by encode()."""
        return cls(b64url_decode(value), version)

    @property
    def purpose(self) -> Purpose:
        return self.role.purpose

    def encode(self) -> str:
        """Raw key as unpadded base64url."""
        return b64url_encode(self.raw)

    def hex(self) -> str:
        return self.raw.hex()


@dataclass(frozen=True, eq=False)
class SymmetricKey(_KeyEncoding):
    """Secret key for local (encrypted) tokens."""
    raw: bytes = field(repr=False)
    version: ProtocolVersion = ProtocolVersion.V2

    role: ClassVar[KeyRole] = KeyRole.SYMMETRIC

    def __post_init__(self):
        version = parse_version(self.version)
        raw = _coerce_raw(self.raw)

        expected = get_parameters(version).symmetric_key_size
        if len(raw) != expected:
            raise InvalidKeyError(
                f"Symmetric keys must be {expected} bytes long; {len(raw)} given."
            )

        object.__setattr__(self, "version", version)
        object.__setattr__(self, "raw", raw)

    @classmethod
    def generate(cls, version=ProtocolVersion.V2) -> "SymmetricKey":
        """Generate a fresh random key for the given version."""
        version = parse_version(version)
        logger.debug("Generating %s symmetric key", version.value)
        return cls(primitives.random_bytes(get_parameters(version).symmetric_key_size), version)

    def split(self, salt: bytes) -> tuple[bytes, bytes]:
        """
        Derive (encryption_key, authentication_key) with HKDF-SHA384.

        Only v1 splits its key; v2 feeds the raw key to the AEAD directly.
        """
        if self.version is not ProtocolVersion.V1:
            raise InvalidVersionError("Only v1 symmetric keys are split into subkeys")

        params = get_parameters(self.version)
        encryption_key = primitives.hkdf_sha384(self.raw, salt, params.encryption_info, 32)
        authentication_key = primitives.hkdf_sha384(self.raw, salt, params.authentication_info, 32)
        return encryption_key, authentication_key


@dataclass(frozen=True, eq=False)
class PublicKey(_KeyEncoding):
    """Verification key for public (signed) tokens."""
    raw: bytes = field(repr=False)
    version: ProtocolVersion = ProtocolVersion.V2

    role: ClassVar[KeyRole] = KeyRole.PUBLIC

    def __post_init__(self):
        version = parse_version(self.version)
        raw = _coerce_raw(self.raw)

        if version is ProtocolVersion.V1:
            primitives.rsa_load_public(raw)
        elif version is ProtocolVersion.V2:
            if len(raw) != primitives.ED25519_PUBLIC_KEY_SIZE:
                raise InvalidKeyError(
                    f"Public keys must be {primitives.ED25519_PUBLIC_KEY_SIZE} "
                    f"bytes long; {len(raw)} given."
                )

        object.__setattr__(self, "version", version)
        object.__setattr__(self, "raw", raw)


@dataclass(frozen=True, eq=False)
class PrivateKey(_KeyEncoding):
    """
    Signing key for public (signed) tokens.

    v2 accepts a 32-byte seed, a 64-byte secret key (seed || public key) or a
    96-byte keypair export (secret key || public key); the stored raw key is
    always the 64-byte secret key.
    """
    raw: bytes = field(repr=False)
    version: ProtocolVersion = ProtocolVersion.V2

    role: ClassVar[KeyRole] = KeyRole.SECRET

    def __post_init__(self):
        version = parse_version(self.version)
        raw = _coerce_raw(self.raw)

        if version is ProtocolVersion.V1:
            primitives.rsa_load_private(raw)
        elif version is ProtocolVersion.V2:
            raw = self._normalize_ed25519(raw)

        object.__setattr__(self, "version", version)
        object.__setattr__(self, "raw", raw)

    @staticmethod
    def _normalize_ed25519(raw: bytes) -> bytes:
        if len(raw) == primitives.ED25519_KEYPAIR_SIZE:
            trailing = raw[primitives.ED25519_SECRET_KEY_SIZE:]
            raw = raw[:primitives.ED25519_SECRET_KEY_SIZE]
            if not primitives.constant_time_equal(trailing, raw[primitives.ED25519_SEED_SIZE:]):
                raise InvalidKeyError("Keypair public half does not match its secret key")

        if len(raw) == primitives.ED25519_SEED_SIZE:
            _, secret_key = primitives.ed25519_seed_keypair(raw)
            return secret_key

        if len(raw) != primitives.ED25519_SECRET_KEY_SIZE:
            raise InvalidKeyError(
                f"Secret keys must be 32 or 64 bytes long; {len(raw)} given."
            )

        # Trailing half must be the public key of the seed half
        public_key, _ = primitives.ed25519_seed_keypair(raw[:primitives.ED25519_SEED_SIZE])
        if not primitives.constant_time_equal(public_key, raw[primitives.ED25519_SEED_SIZE:]):
            raise InvalidKeyError("Secret key does not match its embedded public key")
        return raw

    @classmethod
    def generate(cls, version=ProtocolVersion.V2) -> "PrivateKey":
        """Generate a fresh signing key (RSA-2048 for v1, Ed25519 for v2)."""
        version = parse_version(version)
        logger.debug("Generating %s private key", version.value)

        if version is ProtocolVersion.V1:
            return cls(primitives.rsa_generate_private_pem(), version)
        return cls(primitives.random_bytes(primitives.ED25519_SEED_SIZE), version)

    def public_key(self) -> PublicKey:
        """Return the matching verification key."""
        if self.version is ProtocolVersion.V1:
            return PublicKey(primitives.rsa_public_pem(self.raw), self.version)
        return PublicKey(primitives.ed25519_public_from_secret(self.raw), self.version)

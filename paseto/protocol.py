"""
PASETO v1/v2 - Protocol Identifiers and Parameters

Shared vocabulary for keys and engines: protocol versions, purposes,
key roles, header derivation and the per-version constant table.

SPDX-License-Identifier: AGPL-3.0-or-later
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict

from .exceptions import InvalidPurposeError, InvalidVersionError


class ProtocolVersion(str, Enum):
    """Supported protocol versions."""
    V1 = "v1"
    V2 = "v2"


class Purpose(str, Enum):
    """Token purposes."""
    LOCAL = "local"
    PUBLIC = "public"


class KeyRole(str, Enum):
    """Kind of key material, which fixes the purpose it may serve."""
    SYMMETRIC = "symmetric"
    SECRET = "secret"
    PUBLIC = "public"

    @property
    def purpose(self) -> Purpose:
        if self is KeyRole.SYMMETRIC:
            return Purpose.LOCAL
        return Purpose.PUBLIC


@dataclass(frozen=True)
class VersionParameters:
    """Fixed sizes and labels for one protocol version."""
    version: ProtocolVersion
    symmetric_key_size: int
    nonce_size: int          # bytes carried at the front of a local payload
    mac_size: int            # detached MAC (v1) or AEAD tag (v2)
    signature_size: int
    encryption_info: bytes   # HKDF info labels, v1 only
    authentication_info: bytes


VERSION_PARAMETERS: Dict[ProtocolVersion, VersionParameters] = {
    ProtocolVersion.V1: VersionParameters(
        version=ProtocolVersion.V1,
        symmetric_key_size=32,
        nonce_size=32,
        mac_size=48,            # HMAC-SHA384
        signature_size=256,     # RSA-2048 PSS
        encryption_info=b"paseto-encryption-key",
        authentication_info=b"paseto-auth-key-for-aead",
    ),
    ProtocolVersion.V2: VersionParameters(
        version=ProtocolVersion.V2,
        symmetric_key_size=32,
        nonce_size=24,          # XChaCha20
        mac_size=16,            # Poly1305
        signature_size=64,      # Ed25519
        encryption_info=b"",
        authentication_info=b"",
    ),
}


def parse_version(value) -> ProtocolVersion:
    """Coerce a version tag ("v1"/"v2" or an enum member)."""
    try:
        return ProtocolVersion(value)
    except ValueError:
        raise InvalidVersionError(f"Unsupported protocol version: {value!r}") from None


def parse_purpose(value) -> Purpose:
    """Coerce a purpose tag ("local"/"public" or an enum member)."""
    try:
        return Purpose(value)
    except ValueError:
        raise InvalidPurposeError(f"Unsupported purpose: {value!r}") from None


def get_parameters(version) -> VersionParameters:
    return VERSION_PARAMETERS[parse_version(version)]


def header(version, purpose) -> bytes:
    """
    Build the token header for (version, purpose), e.g. b"v2.local.".

    The header is always recomputed, never read back from a token.
    """
    return f"{parse_version(version).value}.{parse_purpose(purpose).value}.".encode("ascii")

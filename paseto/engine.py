"""
PASETO v1/v2 - Protocol Engine Base

Behaviour shared by the V1 and V2 engines: key/version checks and the
public-token (sign/verify) flow, which differs between versions only in
the signature primitive.

Engines receive keys as arguments and read only their version and role
tags; they never construct keys.

SPDX-License-Identifier: AGPL-3.0-or-later
"""

import logging
from abc import ABC, abstractmethod
from typing import Union

from .exceptions import InvalidPurposeError, InvalidVersionError, PasetoError
from .framing import decapsulate, encapsulate
from .pae import pae, to_bytes
from .protocol import (
    KeyRole,
    ProtocolVersion,
    Purpose,
    VersionParameters,
    get_parameters,
    header,
)


logger = logging.getLogger(__name__)

Data = Union[bytes, str]


class ProtocolEngine(ABC):
    """
    Base class for a single protocol version.

    Subclasses set `version` and implement encrypt/decrypt plus the two
    signature hooks.
    """

    version: ProtocolVersion

    @property
    def params(self) -> VersionParameters:
        return get_parameters(self.version)

    @property
    def local_header(self) -> bytes:
        return header(self.version, Purpose.LOCAL)

    @property
    def public_header(self) -> bytes:
        return header(self.version, Purpose.PUBLIC)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"

    def _check_key(self, key, role: KeyRole) -> None:
        """
        Fail closed unless `key` belongs to this version and role.

        Runs before any other work: no input parsing, randomness or
        cryptography happens for a rejected key.
        """
        key_version = getattr(key, "version", None)
        key_role = getattr(key, "role", None)

        if key_version is not self.version:
            logger.debug(
                "Rejected key for %s engine: key version %r", self.version.value, key_version
            )
            raise InvalidVersionError("The given key is not intended for this version of PASETO.")

        if key_role is not role:
            logger.debug(
                "Rejected key for %s engine: expected %s key, got %r",
                self.version.value, role.value, key_role,
            )
            raise InvalidPurposeError("The given key is not intended for this purpose.")

    # -------------------------------------------------------------------------
    # Public tokens
    # -------------------------------------------------------------------------

    def sign(self, data: Data, key, footer: Data = "") -> str:
        """Sign `data` and return a public token."""
        self._check_key(key, KeyRole.SECRET)

        data = to_bytes(data)
        footer = to_bytes(footer)
        token_header = self.public_header

        signature = self._sign_message(key.raw, pae(token_header, data, footer))
        return encapsulate(token_header, data + signature, footer)

    def verify(self, token: str, key, footer: Data = "") -> bytes:
        """
        Verify a public token and return its payload.

        Raises PasetoError if the signature does not match.
        """
        self._check_key(key, KeyRole.PUBLIC)

        token_header = self.public_header
        payload, footer = decapsulate(token_header, token, footer)

        size = self.params.signature_size
        if len(payload) < size:
            raise PasetoError("Invalid signature for this message")

        data, signature = payload[:-size], payload[-size:]

        if not self._verify_message(key.raw, signature, pae(token_header, data, footer)):
            logger.debug("Signature check failed for %s public token", self.version.value)
            raise PasetoError("Invalid signature for this message")

        return data

    @abstractmethod
    def _sign_message(self, secret: bytes, message: bytes) -> bytes:
        """Sign the PAE-encoded message with raw private key material."""

    @abstractmethod
    def _verify_message(self, public: bytes, signature: bytes, message: bytes) -> bool:
        """Return True if `signature` is valid for the PAE-encoded message."""

    # -------------------------------------------------------------------------
    # Local tokens
    # -------------------------------------------------------------------------

    def encrypt(self, data: Data, key, footer: Data = "") -> str:
        """Encrypt `data` and return a local token."""
        return self._encrypt(data, key, footer, None)

    @abstractmethod
    def _encrypt(self, data: Data, key, footer: Data, nonce_seed) -> str:
        """Encrypt with an optional fixed nonce seed."""

    @abstractmethod
    def decrypt(self, token: str, key, footer: Data = "") -> bytes:
        """Authenticate and decrypt a local token."""

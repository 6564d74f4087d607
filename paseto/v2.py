"""
PASETO v1/v2 - Version 2 Engine

local:  XChaCha20-Poly1305 (IETF), nonce = BLAKE2b(key=seed, message, 24)
public: Ed25519 detached signatures

Local payload layout: nonce (24) || ciphertext || tag (16).

SPDX-License-Identifier: AGPL-3.0-or-later
"""

from typing import Optional

from . import primitives
from .engine import Data, ProtocolEngine
from .exceptions import SecurityError
from .framing import decapsulate, encapsulate
from .pae import pae, to_bytes
from .protocol import KeyRole, ProtocolVersion


class V2(ProtocolEngine):
    """Protocol version 2 (libsodium constructions)."""

    version = ProtocolVersion.V2

    def nonce(self, message: bytes, seed: bytes) -> bytes:
        """Derive the 24-byte nonce from the message under a random seed."""
        return primitives.blake2b(message, key=seed, size=self.params.nonce_size)

    def _encrypt(self, data: Data, key, footer: Data, nonce_seed: Optional[bytes]) -> str:
        """
        Encrypt with an optional caller-chosen nonce seed.

        Internal API: a fixed seed exists only to reproduce known-answer
        vectors. Use encrypt().
        """
        self._check_key(key, KeyRole.SYMMETRIC)

        data = to_bytes(data)
        footer = to_bytes(footer)
        if nonce_seed is None:
            nonce_seed = primitives.random_bytes(self.params.nonce_size)

        token_header = self.local_header
        nonce = self.nonce(data, to_bytes(nonce_seed))

        ciphertext = primitives.xchacha20poly1305_encrypt(
            key.raw, nonce, data, pae(token_header, nonce, footer)
        )
        return encapsulate(token_header, nonce + ciphertext, footer)

    def decrypt(self, token: str, key, footer: Data = "") -> bytes:
        """Authenticate and decrypt a local token; SecurityError on failure."""
        self._check_key(key, KeyRole.SYMMETRIC)

        token_header = self.local_header
        payload, footer = decapsulate(token_header, token, footer)

        nonce_size = self.params.nonce_size
        if len(payload) < nonce_size + self.params.mac_size:
            raise SecurityError("Invalid message length")

        nonce, ciphertext = payload[:nonce_size], payload[nonce_size:]
        return primitives.xchacha20poly1305_decrypt(
            key.raw, nonce, ciphertext, pae(token_header, nonce, footer)
        )

    def _sign_message(self, secret: bytes, message: bytes) -> bytes:
        return primitives.ed25519_sign(secret, message)

    def _verify_message(self, public: bytes, signature: bytes, message: bytes) -> bool:
        return primitives.ed25519_verify(public, signature, message)

"""
PASETO v1/v2 - Version 1 Engine

local:  AES-256-CTR + HMAC-SHA384 (encrypt-then-MAC), subkeys via HKDF-SHA384
public: RSASSA-PSS with SHA-384, MGF1-SHA384, 48-byte salt, RSA-2048

Local payload layout: nonce (32) || ciphertext || mac (48).
The first 16 nonce bytes salt the HKDF split, the last 16 are the CTR
counter block.

SPDX-License-Identifier: AGPL-3.0-or-later
"""

import logging
from typing import Optional

from . import primitives
from .engine import Data, ProtocolEngine
from .exceptions import SecurityError
from .framing import decapsulate, encapsulate
from .pae import pae, to_bytes
from .protocol import KeyRole, ProtocolVersion


logger = logging.getLogger(__name__)


class V1(ProtocolEngine):
    """Protocol version 1 (RSA, AES-CTR, HMAC-SHA384)."""

    version = ProtocolVersion.V1

    def nonce(self, message: bytes, seed: bytes) -> bytes:
        """
        Derive the nonce from the message under a random seed.

        A repeated (seed, message) pair yields a repeated nonce for the same
        message only, never a reused CTR stream over a different message.
        """
        return primitives.hmac_sha384(seed, message)[:self.params.nonce_size]

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

        encryption_key, authentication_key = key.split(nonce[:16])
        ciphertext = primitives.aes256_ctr(encryption_key, nonce[16:], data)
        mac = primitives.hmac_sha384(
            authentication_key, pae(token_header, nonce, ciphertext, footer)
        )

        return encapsulate(token_header, nonce + ciphertext + mac, footer)

    def decrypt(self, token: str, key, footer: Data = "") -> bytes:
        """
        Authenticate and decrypt a local token.

        The MAC is checked in constant time before any decryption; a
        mismatch raises SecurityError.
        """
        self._check_key(key, KeyRole.SYMMETRIC)

        token_header = self.local_header
        payload, footer = decapsulate(token_header, token, footer)

        nonce_size = self.params.nonce_size
        mac_size = self.params.mac_size
        if len(payload) < nonce_size + mac_size:
            raise SecurityError("Invalid message length")

        nonce = payload[:nonce_size]
        ciphertext = payload[nonce_size:-mac_size]
        mac = payload[-mac_size:]

        encryption_key, authentication_key = key.split(nonce[:16])
        expected = primitives.hmac_sha384(
            authentication_key, pae(token_header, nonce, ciphertext, footer)
        )
        if not primitives.constant_time_equal(mac, expected):
            logger.debug("MAC check failed for v1 local token")
            raise SecurityError("Invalid MAC for given ciphertext.")

        return primitives.aes256_ctr(encryption_key, nonce[16:], ciphertext)

    def _sign_message(self, secret: bytes, message: bytes) -> bytes:
        return primitives.rsa_pss_sign(secret, message)

    def _verify_message(self, public: bytes, signature: bytes, message: bytes) -> bool:
        return primitives.rsa_pss_verify(public, signature, message)

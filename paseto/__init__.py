"""
PASETO v1/v2 - Protocol Engine

Platform-Agnostic SEcurity TOkens, versions 1 and 2:

- local tokens: authenticated encryption with a SymmetricKey
- public tokens: signatures with a PrivateKey, verified with a PublicKey
- Pre-Authentication Encoding (PAE) binding header, nonce and footer
- constant-time header, footer and MAC checks
- keys statically bound to one protocol version and purpose

Payloads and footers are opaque bytes; claims, builders and validation
rules belong to callers.

SPDX-License-Identifier: AGPL-3.0-or-later
"""

__version__ = "0.1.0"

from . import primitives
from .exceptions import (
    PasetoError,
    InvalidVersionError,
    InvalidPurposeError,
    SecurityError,
    EncodingError,
    InvalidKeyError,
)
from .protocol import ProtocolVersion, Purpose, KeyRole
from .pae import pae
from .framing import extract_footer, parse_header
from .keys import SymmetricKey, PrivateKey, PublicKey
from .v1 import V1
from .v2 import V2
from .dispatch import Paseto, get_engine, encrypt, decrypt, sign, verify, open

primitives.initialize()

__all__ = [
    "PasetoError",
    "InvalidVersionError",
    "InvalidPurposeError",
    "SecurityError",
    "EncodingError",
    "InvalidKeyError",
    "ProtocolVersion",
    "Purpose",
    "KeyRole",
    "pae",
    "extract_footer",
    "parse_header",
    "SymmetricKey",
    "PrivateKey",
    "PublicKey",
    "V1",
    "V2",
    "Paseto",
    "get_engine",
    "encrypt",
    "decrypt",
    "sign",
    "verify",
    "open",
]

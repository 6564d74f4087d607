"""
PASETO v1/v2 - Dispatch Facade

Routes operations to the V1 or V2 engine. Outgoing operations are routed
by the key's version; incoming tokens by the version and purpose declared
in their header. The facade performs no cryptography itself and never
falls back from one version to another.

SPDX-License-Identifier: AGPL-3.0-or-later
"""

import logging
from typing import Iterable, Optional

from .engine import Data, ProtocolEngine
from .exceptions import InvalidPurposeError, InvalidVersionError
from .framing import parse_header
from .protocol import ProtocolVersion, Purpose, parse_version
from .v1 import V1
from .v2 import V2


logger = logging.getLogger(__name__)

ENGINES: dict[ProtocolVersion, ProtocolEngine] = {
    ProtocolVersion.V1: V1(),
    ProtocolVersion.V2: V2(),
}


def get_engine(version) -> ProtocolEngine:
    """Return the shared engine for a protocol version."""
    return ENGINES[parse_version(version)]


class Paseto:
    """
    Version-routing front end for the protocol engines.

    Args:
        allowed_versions: versions this instance will produce or accept.
            Tokens and keys of any other version are rejected with
            InvalidVersionError.
    """

    def __init__(self, allowed_versions: Optional[Iterable] = None):
        if allowed_versions is None:
            allowed_versions = tuple(ProtocolVersion)
        self.allowed_versions = frozenset(parse_version(v) for v in allowed_versions)
        if not self.allowed_versions:
            raise ValueError("At least one protocol version must be allowed")

    def __repr__(self) -> str:
        versions = ", ".join(sorted(v.value for v in self.allowed_versions))
        return f"Paseto(allowed_versions=[{versions}])"

    def _engine(self, version) -> ProtocolEngine:
        version = parse_version(version)
        if version not in self.allowed_versions:
            raise InvalidVersionError(f"Protocol version {version.value} is not allowed")
        return ENGINES[version]

    def _engine_for_key(self, key) -> ProtocolEngine:
        version = getattr(key, "version", None)
        if version is None:
            raise InvalidVersionError("The given key is not bound to a protocol version")
        return self._engine(version)

    def _engine_for_token(self, token: str, purpose: Purpose) -> ProtocolEngine:
        version, declared = parse_header(token)
        if declared is not purpose:
            raise InvalidPurposeError(
                f"Expected a {purpose.value} token, got a {declared.value} token"
            )
        logger.debug("Routing %s.%s token", version.value, declared.value)
        return self._engine(version)

    def encrypt(self, data: Data, key, footer: Data = "") -> str:
        return self._engine_for_key(key).encrypt(data, key, footer)

    def sign(self, data: Data, key, footer: Data = "") -> str:
        return self._engine_for_key(key).sign(data, key, footer)

    def decrypt(self, token: str, key, footer: Data = "") -> bytes:
        return self._engine_for_token(token, Purpose.LOCAL).decrypt(token, key, footer)

    def verify(self, token: str, key, footer: Data = "") -> bytes:
        return self._engine_for_token(token, Purpose.PUBLIC).verify(token, key, footer)

    def open(self, token: str, key, footer: Data = "") -> bytes:
        """Decrypt a local token or verify a public one, per its header."""
        _, purpose = parse_header(token)
        if purpose is Purpose.LOCAL:
            return self.decrypt(token, key, footer)
        return self.verify(token, key, footer)


_default = Paseto()


def encrypt(data: Data, key, footer: Data = "") -> str:
    return _default.encrypt(data, key, footer)


def decrypt(token: str, key, footer: Data = "") -> bytes:
    return _default.decrypt(token, key, footer)


def sign(data: Data, key, footer: Data = "") -> str:
    return _default.sign(data, key, footer)


def verify(token: str, key, footer: Data = "") -> bytes:
    return _default.verify(token, key, footer)


def open(token: str, key, footer: Data = "") -> bytes:
    """Module-level shortcut for Paseto().open()."""
    return _default.open(token, key, footer)

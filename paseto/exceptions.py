"""
PASETO v1/v2 - Error Types

Every error raised by the package derives from PasetoError so callers can
catch protocol failures with a single except clause.

SPDX-License-Identifier: AGPL-3.0-or-later
"""


class PasetoError(Exception):
    """Base error; also raised when a signature does not verify."""
    pass


class InvalidVersionError(PasetoError):
    """A key, engine or token belongs to a different protocol version."""
    pass


class InvalidPurposeError(InvalidVersionError):
    """A key or token is not intended for the requested purpose."""
    pass


class SecurityError(PasetoError):
    """Authentication failed: bad MAC/tag, header or footer."""
    pass


class EncodingError(PasetoError):
    """Malformed base64url, token shape, or an unencodable length."""
    pass


class InvalidKeyError(PasetoError, ValueError):
    """Key material of the wrong length or format for its version."""
    pass

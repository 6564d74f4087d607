"""
PASETO v1/v2 - Token Framing

Builds and parses the wire format:

    <version>.<purpose>.<base64url(payload)>[.<base64url(footer)>]

base64url is always unpadded. Header and footer checks run in constant
time, before the engine touches any cryptographic state.

SPDX-License-Identifier: AGPL-3.0-or-later
"""

import base64
import binascii
import re
from typing import Optional, Union

from .exceptions import EncodingError, SecurityError
from .pae import to_bytes
from .primitives import constant_time_equal
from .protocol import ProtocolVersion, Purpose, parse_purpose, parse_version


_B64URL_ALPHABET = re.compile(r"^[A-Za-z0-9_-]*$")


def b64url_encode(data: bytes) -> str:
    """Encode bytes as unpadded base64url."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def b64url_decode(data: Union[str, bytes]) -> bytes:
    """
    Decode unpadded base64url, rejecting anything else.

    Padding characters, characters outside the url-safe alphabet and
    impossible lengths all raise EncodingError.
    """
    if isinstance(data, bytes):
        try:
            data = data.decode("ascii")
        except UnicodeDecodeError:
            raise EncodingError("Invalid encoding detected") from None

    if not _B64URL_ALPHABET.match(data) or len(data) % 4 == 1:
        raise EncodingError("Invalid encoding detected")

    try:
        return base64.urlsafe_b64decode(data + "=" * (-len(data) % 4))
    except (binascii.Error, ValueError) as exc:
        raise EncodingError("Invalid encoding detected") from exc


def split_token(token: str) -> list[str]:
    """Split a token into its 3 or 4 segments."""
    if not isinstance(token, str):
        raise TypeError(f"Token must be a str, got {type(token).__name__}")

    pieces = token.split(".")
    if len(pieces) not in (3, 4):
        raise EncodingError("Truncated or invalid token")
    return pieces


def parse_header(token: str) -> tuple[ProtocolVersion, Purpose]:
    """Read the declared (version, purpose) from a token without verifying it."""
    version, purpose = split_token(token)[:2]
    return parse_version(version), parse_purpose(purpose)


def extract_footer(token: str) -> bytes:
    """
    Return the decoded footer of a token, or b"" when there is none.

    The footer is NOT authenticated by this call; it is meant for picking a
    key (e.g. by key id) before decrypt() or verify() checks it.
    """
    pieces = split_token(token)
    return b64url_decode(pieces[3]) if len(pieces) == 4 else b""


def encapsulate(header: bytes, payload: bytes, footer: bytes = b"") -> str:
    """Assemble header || b64url(payload) [|| "." || b64url(footer)]."""
    token = header.decode("ascii") + b64url_encode(payload)
    if footer:
        token += "." + b64url_encode(footer)
    return token


def decapsulate(
    header: bytes,
    token: str,
    footer: Optional[Union[bytes, str]] = None,
) -> tuple[bytes, bytes]:
    """
    Validate and strip header and footer from a token.

    If an expected footer is given it must match the token's trailing
    segment; otherwise the trailing segment (if any) becomes the footer.

    Returns (payload, footer).
    """
    pieces = split_token(token)
    expected_footer = to_bytes(footer)

    if expected_footer:
        trailing = pieces[3] if len(pieces) == 4 else ""
        if not constant_time_equal(
            trailing.encode("ascii", "replace"),
            b64url_encode(expected_footer).encode("ascii"),
        ):
            raise SecurityError("Invalid message footer")
        found_footer = expected_footer
    elif len(pieces) == 4:
        found_footer = b64url_decode(pieces[3])
    else:
        found_footer = b""

    body = ".".join(pieces[:3]).encode("utf-8")
    if not constant_time_equal(body[:len(header)], header):
        raise SecurityError("Invalid message header")

    payload = b64url_decode(body[len(header):])
    return payload, found_footer

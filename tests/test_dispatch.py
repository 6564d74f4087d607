"""
Tests for the version-routing facade and module-level shortcuts.

SPDX-License-Identifier: AGPL-3.0-or-later
"""

import pytest

import paseto
from paseto.dispatch import Paseto, get_engine
from paseto.engine import ProtocolEngine
from paseto.exceptions import (
    EncodingError,
    InvalidPurposeError,
    InvalidVersionError,
    SecurityError,
)
from paseto.keys import SymmetricKey
from paseto.protocol import ProtocolVersion
from paseto.v1 import V1
from paseto.v2 import V2


@pytest.fixture
def v1_key():
    return SymmetricKey.generate(ProtocolVersion.V1)


@pytest.fixture
def v2_key():
    return SymmetricKey.generate(ProtocolVersion.V2)


class TestEngineBase:

    def test_base_is_abstract(self):
        with pytest.raises(TypeError):
            ProtocolEngine()

    def test_partial_engine_is_abstract(self):
        class SignOnly(ProtocolEngine):
            version = ProtocolVersion.V2

            def _sign_message(self, secret, message):
                return b""

            def _verify_message(self, public, signature, message):
                return False

        with pytest.raises(TypeError):
            SignOnly()

    def test_engines_are_engines(self):
        assert isinstance(get_engine("v1"), ProtocolEngine)
        assert isinstance(get_engine("v2"), ProtocolEngine)


class TestGetEngine:

    def test_by_enum(self):
        assert isinstance(get_engine(ProtocolVersion.V1), V1)
        assert isinstance(get_engine(ProtocolVersion.V2), V2)

    def test_by_string(self):
        assert isinstance(get_engine("v2"), V2)

    def test_unknown_version(self):
        with pytest.raises(InvalidVersionError):
            get_engine("v3")


class TestRouting:
    """Outgoing calls follow the key, incoming calls follow the header."""

    def test_encrypt_routes_by_key(self, v1_key, v2_key):
        facade = Paseto()
        assert facade.encrypt("x", v1_key).startswith("v1.local.")
        assert facade.encrypt("x", v2_key).startswith("v2.local.")

    def test_sign_routes_by_key(self, v1_private_key, v2_private_key):
        facade = Paseto()
        assert facade.sign("x", v1_private_key).startswith("v1.public.")
        assert facade.sign("x", v2_private_key).startswith("v2.public.")

    def test_local_roundtrip(self, v2_key):
        facade = Paseto()
        token = facade.encrypt("secret", v2_key, "kid")
        assert facade.decrypt(token, v2_key, "kid") == b"secret"

    def test_public_roundtrip(self, v1_private_key):
        facade = Paseto()
        token = facade.sign("hello", v1_private_key)
        assert facade.verify(token, v1_private_key.public_key()) == b"hello"

    def test_token_version_must_match_key(self, v1_key, v2_key):
        token = Paseto().encrypt("x", v1_key)
        with pytest.raises(InvalidVersionError):
            Paseto().decrypt(token, v2_key)

    def test_decrypt_rejects_public_token(self, v2_private_key, v2_key):
        token = Paseto().sign("x", v2_private_key)
        with pytest.raises(InvalidPurposeError):
            Paseto().decrypt(token, v2_key)

    def test_verify_rejects_local_token(self, v2_private_key, v2_key):
        token = Paseto().encrypt("x", v2_key)
        with pytest.raises(InvalidPurposeError):
            Paseto().verify(token, v2_private_key.public_key())

    def test_unknown_header(self, v2_key):
        with pytest.raises(InvalidVersionError):
            Paseto().decrypt("v9.local.AAAA", v2_key)

    def test_unknown_purpose(self, v2_key):
        with pytest.raises(InvalidPurposeError):
            Paseto().decrypt("v2.secret.AAAA", v2_key)

    def test_malformed_token(self, v2_key):
        with pytest.raises(EncodingError):
            Paseto().decrypt("v2.local", v2_key)

    def test_untagged_key(self):
        with pytest.raises(InvalidVersionError):
            Paseto().encrypt("x", b"\x00" * 32)


class TestAllowedVersions:

    def test_default_allows_both(self):
        assert Paseto().allowed_versions == frozenset(ProtocolVersion)

    def test_string_versions(self):
        assert Paseto(["v2"]).allowed_versions == frozenset({ProtocolVersion.V2})

    def test_empty_rejected(self):
        with pytest.raises(ValueError):
            Paseto([])

    def test_disallowed_key(self, v1_key):
        with pytest.raises(InvalidVersionError):
            Paseto([ProtocolVersion.V2]).encrypt("x", v1_key)

    def test_disallowed_token(self, v1_key):
        token = Paseto().encrypt("x", v1_key)
        with pytest.raises(InvalidVersionError):
            Paseto([ProtocolVersion.V2]).decrypt(token, v1_key)

    def test_repr(self):
        assert repr(Paseto(["v2", "v1"])) == "Paseto(allowed_versions=[v1, v2])"


class TestOpen:

    def test_open_local(self, v2_key):
        facade = Paseto()
        assert facade.open(facade.encrypt("x", v2_key), v2_key) == b"x"

    def test_open_public(self, v2_private_key):
        facade = Paseto()
        token = facade.sign("x", v2_private_key, "f")
        assert facade.open(token, v2_private_key.public_key(), "f") == b"x"

    def test_open_with_wrong_key_kind(self, v2_private_key, v2_key):
        token = Paseto().encrypt("x", v2_key)
        with pytest.raises(InvalidPurposeError):
            Paseto().open(token, v2_private_key.public_key())


class TestModuleShortcuts:

    def test_encrypt_decrypt(self, v1_key):
        token = paseto.encrypt("payload", v1_key, "footer")
        assert paseto.decrypt(token, v1_key, "footer") == b"payload"

    def test_sign_verify(self, v2_private_key):
        token = paseto.sign("payload", v2_private_key)
        assert paseto.verify(token, v2_private_key.public_key()) == b"payload"

    def test_open(self, v2_key):
        from paseto.dispatch import open as open_token
        assert open_token(paseto.encrypt("payload", v2_key), v2_key) == b"payload"

    def test_footer_mismatch(self, v2_key):
        token = paseto.encrypt("payload", v2_key, "a")
        with pytest.raises(SecurityError):
            paseto.decrypt(token, v2_key, "b")

    def test_extract_footer_before_decrypt(self, v2_key):
        token = paseto.encrypt("payload", v2_key, '{"kid":"k1"}')
        assert paseto.extract_footer(token) == b'{"kid":"k1"}'
        assert paseto.parse_header(token) == (ProtocolVersion.V2, paseto.Purpose.LOCAL)

    def test_open_exported(self):
        assert "open" in paseto.__all__
        assert paseto.open is paseto.dispatch.open

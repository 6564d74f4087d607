"""
PASETO v1/v2 - Primitive Provider

Narrow wrappers around the cryptographic libraries the engines consume.
Nothing here is implemented from scratch:

- cryptography: AES-256-CTR, HMAC-SHA384, HKDF-SHA384, RSA-PSS, Ed25519,
  constant-time comparison, RSA key generation and public-key extraction
- PyNaCl (libsodium): XChaCha20-Poly1305-IETF, keyed BLAKE2b, Ed25519
  seed expansion, CSPRNG

SPDX-License-Identifier: AGPL-3.0-or-later
"""

import threading

import nacl.bindings
import nacl.encoding
import nacl.hash
import nacl.utils
from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import constant_time, hashes, hmac, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)
from cryptography.hazmat.primitives.asymmetric.rsa import (
    RSAPrivateKey,
    RSAPublicKey,
)
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.kdf.hkdf import HKDF
from nacl.exceptions import CryptoError

from .exceptions import InvalidKeyError, SecurityError


RSA_KEY_SIZE = 2048
RSA_PUBLIC_EXPONENT = 65537

ED25519_SEED_SIZE = nacl.bindings.crypto_sign_SEEDBYTES
ED25519_SECRET_KEY_SIZE = nacl.bindings.crypto_sign_SECRETKEYBYTES
ED25519_PUBLIC_KEY_SIZE = nacl.bindings.crypto_sign_PUBLICKEYBYTES
# secret key || public key, as some tools export it
ED25519_KEYPAIR_SIZE = ED25519_SECRET_KEY_SIZE + ED25519_PUBLIC_KEY_SIZE

_init_lock = threading.Lock()
_initialized = False


def initialize() -> None:
    """
    Initialize libsodium once per process.

    Idempotent and safe to call from several threads; only the first call
    does any work.
    """
    global _initialized
    if _initialized:
        return
    with _init_lock:
        if not _initialized:
            nacl.bindings.sodium_init()
            _initialized = True


def random_bytes(size: int) -> bytes:
    return nacl.utils.random(size)


def constant_time_equal(a: bytes, b: bytes) -> bool:
    """Compare two byte strings without leaking where they differ."""
    return constant_time.bytes_eq(bytes(a), bytes(b))


# -----------------------------------------------------------------------------
# Hashing and key derivation
# -----------------------------------------------------------------------------

def hmac_sha384(key: bytes, message: bytes) -> bytes:
    mac = hmac.HMAC(key, hashes.SHA384())
    mac.update(message)
    return mac.finalize()


def hkdf_sha384(ikm: bytes, salt: bytes, info: bytes, length: int = 32) -> bytes:
    return HKDF(
        algorithm=hashes.SHA384(),
        length=length,
        salt=salt,
        info=info,
    ).derive(ikm)


def blake2b(message: bytes, key: bytes, size: int) -> bytes:
    """Keyed BLAKE2b with a custom output length."""
    return nacl.hash.blake2b(
        message,
        digest_size=size,
        key=key,
        encoder=nacl.encoding.RawEncoder,
    )


# -----------------------------------------------------------------------------
# Symmetric encryption
# -----------------------------------------------------------------------------

def aes256_ctr(key: bytes, counter: bytes, data: bytes) -> bytes:
    """AES-256-CTR keystream XOR; the same call encrypts and decrypts."""
    cipher = Cipher(algorithms.AES(key), modes.CTR(counter))
    transform = cipher.encryptor()
    return transform.update(data) + transform.finalize()


def xchacha20poly1305_encrypt(key: bytes, nonce: bytes, message: bytes, aad: bytes) -> bytes:
    """Return ciphertext || 16-byte tag."""
    return nacl.bindings.crypto_aead_xchacha20poly1305_ietf_encrypt(
        message, aad, nonce, key
    )


def xchacha20poly1305_decrypt(key: bytes, nonce: bytes, ciphertext: bytes, aad: bytes) -> bytes:
    """Verify the tag and decrypt; raises SecurityError on any mismatch."""
    try:
        return nacl.bindings.crypto_aead_xchacha20poly1305_ietf_decrypt(
            ciphertext, aad, nonce, key
        )
    except CryptoError as exc:
        raise SecurityError("Invalid authentication tag for given ciphertext") from exc


# -----------------------------------------------------------------------------
# Ed25519
# -----------------------------------------------------------------------------

def ed25519_seed_keypair(seed: bytes) -> tuple[bytes, bytes]:
    """Expand a 32-byte seed into (public_key, secret_key)."""
    return nacl.bindings.crypto_sign_seed_keypair(seed)


def ed25519_public_from_secret(secret_key: bytes) -> bytes:
    return nacl.bindings.crypto_sign_ed25519_sk_to_pk(secret_key)


def ed25519_sign(secret_key: bytes, message: bytes) -> bytes:
    """Detached signature using the seed half of a 64-byte secret key."""
    signer = Ed25519PrivateKey.from_private_bytes(secret_key[:ED25519_SEED_SIZE])
    return signer.sign(message)


def ed25519_verify(public_key: bytes, signature: bytes, message: bytes) -> bool:
    """Verify a detached signature. Returns True if valid."""
    try:
        Ed25519PublicKey.from_public_bytes(public_key).verify(signature, message)
        return True
    except InvalidSignature:
        return False


# -----------------------------------------------------------------------------
# RSA-PSS (SHA-384, MGF1-SHA384, salt length = digest length)
# -----------------------------------------------------------------------------

def _pss() -> padding.PSS:
    return padding.PSS(
        mgf=padding.MGF1(hashes.SHA384()),
        salt_length=padding.PSS.DIGEST_LENGTH,
    )


def rsa_generate_private_pem() -> bytes:
    """Generate a fresh RSA-2048 key as PKCS#1 PEM."""
    private_key = rsa.generate_private_key(
        public_exponent=RSA_PUBLIC_EXPONENT,
        key_size=RSA_KEY_SIZE,
    )
    return private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.TraditionalOpenSSL,
        encryption_algorithm=serialization.NoEncryption(),
    )


def rsa_load_private(pem: bytes) -> RSAPrivateKey:
    """Load an unencrypted RSA-2048 private key from PEM."""
    try:
        private_key = serialization.load_pem_private_key(pem, password=None)
    except (ValueError, TypeError) as exc:
        raise InvalidKeyError("Private key is not a valid unencrypted PEM key") from exc

    if not isinstance(private_key, RSAPrivateKey):
        raise InvalidKeyError("v1 private keys must be RSA keys")
    if private_key.key_size != RSA_KEY_SIZE:
        raise InvalidKeyError(
            f"v1 private keys must be {RSA_KEY_SIZE}-bit RSA; "
            f"{private_key.key_size} given."
        )
    return private_key


def rsa_load_public(pem: bytes) -> RSAPublicKey:
    """Load an RSA-2048 public key (SubjectPublicKeyInfo or PKCS#1 PEM)."""
    try:
        public_key = serialization.load_pem_public_key(pem)
    except (ValueError, TypeError, NotImplementedError) as exc:
        raise InvalidKeyError("Public key is not a valid PEM key") from exc

    if not isinstance(public_key, RSAPublicKey):
        raise InvalidKeyError("v1 public keys must be RSA keys")
    if public_key.key_size != RSA_KEY_SIZE:
        raise InvalidKeyError(
            f"v1 public keys must be {RSA_KEY_SIZE}-bit RSA; "
            f"{public_key.key_size} given."
        )
    return public_key


def rsa_public_pem(private_pem: bytes) -> bytes:
    """Extract the SubjectPublicKeyInfo PEM for an RSA private key."""
    return rsa_load_private(private_pem).public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )


def rsa_pss_sign(private_pem: bytes, message: bytes) -> bytes:
    return rsa_load_private(private_pem).sign(message, _pss(), hashes.SHA384())


def rsa_pss_verify(public_pem: bytes, signature: bytes, message: bytes) -> bool:
    """Verify an RSA-PSS signature. Returns True if valid."""
    try:
        rsa_load_public(public_pem).verify(signature, message, _pss(), hashes.SHA384())
        return True
    except InvalidSignature:
        return False

#!/usr/bin/env python3
"""
PASETO v1/v2 - Basic Flow Demo

Demonstrates the complete flow of:
1. Generating keys for both protocol versions
2. Encrypting and decrypting local tokens
3. Signing and verifying public tokens
4. Picking a key by footer before opening a token
5. Rejecting a tampered token and a key of the wrong version

SPDX-License-Identifier: AGPL-3.0-or-later
"""

import sys
from pathlib import Path

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import json

from paseto import (
    Paseto,
    PasetoError,
    PrivateKey,
    ProtocolVersion,
    SymmetricKey,
    extract_footer,
    parse_header,
)


def main():
    print("=" * 60)
    print("PASETO v1/v2 - Basic Flow Demo")
    print("=" * 60)
    print()

    facade = Paseto()
    claims = json.dumps(
        {"sub": "demo-user", "exp": "2030-01-01T00:00:00+00:00"},
        separators=(",", ":"),
    )

    # Step 1: Generate keys
    print("[1] Generating keys...")
    local_keys = {
        "k-v1": SymmetricKey.generate(ProtocolVersion.V1),
        "k-v2": SymmetricKey.generate(ProtocolVersion.V2),
    }
    v1_signer = PrivateKey.generate(ProtocolVersion.V1)
    v2_signer = PrivateKey.generate(ProtocolVersion.V2)
    print("    Symmetric keys: v1, v2")
    print("    Signing keys: v1 (RSA-2048), v2 (Ed25519)")
    print()

    # Step 2: Local tokens
    print("[2] Encrypting claims as local tokens...")
    tokens = {}
    for kid, key in local_keys.items():
        footer = json.dumps({"kid": kid}, separators=(",", ":"))
        tokens[kid] = facade.encrypt(claims, key, footer)
        print(f"    {kid}: {tokens[kid][:48]}...")
    print()

    # Step 3: Select key by footer, then decrypt
    print("[3] Selecting key by footer and decrypting...")
    for token in tokens.values():
        kid = json.loads(extract_footer(token))["kid"]
        version, purpose = parse_header(token)
        payload = facade.decrypt(token, local_keys[kid])
        print(f"    {version.value}.{purpose.value} ({kid}): {payload.decode('utf-8')}")
    print()

    # Step 4: Public tokens
    print("[4] Signing and verifying public tokens...")
    for signer in (v1_signer, v2_signer):
        token = facade.sign(claims, signer)
        payload = facade.verify(token, signer.public_key())
        print(f"    {signer.version.value}: verified, {len(token)} characters")
        assert payload == claims.encode("utf-8")
    print()

    # Step 5: Tampering
    print("[5] Tampering with a signed token...")
    token = facade.sign(claims, v2_signer)
    tampered = token[:-2] + ("AA" if token[-2:] != "AA" else "BB")
    try:
        facade.verify(tampered, v2_signer.public_key())
        print("    Result: ACCEPTED")
    except PasetoError as e:
        print(f"    Result: REJECTED ({type(e).__name__}: {e})")
    print()

    # Step 6: Version confusion
    print("[6] Decrypting a v2 token with a v1 key...")
    try:
        facade.decrypt(tokens["k-v2"], local_keys["k-v1"])
        print("    Result: ACCEPTED")
    except PasetoError as e:
        print(f"    Result: REJECTED ({type(e).__name__}: {e})")
        print("    This is correct behavior - keys are bound to one version")
    print()

    print("=" * 60)
    print("Demo completed successfully!")
    print()
    print("Key principles demonstrated:")
    print("  - Keys are bound to one version and one purpose")
    print("  - Footers are authenticated but readable before opening")
    print("  - Any modification of a token is rejected")
    print("=" * 60)


if __name__ == "__main__":
    main()

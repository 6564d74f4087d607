"""
Pytest configuration and shared fixtures.

SPDX-License-Identifier: AGPL-3.0-or-later
"""

import sys
from pathlib import Path

import pytest

# Add the repository root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from paseto.keys import PrivateKey
from paseto.protocol import ProtocolVersion


@pytest.fixture(scope="session")
def v1_private_key():
    """A freshly generated RSA-2048 signing key, shared across the session."""
    return PrivateKey.generate(ProtocolVersion.V1)


@pytest.fixture(scope="session")
def v2_private_key():
    return PrivateKey.generate(ProtocolVersion.V2)

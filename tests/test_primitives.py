"""
Tests for the primitive provider's one-time initialization.

SPDX-License-Identifier: AGPL-3.0-or-later
"""

import threading

import nacl.bindings
import pytest

from paseto import primitives


@pytest.fixture
def sodium_calls(monkeypatch):
    """Count calls to the sodium initializer, starting uninitialized."""
    calls = []
    monkeypatch.setattr(nacl.bindings, "sodium_init", lambda: calls.append(1))
    monkeypatch.setattr(primitives, "_initialized", False)
    return calls


class TestInitialize:
    """Tests for primitives.initialize()."""

    def test_runs_once(self, sodium_calls):
        primitives.initialize()
        primitives.initialize()
        primitives.initialize()
        assert len(sodium_calls) == 1
        assert primitives._initialized is True

    def test_noop_once_initialized(self, sodium_calls, monkeypatch):
        monkeypatch.setattr(primitives, "_initialized", True)
        primitives.initialize()
        assert sodium_calls == []

    def test_concurrent_calls_initialize_once(self, sodium_calls):
        start = threading.Barrier(8)

        def worker():
            start.wait()
            primitives.initialize()

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(sodium_calls) == 1

    def test_package_import_initialized(self):
        import paseto  # noqa: F401
        assert primitives._initialized is True

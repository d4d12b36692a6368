"""Pytest configuration and fixtures for wires-mcp tests."""

import logging

import pytest

from wires_mcp.config import Repository
from wires_mcp.store import WireStore, init_repository


@pytest.fixture
def repo(tmp_path) -> Repository:
    """A freshly initialized repository in a temporary directory."""
    return init_repository(tmp_path / "project")


@pytest.fixture
def store(repo) -> WireStore:
    """Store bound to the temporary repository."""
    return WireStore(repo, busy_timeout=5.0)


@pytest.fixture
def wires_env(monkeypatch, store) -> WireStore:
    """Point WIRES_DIR at the temporary repository for tools and the command line."""
    monkeypatch.setenv("WIRES_DIR", str(store.repo.root))
    monkeypatch.delenv("WIRES_LOG_LEVEL", raising=False)
    yield store
    # setup_logging() binds a handler to whatever stderr was current.
    root = logging.getLogger()
    for h in list(root.handlers):
        root.removeHandler(h)


@pytest.fixture
def make_chain(store):
    """Create wires A, B, C with A depending on B and B depending on C."""

    def _make():
        a = store.create_task("A")
        b = store.create_task("B")
        c = store.create_task("C")
        store.add_dependency(a.id, b.id)
        store.add_dependency(b.id, c.id)
        return a, b, c

    return _make

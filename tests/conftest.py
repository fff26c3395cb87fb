"""
tests/conftest.py -- Shared test fixtures for AuthKit.

This module provides:
  - store: a fresh in-memory UserStore per test (unit tests)
  - make_user: factory that writes a user straight into a store
  - api_client: TestClient wired to an isolated store, plus an admin session

Design: Named shared-memory SQLite URIs (not plain :memory:) back the API
fixture because TestClient runs sync route handlers in a thread pool. Plain
:memory: DBs are per-connection and would present a blank schema to each
worker thread. The named URI format shares one in-memory instance across all
connections in the same process.

DEBUG must be set before any auth/core import so get_settings() can
auto-generate SECRET_KEY instead of raising. BCRYPT_ROUNDS is dropped to the
bcrypt minimum so hashing does not dominate the test run.
"""

from __future__ import annotations

import os
import uuid
from collections.abc import Callable, Generator
from contextlib import asynccontextmanager
from dataclasses import dataclass

# CRITICAL: set before any auth/core import (get_settings() is cached).
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("ALLOWED_HOSTS", '["testserver", "localhost"]')

import pytest
from fastapi.testclient import TestClient

from api.main import app
from auth.models import Role, User
from auth.passwords import hash_password
from auth.store import UserStore
from auth.tokens import issue_token

ADMIN_PASSWORD = "adminpass1"


def unique_email(prefix: str = "user") -> str:
    return f"{prefix}_{uuid.uuid4().hex[:12]}@example.com"


# ---------------------------------------------------------------------------
# Unit-test fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def store() -> Generator[UserStore, None, None]:
    s = UserStore("sqlite:///:memory:")
    yield s
    s.close()


@pytest.fixture
def make_user() -> Callable[..., User]:
    """Return a factory: make_user(store, name=..., password=..., role=...) -> User."""

    def _make(
        target: UserStore,
        name: str = "Rona",
        email: str | None = None,
        password: str = "secret1",
        role: Role = Role.user,
    ) -> User:
        return target.create(name, email or unique_email(), hash_password(password), role=role)

    return _make


# ---------------------------------------------------------------------------
# API fixture
# ---------------------------------------------------------------------------


@dataclass
class ApiContext:
    client: TestClient
    store: UserStore
    admin: User
    admin_token: str


def _patch_lifespan(user_store: UserStore):
    """Return a lifespan that wires the test store into app.state."""

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.user_store = user_store
        yield

    return test_lifespan


@pytest.fixture(scope="module")
def api_client(request) -> Generator[ApiContext, None, None]:
    """Yield an ApiContext for API integration tests.

    One isolated in-memory database per test module. An admin account is
    created directly in the store (there is no HTTP path to the admin role)
    and a session token is minted for it.
    """
    db_name = request.module.__name__.replace(".", "_")
    user_store = UserStore(f"sqlite:///file:{db_name}?mode=memory&cache=shared&uri=true")

    admin = user_store.create("Admin", unique_email("admin"), hash_password(ADMIN_PASSWORD), role=Role.admin)
    admin_token = issue_token(admin.id)

    app.router.lifespan_context = _patch_lifespan(user_store)

    with TestClient(app, raise_server_exceptions=True) as client:
        yield ApiContext(client=client, store=user_store, admin=admin, admin_token=admin_token)

    user_store.close()

"""
tests/conftest.py -- Shared test fixtures for LinkDeck integration tests.

This module provides:
  - _make_test_stores(): creates isolated in-memory DBs for users + catalog
  - _patch_lifespan(): wires test stores into app.state, bypassing real startup
  - api_client: TestClient with an admin JWT for API integration tests
  - link_store / user_store: plain in-memory stores for unit tests

Design: Named shared-memory SQLite URIs (not plain :memory:) are required for
the API client because TestClient runs sync route handlers in a thread pool.
Plain :memory: DBs are per-connection and would present a blank schema to each
worker thread. Unit-test stores use plain :memory: -- they stay on one thread.

Environment must be set before any auth/core import so get_settings() sees it:
  DEBUG=true             -- auto-generate SECRET_KEY instead of raising
  BCRYPT_ROUNDS=4        -- keep hashing fast
  RATE_LIMIT_ENABLED     -- off, so repeated logins never hit 429
"""

from __future__ import annotations

import os
from collections.abc import Generator
from contextlib import asynccontextmanager

os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

import pytest
from fastapi.testclient import TestClient

from api.main import app
from auth.models import User
from auth.store import UserStore
from auth.tokens import create_access_token, hash_password
from catalog.store import LinkStore

ADMIN_USERNAME = "testadmin"
ADMIN_PASSWORD = "testpass123"

# ---------------------------------------------------------------------------
# Store helpers
# ---------------------------------------------------------------------------


def _make_test_stores(db_suffix: str) -> tuple[UserStore, LinkStore]:
    """Create isolated named shared-memory SQLite stores.

    Args:
        db_suffix: Unique string appended to the DB name so test modules
                   don't share state.
    """
    url = f"sqlite:///file:test_linkdeck_{db_suffix}?mode=memory&cache=shared&uri=true"
    return UserStore(db_url=url), LinkStore(db_url=url)


def _patch_lifespan(user_store: UserStore, link_store: LinkStore):
    """Return an async context manager that replaces the real lifespan."""

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.user_store = user_store
        app.state.link_store = link_store
        yield

    return test_lifespan


# ---------------------------------------------------------------------------
# Module-scoped API client -- one TestClient per test module for speed
# ---------------------------------------------------------------------------


@pytest.fixture(scope="module")
def api_client(request) -> Generator[tuple[TestClient, str, int], None, None]:
    """Yield (client, token, user_id) for API integration tests.

    The admin user is created before the client starts; the token is a normal
    bearer token for that user. Each test module gets its own database.
    """
    suffix = request.module.__name__.rsplit(".", 1)[-1]
    user_store, link_store = _make_test_stores(suffix)
    uid = user_store.create_user(User(username=ADMIN_USERNAME, hashed_password=hash_password(ADMIN_PASSWORD)))
    token = create_access_token(user_id=uid, username=ADMIN_USERNAME)

    app.router.lifespan_context = _patch_lifespan(user_store, link_store)

    with TestClient(app, raise_server_exceptions=True) as client:
        yield client, token, uid

    link_store.close()
    user_store.close()


@pytest.fixture
def auth_headers(api_client) -> dict[str, str]:
    _client, token, _uid = api_client
    return {"Authorization": f"Bearer {token}"}


# ---------------------------------------------------------------------------
# Unit-test stores
# ---------------------------------------------------------------------------


@pytest.fixture
def link_store() -> Generator[LinkStore, None, None]:
    store = LinkStore("sqlite:///:memory:")
    yield store
    store.close()


@pytest.fixture
def user_store() -> Generator[UserStore, None, None]:
    store = UserStore("sqlite:///:memory:")
    yield store
    store.close()

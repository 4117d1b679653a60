"""
tests/conftest.py -- Shared test fixtures for the catalog API tests.

This module provides:
  - _make_test_stores(): creates isolated in-memory DBs for users + products
  - _patch_lifespan(): wires test stores into app.state, bypassing real startup
  - api_client: TestClient with a registered user and a valid bearer token
  - user_store / product_store: each repository, parametrized over the
    SQLAlchemy store and the in-memory double so the contract tests run
    against both

Design: Named shared-memory SQLite URIs (not plain :memory:) are required
for the TestClient stores because route handlers run in a thread pool. Plain
:memory: DBs are per-connection and would present a blank schema to each
worker thread. The named URI format (file:name?mode=memory&cache=shared&uri=true)
shares one in-memory instance across all connections in the same process.

DEBUG must be set before any app import so get_settings() auto-generates
SECRET_KEY in dev mode rather than raising ValueError.
"""

from __future__ import annotations

import os
from collections.abc import Generator
from contextlib import asynccontextmanager

# CRITICAL: Set env before any api/auth/core import so get_settings() sees it.
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("TOKEN_RATE_LIMIT", "1000/minute")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import SingletonThreadPool

from api.main import app
from auth.models import User
from auth.store import UserStore
from auth.tokens import TokenConfig, TokenIssuer
from catalog.store import ProductStore
from core.config import get_settings
from fakes import InMemoryProductStore, InMemoryUserStore

TEST_EMAIL = "tester@example.com"
TEST_PASSWORD = "testpass123"

# ---------------------------------------------------------------------------
# Store helpers
# ---------------------------------------------------------------------------


def _make_test_stores(db_suffix: str) -> tuple[UserStore, ProductStore]:
    """Create isolated named shared-memory SQLite stores for test isolation.

    Args:
        db_suffix: Unique string appended to the DB name so test modules
                   don't share state.
    """
    db_url = f"sqlite:///file:test_catalog_{db_suffix}?mode=memory&cache=shared&uri=true"
    return UserStore(db_url, poolclass=SingletonThreadPool), ProductStore(db_url, poolclass=SingletonThreadPool)


def _patch_lifespan(user_store: UserStore, product_store: ProductStore, issuer: TokenIssuer):
    """Return an async context manager that replaces the real lifespan."""

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.user_store = user_store
        app.state.product_store = product_store
        app.state.token_issuer = issuer
        yield

    return test_lifespan


# ---------------------------------------------------------------------------
# Module-scoped fixtures -- one TestClient per test module for speed
# ---------------------------------------------------------------------------


@pytest.fixture(scope="module")
def api_client(request) -> Generator[tuple[TestClient, str, str], None, None]:
    """Yield (client, token, user_id) for API integration tests.

    The TestClient uses the real FastAPI app with a patched lifespan so tests
    hit real route handlers but use isolated in-memory stores. The user is
    registered before the client starts and its token is issued by the same
    TokenIssuer the app verifies with.
    """
    user_store, product_store = _make_test_stores(request.module.__name__.rsplit(".", 1)[-1])
    settings = get_settings()
    issuer = TokenIssuer(TokenConfig(secret_key=settings.secret_key, ttl_seconds=3600))

    user = User.register("Tester", TEST_EMAIL, TEST_PASSWORD)
    user_store.create(user)
    token = issuer.issue(user.id)

    app.router.lifespan_context = _patch_lifespan(user_store, product_store, issuer)

    with TestClient(app, raise_server_exceptions=True) as client:
        yield client, token, str(user.id)

    product_store.close()
    user_store.close()


@pytest.fixture
def auth_headers(api_client: tuple[TestClient, str, str]) -> dict[str, str]:
    _client, token, _uid = api_client
    return {"Authorization": f"Bearer {token}"}


# ---------------------------------------------------------------------------
# Repository fixtures -- durable store and in-memory double
# ---------------------------------------------------------------------------


@pytest.fixture(params=["sqlalchemy", "memory"])
def product_store(request):
    """Fresh ProductRepository per test; runs once per implementation."""
    store = ProductStore("sqlite:///:memory:") if request.param == "sqlalchemy" else InMemoryProductStore()
    yield store
    store.close()


@pytest.fixture(params=["sqlalchemy", "memory"])
def user_store(request):
    """Fresh UserRepository per test; runs once per implementation."""
    store = UserStore("sqlite:///:memory:") if request.param == "sqlalchemy" else InMemoryUserStore()
    yield store
    store.close()

# tests/conftest.py
import os

# Settings are read at import time by bookstore.database
os.environ["SECRET_KEY"] = "test-secret-key-for-the-bookstore-test-suite"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test_bookstore.db"
os.environ.pop("ENV_FILE", None)

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import httpx
import jwt
import pytest
from fastapi.testclient import TestClient

import bookstore.models  # noqa: F401
from bookstore.core.config import get_settings
from bookstore.database import Base, build_engine, build_sessionmaker
from bookstore.dependencies import get_session_factory
from bookstore.main import app
from bookstore.models import Book, Genre, User


@pytest.fixture
def settings():
    """Provide test settings"""
    return get_settings()


@pytest.fixture(scope="function")
async def test_engine(tmp_path):
    """Create a throwaway SQLite database per test function."""
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'bookstore_test.db'}")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return build_sessionmaker(test_engine)


@pytest.fixture
async def db_session(session_factory):
    """Provide a database session for tests"""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
async def catalog(session_factory):
    """
    Seed two users, two genres and four books.

    dune (Fiction, 10.0, stock 10), cosmos (Science, 5.0, stock 10),
    pamphlet (no genre, 7.5, stock 5), retired (Fiction, soft-deleted, stock 10)
    """
    async with session_factory() as session:
        alice = User(username="alice", email="alice@example.com", password="x")
        bob = User(username="bob", email="bob@example.com", password="x")
        fiction = Genre(name="Fiction")
        science = Genre(name="Science")
        session.add_all([alice, bob, fiction, science])
        await session.flush()

        dune = Book(title="Dune", writer="Frank Herbert", publisher="Chilton",
                    price=10.0, stock_quantity=10, genre_id=fiction.id)
        cosmos = Book(title="Cosmos", writer="Carl Sagan", publisher="Random House",
                      price=5.0, stock_quantity=10, genre_id=science.id)
        pamphlet = Book(title="Pamphlet", writer="Anon", publisher="Self",
                        price=7.5, stock_quantity=5, genre_id=None)
        retired = Book(title="Retired", writer="Old Writer", publisher="Gone",
                       price=3.0, stock_quantity=10, genre_id=fiction.id,
                       deleted_at=datetime(2024, 1, 1))
        session.add_all([dune, cosmos, pamphlet, retired])
        await session.commit()

        return SimpleNamespace(
            alice=alice.id,
            bob=bob.id,
            fiction=fiction.id,
            science=science.id,
            dune=dune.id,
            cosmos=cosmos.id,
            pamphlet=pamphlet.id,
            retired=retired.id,
        )


@pytest.fixture
def make_token(settings):
    """Mint a bearer token the way the auth service does"""
    def _make_token(user_id, expires_in=timedelta(hours=1), secret=None):
        payload = {
            settings.JWT_USER_CLAIM: user_id,
            "exp": datetime.now(timezone.utc) + expires_in,
        }
        return jwt.encode(payload, secret or settings.SECRET_KEY, algorithm=settings.ALGORITHM)
    return _make_token


@pytest.fixture
def auth_headers(make_token):
    def _auth_headers(user_id):
        return {"Authorization": f"Bearer {make_token(user_id)}"}
    return _auth_headers


@pytest.fixture
async def async_client(session_factory):
    """HTTP client talking to the app in-process, backed by the test database"""
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def test_client():
    """Synchronous client for route tests with mocked services"""
    with TestClient(app, raise_server_exceptions=False) as client:
        yield client
    app.dependency_overrides.clear()

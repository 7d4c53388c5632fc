"""
Pytest fixtures for test database, client, and authentication.

Every test gets a fresh SQLite file under tmp_path (set TEST_DATABASE_URL to
run against PostgreSQL instead). Each HTTP request gets its own session, as
in production, so concurrent requests really race on the database.
"""

import os

# Must be set before cinebook.core.config is imported anywhere
os.environ.setdefault("REDIS_ENABLED", "false")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "test")

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import (
    AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine,
)
from sqlalchemy.pool import NullPool

from cinebook.main import app
from cinebook.db.base import Base
from cinebook.db.session import get_db
from cinebook.core.security import PasswordHasher, TokenCodec, get_password_hasher
from cinebook.models.user import User
from cinebook.models.movie import Movie, Seat


class FastPasswordHasher(PasswordHasher):
    """bcrypt with the minimum cost factor to keep the suite quick."""

    def __init__(self):
        super().__init__(rounds=4)


@pytest.fixture
def test_database_url(tmp_path) -> str:
    return os.environ.get("TEST_DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'cinebook.db'}")


@pytest_asyncio.fixture
async def db_engine(test_database_url: str) -> AsyncGenerator[AsyncEngine, None]:
    """Create tables, yield the engine, then drop tables."""
    engine = create_async_engine(test_database_url, poolclass=NullPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def password_hasher() -> PasswordHasher:
    return FastPasswordHasher()


@pytest.fixture
def token_codec() -> TokenCodec:
    from cinebook.core.config import get_settings

    settings = get_settings()
    return TokenCodec(settings.SECRET_KEY, settings.ALGORITHM, settings.ACCESS_TOKEN_EXPIRE_MINUTES)


@pytest_asyncio.fixture
async def client(session_factory, password_hasher) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client with the DB dependency pointed at the test database."""

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_password_hasher] = lambda: password_hasher

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def test_user(db_session: AsyncSession, password_hasher) -> User:
    user = User(
        email="alice@example.com",
        username="alice",
        hashed_password=password_hasher.hash("alicepassword123"),
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest.fixture
def auth_headers(test_user: User, token_codec: TokenCodec) -> dict:
    return {"Authorization": f"Bearer {token_codec.encode(test_user.username)}"}


@pytest.fixture
def make_auth_headers(token_codec: TokenCodec):
    """Headers for an arbitrary username; bookings only need the token subject."""

    def _make(username: str) -> dict:
        return {"Authorization": f"Bearer {token_codec.encode(username)}"}

    return _make


@pytest_asyncio.fixture
async def test_movie(db_session: AsyncSession) -> Movie:
    movie = Movie(
        title="The Long Matinee",
        description="A test screening",
        duration=120,
        genre="Drama",
        language="English",
        rating="PG-13",
        ticket_price=12.5,
    )
    db_session.add(movie)
    await db_session.commit()
    await db_session.refresh(movie)
    return movie


@pytest_asyncio.fixture
async def test_seats(db_session: AsyncSession, test_movie: Movie) -> list[Seat]:
    """Rows A and B, two seats each; B2 is a premium seat marked unavailable."""
    seats = [
        Seat(movie_id=test_movie.id, seat_number="A1", row_name="A", seat_in_row=1),
        Seat(movie_id=test_movie.id, seat_number="A2", row_name="A", seat_in_row=2),
        Seat(movie_id=test_movie.id, seat_number="B1", row_name="B", seat_in_row=1),
        Seat(
            movie_id=test_movie.id, seat_number="B2", row_name="B", seat_in_row=2,
            is_available=False, seat_type="Premium", additional_price=3.0,
        ),
    ]
    db_session.add_all(seats)
    await db_session.commit()
    return seats

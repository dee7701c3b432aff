"""
CanvasBoard — Test Configuration (conftest.py)
================================================

What:  Shared pytest fixtures for the entire test suite.
How:   The environment is pointed at an in-memory SQLite database and a local
       snapshot backend BEFORE any canvasboard import, so no test touches
       PostgreSQL or the network.

Fixture Hierarchy (all function-scoped):
    ├── db_engine:      in-memory SQLite engine with every table created
    ├── db_session:     AsyncSession for service-level tests
    ├── app:            FastAPI app whose get_db_session uses db_engine
    ├── test_client:    HTTPX AsyncClient against the app (base http://test)
    ├── api_client:     same, with base http://test/api (for RestPersistence)
    ├── mock_adapter:   AsyncMock standing in for a PersistenceAdapter
    └── plan_board:     Board "Plan" with one section and two cards
"""

import os
import tempfile

# Override settings for testing BEFORE any canvasboard imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["PERSISTENCE_BACKEND"] = "local"
os.environ["LOCAL_SNAPSHOT_PATH"] = os.path.join(
    tempfile.mkdtemp(prefix="canvasboard_test_"), "snapshot.json"
)
os.environ["RETRY_MIN_WAIT"] = "0"
os.environ["RETRY_MAX_WAIT"] = "0"

from typing import AsyncGenerator
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import canvasboard.models  # noqa: F401
from canvasboard.canvas.board import BoardAggregate
from canvasboard.canvas.models import Board, Position, TextCard
from canvasboard.canvas.persistence.base import PersistenceAdapter
from canvasboard.database import Base, enable_sqlite_foreign_keys, get_db_session


# ══════════════════════════════════════════════════════════════════════════
# Database
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_engine():
    """
    Fresh in-memory database per test.

    StaticPool keeps the single SQLite connection alive, so every session
    sees the same tables and rows.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    enable_sqlite_foreign_keys(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


# ══════════════════════════════════════════════════════════════════════════
# HTTP
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def app(session_factory):
    """FastAPI app with get_db_session bound to the test database."""
    from canvasboard.main import create_app

    application = create_app()

    async def override_get_db_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    application.dependency_overrides[get_db_session] = override_get_db_session
    return application


@pytest_asyncio.fixture
async def test_client(app):
    """
    Async HTTP client routed straight into the app via ASGITransport.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def api_client(app):
    """Client rooted at /api, the way RestPersistence expects its base URL."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test/api") as client:
        yield client


# ══════════════════════════════════════════════════════════════════════════
# Canvas core
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_adapter():
    """
    PersistenceAdapter whose every method is an AsyncMock; set return values per test.

    Usage:
        mock_adapter.create_card.side_effect = PersistenceError()
    """
    return AsyncMock(spec=PersistenceAdapter)


@pytest.fixture
def plan_board():
    """
    Board "Plan": section "Ideas" at (100,100) 400×300, card "Idea A" inside it
    at (120,140), card "Idea B" unsectioned at (600,600).
    """
    aggregate = BoardAggregate(Board(id="board-plan", name="Plan"))
    section = aggregate.add_section("Ideas", Position(x=100, y=100), section_id="sec-ideas")
    aggregate.add_card(
        TextCard(id="card-a", title="Idea A", position=Position(x=120, y=140), section_id=section.id)
    )
    aggregate.add_card(TextCard(id="card-b", title="Idea B", position=Position(x=600, y=600)))
    return aggregate.board

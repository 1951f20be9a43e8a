"""Service test fixtures — async DB + FastAPI test client + fake AI collaborators.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use test DB session
    - db_manager initialized for background tasks that bypass get_db
    - The Anthropic client and page fetcher are replaced at the dependency
      boundary; SourceRater / DebateEvaluator / TopicGenerator stay real

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for route tests
      (PostgreSQL-specific features not exercised here)
    - db_manager patched: background rating uses db_manager.session() directly
    - Pages served by httpx.MockTransport: the fetcher's real code path runs
"""

import uuid

import httpx
import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

from arguably.api.deps import get_anthropic_client, get_page_fetcher
from arguably.db.base import Base
from arguably.infrastructure.database import get_db, DatabaseSessionManager
from arguably.infrastructure.page_fetcher import PageFetcher
import arguably.infrastructure.database as db_module
from arguably.main import app
from arguably.models.user_role import UserRole

from tests.services.fake_network import public_resolver
from tests.services.mock_anthropic import MockAnthropicClient

SOURCE_URL = "https://news.example.org/report"
SOURCE_HTML = (
    "<html><head><title>Annual Report</title>"
    '<meta name="description" content="Official figures"></head>'
    "<body><p>Figures rose by ten percent.</p></body></html>"
)


def as_user(user_id) -> dict:
    """Request headers for the given acting identity."""
    return {"X-User-Id": str(user_id)}


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def fake_ai():
    return MockAnthropicClient()


@pytest.fixture
def pages():
    """url -> (status, html) served to the page fetcher; unknown URLs 404."""
    return {SOURCE_URL: (200, SOURCE_HTML)}


@pytest.fixture
def page_fetcher(pages):
    def handler(request: httpx.Request) -> httpx.Response:
        status, body = pages.get(str(request.url), (404, "not found"))
        return httpx.Response(status, text=body)

    return PageFetcher(
        timeout_seconds=1.0,
        transport=httpx.MockTransport(handler),
        resolver=public_resolver,
    )


@pytest.fixture
async def client(test_engine, test_session_factory, fake_ai, page_fetcher):
    """FastAPI test client with DB and AI dependencies overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_anthropic_client] = lambda: fake_ai
    app.dependency_overrides[get_page_fetcher] = lambda: page_fetcher

    # Patch db_manager for background tasks that use it directly
    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


async def _sign_up(client, username: str, **fields) -> uuid.UUID:
    user_id = uuid.uuid4()
    res = await client.post(
        "/api/v1/profiles", json={"username": username, **fields},
        headers=as_user(user_id),
    )
    assert res.status_code == 201, res.text
    return user_id


@pytest.fixture
async def alice(client) -> uuid.UUID:
    return await _sign_up(client, "alice", beliefs=["science", "#freedom"])


@pytest.fixture
async def bob(client) -> uuid.UUID:
    return await _sign_up(client, "bob", beliefs=["tradition"])


@pytest.fixture
async def carol(client) -> uuid.UUID:
    return await _sign_up(client, "carol")


@pytest.fixture
async def debate_id(client, alice, bob) -> uuid.UUID:
    """Active debate: alice is participant1, bob participant2."""
    res = await client.post(
        "/api/v1/debates",
        json={"opponent_id": str(bob), "topic": "Is remote work better?"},
        headers=as_user(alice),
    )
    assert res.status_code == 201, res.text
    return uuid.UUID(res.json()["id"])


@pytest.fixture
async def make_admin(test_session_factory):
    async def _grant(user_id: uuid.UUID) -> None:
        async with test_session_factory() as session:
            session.add(UserRole(user_id=user_id, role="admin"))
            await session.commit()

    return _grant

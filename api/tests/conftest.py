"""Shared test fixtures.

Uses SQLite + aiosqlite for the database and httpx.MockTransport in place of
real webhook endpoints.
"""

import os

os.environ.setdefault("ADMIN_API_KEY", "test-admin-key")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from typing import Callable, Optional

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from fanout.config import settings
from fanout.models import Base, WorkspaceIntegration

ADMIN_KEY = settings.admin_api_key


# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def db_session():
    """Fresh in-memory database and session per test."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session

    await engine.dispose()


@pytest.fixture
def add_integration(db_session: AsyncSession):
    """Insert a WorkspaceIntegration row and return it."""

    async def _add(
        platform: str = "slack",
        webhook_url: str = "https://hooks.slack.com/services/T000/B000/XXXX",
        notification_types: Optional[list[str]] = None,
        workspace_id: str = "w1",
        is_active: bool = True,
    ) -> WorkspaceIntegration:
        integration = WorkspaceIntegration(
            workspace_id=workspace_id,
            platform=platform,
            webhook_url=webhook_url,
            notification_types=notification_types if notification_types is not None else ["broadcast"],
            is_active=is_active,
        )
        db_session.add(integration)
        await db_session.commit()
        await db_session.refresh(integration)
        return integration

    return _add


# ---------------------------------------------------------------------------
# Redis (auth lockout counters)
# ---------------------------------------------------------------------------


class InMemoryRedis:
    def __init__(self):
        self.data: dict[str, int] = {}

    async def get(self, key):
        value = self.data.get(key)
        return None if value is None else str(value)

    async def incr(self, key):
        self.data[key] = self.data.get(key, 0) + 1
        return self.data[key]

    async def expire(self, key, seconds):
        return True

    async def delete(self, key):
        self.data.pop(key, None)

    async def ping(self):
        return True


@pytest.fixture(autouse=True)
def fake_redis(monkeypatch):
    fake = InMemoryRedis()
    monkeypatch.setattr("fanout.auth.redis_client", fake)
    return fake


# ---------------------------------------------------------------------------
# Outbound webhooks
# ---------------------------------------------------------------------------


class WebhookRecorder:
    """Stands in for third-party webhook endpoints.

    Responses are configured per URL; unconfigured URLs answer 200 "ok".
    """

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.routes: dict[str, Callable[[httpx.Request], httpx.Response]] = {}

    def respond(self, url: str, status_code: int = 200, text: str = "ok") -> None:
        self.routes[url] = lambda request: httpx.Response(status_code, text=text)

    def fail(self, url: str, message: str = "connection refused") -> None:
        def _raise(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError(message, request=request)

        self.routes[url] = _raise

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get(str(request.url))
        if route is None:
            return httpx.Response(200, text="ok")
        return route(request)

    def client(self, **kwargs) -> httpx.AsyncClient:
        kwargs.pop("follow_redirects", None)
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler), **kwargs)


@pytest.fixture
def webhooks(monkeypatch) -> WebhookRecorder:
    recorder = WebhookRecorder()
    monkeypatch.setattr("fanout.channels.dispatcher.safe_http_client", recorder.client)
    return recorder


# ---------------------------------------------------------------------------
# App client
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def client(db_session: AsyncSession) -> AsyncClient:
    """httpx AsyncClient wired to the FastAPI app with the test database."""
    from fanout.database import get_db
    from fanout.main import app

    async def _override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers() -> dict[str, str]:
    return {"X-API-Key": ADMIN_KEY}

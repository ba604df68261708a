"""Service test fixtures — SQLite-backed remote store, Domain Store, FastAPI client.

Invariants:
    - Every test gets a fresh SQLite database file with foreign keys enforced
    - Stores are built with the same factory the application lifespan uses
    - FlakyGateway wraps a real gateway and fails chosen operations on demand

Design Decisions:
    - File database over :memory:: every session gets its own connection, so
      overlapping writes behave like they do against PostgreSQL
    - app.state overridden directly: the lifespan is not run by ASGITransport
"""

import pytest
from sqlalchemy.ext.asyncio import create_async_engine
from httpx import ASGITransport, AsyncClient

from worksync.config import Settings
from worksync.core.entities import Actor
from worksync.core.errors import RemoteUnavailableError
from worksync.db.base import Base
from worksync.infrastructure.database import (
    DatabaseSessionManager, enable_sqlite_foreign_keys,
)
from worksync.infrastructure.gateway import SqlRemoteStore
from worksync.main import app
from worksync.services.activity_logger import ActivityLogger
from worksync.services.domain_store import DomainStore
from worksync.services.store_factory import build_store
from worksync.services.workspace_bootstrapper import WorkspaceBootstrapper
import worksync.models  # noqa: F401


class FlakyGateway:
    """Delegates to a real gateway; operations listed in `failing` raise."""

    def __init__(self, inner):
        self._inner = inner
        self.table_name = inner.table_name
        self.failing: set[str] = set()
        self.calls: list[str] = []

    def _check(self, op: str) -> None:
        self.calls.append(op)
        if op in self.failing:
            raise RemoteUnavailableError("Connection refused", f"{op} {self.table_name}")

    async def select(self, filters=None, **kwargs):
        self._check("select")
        return await self._inner.select(filters, **kwargs)

    async def insert(self, row):
        self._check("insert")
        return await self._inner.insert(row)

    async def update(self, row_id, values, **kwargs):
        self._check("update")
        return await self._inner.update(row_id, values, **kwargs)

    async def delete(self, row_id):
        self._check("delete")
        return await self._inner.delete(row_id)


class FlakyRemote:
    def __init__(self, remote: SqlRemoteStore):
        self.workspaces = FlakyGateway(remote.workspaces)
        self.projects = FlakyGateway(remote.projects)
        self.tasks = FlakyGateway(remote.tasks)
        self.activities = FlakyGateway(remote.activities)


@pytest.fixture
async def test_engine(tmp_path):
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'worksync.db'}", echo=False,
    )
    enable_sqlite_foreign_keys(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def db(test_engine):
    return DatabaseSessionManager.from_engine(test_engine)


@pytest.fixture
def remote(db):
    return SqlRemoteStore(db)


@pytest.fixture
def flaky_remote(remote):
    return FlakyRemote(remote)


@pytest.fixture
def actor():
    return Actor(id="user-ada", name="Ada", email="ada@example.com")


@pytest.fixture
def other_actor():
    return Actor(id="user-grace", name="Grace", email="grace@example.com")


@pytest.fixture
def store(flaky_remote):
    """Domain Store over the flaky wrapper (no failures unless a test asks)."""
    return DomainStore(
        flaky_remote,
        ActivityLogger(flaky_remote.activities, limit=20),
        WorkspaceBootstrapper(flaky_remote.workspaces),
    )


@pytest.fixture
async def signed_in(store, actor):
    await store.set_actor(actor)
    return store


@pytest.fixture
async def client(db):
    """FastAPI test client with a store wired to the test database."""
    app.state.db = db
    app.state.store = build_store(db, Settings())
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

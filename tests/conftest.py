"""Root conftest — async DB, store/manager and FastAPI test client fixtures.

Invariants:
    - Every test gets a fresh in-memory SQLite database with foreign keys enforced
    - get_db dependency overridden to use the test session factory
    - db_manager patched for the readiness probe, which bypasses get_db

Design Decisions:
    - SQLite in-memory with StaticPool: one shared connection, so every session in a
      test sees the same database
    - Environment pinned before the app is imported: settings are cached per process
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("DATABASE_CREATE_ALL", "false")
os.environ.setdefault("LOG_FORMAT", "text")

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from relations_api.db.base import Base  # noqa: E402
from relations_api.db.session import enable_sqlite_foreign_keys  # noqa: E402
from relations_api.infrastructure.database import (  # noqa: E402
    get_db, DatabaseSessionManager,
)
import relations_api.infrastructure.database as db_module  # noqa: E402
import relations_api.models  # noqa: E402,F401
from relations_api.main import app  # noqa: E402
from relations_api.services.entity_store import SqlEntityStore  # noqa: E402
from relations_api.services.relationship_manager import (  # noqa: E402
    RelationshipManager,
)


@pytest.fixture
async def test_engine():
    engine = enable_sqlite_foreign_keys(create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool,
    ))
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
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
def store(test_db):
    return SqlEntityStore(test_db)


@pytest.fixture
def manager(store):
    return RelationshipManager(store)


@pytest.fixture
async def client(test_engine, test_session_factory):
    """FastAPI test client with DB dependency overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

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

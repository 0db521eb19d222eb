import json
import os
import sys
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

sys.path.append(str(Path(__file__).parents[1] / "src"))

from home_budget.api.deps import get_classifier, get_settings_cache
from home_budget.db.session import get_db
from home_budget.main import app
from home_budget.services.app_settings import SettingsCache

ENV_TEST_PATH = Path(__file__).parents[1] / ".env.test"


def _load_env_file(path: Path) -> None:
    if not path.exists():
        return
    for line in path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        os.environ.setdefault(key, value)


_load_env_file(ENV_TEST_PATH)

# In-process SQLite by default; point TEST_DATABASE_URL at Postgres to run
# the same tests against asyncpg.
TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite+aiosqlite://")

if TEST_DATABASE_URL.startswith("sqlite"):
    test_engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(test_engine.sync_engine, "connect")
    def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

else:
    test_engine = create_async_engine(TEST_DATABASE_URL, echo=False)

TestSessionLocal = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


class FakeClassifier:
    """Stand-in for ``OpenAIClassifier`` that records every prompt.

    ``replies`` are returned in order (the last one repeats). An Exception
    instance in the list is raised instead of returned.
    """

    def __init__(self, replies=None):
        self.replies = list(replies or [])
        self.prompts: list[str] = []

    async def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self.replies:
            return ""
        reply = self.replies.pop(0) if len(self.replies) > 1 else self.replies[0]
        if isinstance(reply, Exception):
            raise reply
        return reply

    @property
    def calls(self) -> int:
        return len(self.prompts)


def classifier_reply(category_id, display_name="Shop", description="Purchase", confidence=0.9):
    return json.dumps(
        {
            "category_id": str(category_id),
            "confidence": confidence,
            "display_name": display_name,
            "description": description,
        }
    )


@pytest.fixture(scope="function")
async def setup_database():
    """Create tables for tests that need the database, and drop them after.

    This fixture is intentionally NOT autouse so pure unit tests (e.g. the
    detector) run without any database.
    """
    from home_budget.models.base import Base

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await test_engine.dispose()


@pytest.fixture
async def db_session(setup_database):
    """Provide test database session with fresh connection per test."""
    async with TestSessionLocal() as session:
        yield session
        await session.rollback()


@pytest.fixture
def fake_classifier() -> FakeClassifier:
    return FakeClassifier()


@pytest.fixture
async def categories(db_session: AsyncSession) -> dict:
    """Small catalog: Groceries, Subscriptions and the catch-all Other."""
    from home_budget.models.category import Category
    from home_budget.repositories.category import CategoryRepository

    repo = CategoryRepository(db_session)
    created = {}
    for name, color in (("Groceries", "#16a34a"), ("Subscriptions", "#7c3aed"), ("Other", "#64748b")):
        created[name] = await repo.create(Category(name=name, color=color))
    return created


@pytest.fixture
async def client(db_session: AsyncSession, fake_classifier: FakeClassifier):
    """Provide test client with database, classifier and settings cache overrides."""
    cache = SettingsCache()

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_classifier] = lambda: fake_classifier
    app.dependency_overrides[get_settings_cache] = lambda: cache

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def make_reply():
    """Build a well-formed classifier reply for a category id."""
    return classifier_reply

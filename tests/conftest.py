"""Shared fixtures: in-memory database, sessions, and seeded teams."""
import random

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from reviewpool.core.assignment import AssignmentEngine, DeactivationController, ReviewerSelector
from reviewpool.core.config.settings import init_config
from reviewpool.core.services import MemberSpec, TeamService
from reviewpool.core.storage.database import Database, init_db


@pytest.fixture
async def db():
    """Create test database."""
    config = init_config()
    config.db_path = ":memory:"
    config.db_url = None
    config.storage = "sqlite"
    db = init_db(config.get_database_url())
    await db.create_tables()
    yield db
    await db.drop_tables()
    await db.close()


@pytest.fixture
async def session(db: Database):
    """Create test session."""
    async with db.session() as session:
        yield session


@pytest.fixture
def selector():
    """Deterministic reviewer selector."""
    return ReviewerSelector(rng=random.Random(1234))


@pytest.fixture
def engine(session: AsyncSession, selector: ReviewerSelector):
    return AssignmentEngine(session, selector=selector)


@pytest.fixture
def controller(session: AsyncSession, selector: ReviewerSelector):
    return DeactivationController(session, selector=selector)


@pytest.fixture
def make_team(session: AsyncSession):
    """Factory creating a team; ids in ``inactive`` start inactive."""

    async def _make_team(team_name: str, *user_ids: str, inactive=()):
        members = [
            MemberSpec(
                user_id=user_id,
                username=f"name-{user_id}",
                is_active=user_id not in inactive,
            )
            for user_id in user_ids
        ]
        return await TeamService(session).create_team(team_name, members)

    return _make_team


@pytest.fixture
async def backend(make_team):
    """Team "backend" with active users u1..u4."""
    return await make_team("backend", "u1", "u2", "u3", "u4")

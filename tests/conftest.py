"""Shared pytest fixtures backed by a per-test SQLite file database."""

import logging
import os
import tempfile
from uuid import uuid4

# Configure the app before it is imported anywhere
os.environ.setdefault("NOTEHISTORY_SKIP_LIFESPAN_DB", "1")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="notehistory-logs-"))

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.notehistory.config import Settings
from src.notehistory.core.models import Note, NoteVersion, User, Workspace, WorkspaceMember
from src.notehistory.core.models.base import BaseModel
from src.notehistory.database import build_engine, get_db_session
from src.notehistory.main import app
from src.notehistory.security.jwt import create_access_token

# Silence extremely verbose DEBUG logs from aiosqlite to keep test output readable
logging.getLogger("aiosqlite").setLevel(logging.WARNING)


async def persist(session_factory, *objects):
    """Insert objects in their own committed transaction."""
    async with session_factory() as session:
        session.add_all(objects)
        await session.commit()
    return objects[0] if len(objects) == 1 else objects


async def add_versions(session_factory, note, author, count, collaborative_state=b"ydoc-state"):
    """Seed versions 1..count with content 'content v<n>'."""
    versions = [
        NoteVersion(
            note_id=note.id,
            version=n,
            title=f"{note.title} v{n}",
            content=f"content v{n}",
            collaborative_state=collaborative_state,
            created_by_id=author.id,
        )
        for n in range(1, count + 1)
    ]
    await persist(session_factory, *versions)
    return versions


@pytest.fixture
def test_settings(tmp_path):
    """Settings pointing at a throwaway SQLite file."""
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'history.db'}",
        secret_key="test-secret-key",
        debug=True,
        log_dir=str(tmp_path / "logs"),
    )


@pytest.fixture
async def test_engine(test_settings):
    """Engine with SAVEPOINT-capable SQLite transactions and a fresh schema."""
    engine = build_engine(test_settings.database_url)
    async with engine.begin() as conn:
        await conn.run_sync(BaseModel.metadata.create_all)

    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    # Avoid implicit attribute refreshes after commit (MissingGreenlet in async tests)
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def test_session(session_factory):
    """Session under test. Seed data is committed through separate sessions."""
    async with session_factory() as session:
        try:
            yield session
        finally:
            await session.rollback()


@pytest.fixture
async def test_user(session_factory):
    return await persist(
        session_factory, User(username=f"owner_{uuid4().hex[:8]}", full_name="Test User")
    )


@pytest.fixture
async def other_user(session_factory):
    return await persist(session_factory, User(username=f"other_{uuid4().hex[:8]}"))


@pytest.fixture
async def test_note(session_factory, test_user):
    """Personal note owned by test_user."""
    return await persist(
        session_factory,
        Note(
            title="Test Note",
            content="This is a test note content",
            collaborative_state=b"ydoc-state",
            owner_id=test_user.id,
        ),
    )


@pytest.fixture
async def workspace(session_factory, test_user):
    return await persist(session_factory, Workspace(name="Team", owner_id=test_user.id))


@pytest.fixture
async def workspace_note(session_factory, test_user, workspace):
    return await persist(
        session_factory,
        Note(
            title="Team Note",
            content="Shared content",
            owner_id=test_user.id,
            workspace_id=workspace.id,
            folder_id=uuid4(),
        ),
    )


@pytest.fixture
def add_member(session_factory, workspace):
    """Give a user a role in the shared workspace."""

    async def _add(user, role):
        return await persist(
            session_factory,
            WorkspaceMember(workspace_id=workspace.id, user_id=user.id, role=role),
        )

    return _add


@pytest.fixture
def test_app(session_factory):
    """App whose requests each get a session from the test database."""

    async def _override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = _override_get_db
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
async def async_client(test_app):
    """Create async test client."""
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


def bearer_for(user) -> dict:
    return {"Authorization": f"Bearer {create_access_token({'sub': str(user.id)})}"}


@pytest.fixture
def auth_headers(test_user):
    """Create authentication headers with a valid JWT token."""
    return bearer_for(test_user)


@pytest.fixture
def seed(session_factory):
    """Commit objects outside the session under test."""

    async def _seed(*objects):
        return await persist(session_factory, *objects)

    return _seed


@pytest.fixture
def seed_versions(session_factory):
    async def _seed_versions(note, author, count, collaborative_state=b"ydoc-state"):
        return await add_versions(session_factory, note, author, count, collaborative_state)

    return _seed_versions


@pytest.fixture
def headers_for():
    return bearer_for

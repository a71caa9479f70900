"""Service test fixtures — async DB, fake adapters and a FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db and every adapter dependency are overridden: no test touches the network
    - SocketManager is real; the Socket.IO server underneath is a FakeSio
    - db_manager patched for code paths that bypass get_db (health checks)

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for route tests
      (PostgreSQL-specific features not exercised here)
    - Fakes injected through app.dependency_overrides, the same seam production
      code uses to build services
"""

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

from app.config import Settings, get_settings
from app.db.base import Base
from app.infrastructure.database import get_db, DatabaseSessionManager
from app.infrastructure.firebase_auth import get_firebase_verifier
from app.infrastructure.gemini_client import get_gemini
from app.infrastructure.http_clients import (
    get_clerk_client, get_speechmatics_client, get_translate_client, get_tts_client,
)
from app.infrastructure.socket_manager import SocketManager, get_socket_manager
from app.services.speech_service import RealtimeSessionStore, get_realtime_sessions
import app.infrastructure.database as db_module
import app.models  # noqa: F401
from app.main import app

from tests.services.fakes import (
    FakeClerk, FakeGemini, FakeSio, FakeSpeechmatics, FakeTranslator, FakeTTS,
    FakeVerifier, WEBHOOK_SECRET,
)


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
def fake_sio():
    return FakeSio()


@pytest.fixture
def sockets(fake_sio):
    manager = SocketManager()
    manager.initialize(fake_sio)
    return manager


@pytest.fixture
def gemini():
    return FakeGemini()


@pytest.fixture
def translator():
    return FakeTranslator()


@pytest.fixture
def tts():
    return FakeTTS()


@pytest.fixture
def speechmatics():
    return FakeSpeechmatics()


@pytest.fixture
def verifier():
    return FakeVerifier()


@pytest.fixture
def clerk():
    return FakeClerk()


@pytest.fixture
def realtime_store():
    return RealtimeSessionStore()


@pytest.fixture
def test_settings():
    return Settings(
        database_url="sqlite+aiosqlite:///:memory:",
        clerk_webhook_secret=WEBHOOK_SECRET,
        rate_limit_enabled=False,
    )


@pytest.fixture
async def client(
    test_engine, test_session_factory, sockets, gemini, translator, tts,
    speechmatics, verifier, clerk, realtime_store, test_settings,
):
    """FastAPI test client with the DB and every adapter overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides.update({
        get_db: override_get_db,
        get_socket_manager: lambda: sockets,
        get_gemini: lambda: gemini,
        get_translate_client: lambda: translator,
        get_tts_client: lambda: tts,
        get_speechmatics_client: lambda: speechmatics,
        get_firebase_verifier: lambda: verifier,
        get_clerk_client: lambda: clerk,
        get_realtime_sessions: lambda: realtime_store,
        get_settings: lambda: test_settings,
    })

    # Patch db_manager for code that uses it directly
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


@pytest.fixture
def auth_headers(verifier):
    """Bearer headers for a regular Firebase user."""
    verifier.add("user-token", uid="fb-user-1", email="Alice@Example.com", display_name="Alice Smith")
    return {"Authorization": "Bearer user-token"}


@pytest.fixture
async def admin_headers(verifier, test_db):
    """Bearer headers for a Firebase user promoted to admin."""
    from app.models.user import User

    verifier.add("admin-token", uid="fb-admin-1", email="admin@example.com")
    test_db.add(User(firebase_uid="fb-admin-1", email="admin@example.com", username="admin", role="admin"))
    await test_db.commit()
    return {"Authorization": "Bearer admin-token"}

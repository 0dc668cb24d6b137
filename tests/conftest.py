"""
StreamGuide Test Configuration

Shared fixtures and configuration for all tests.
"""

import os
import tempfile
from pathlib import Path
from typing import AsyncGenerator, Callable, Generator

import httpx
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import NullPool, StaticPool

import streamguide.config as config_module
from streamguide.api.dependencies import get_clock, get_youtube_client
from streamguide.database import ProgramStore
from streamguide.database.connection import create_session_factory, get_db
from streamguide.database.models.base import Base
from streamguide.main import create_app
from streamguide.metadata import YouTubeMetadataClient
from tests.fixtures.dates import NOW


# ============ Database Fixtures ============


@pytest.fixture(scope="function")
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture(scope="function")
def database_url(temp_dir: Path) -> str:
    """File-backed SQLite database shared by the sync and async engines."""
    return f"sqlite:///{temp_dir / 'streamguide-test.db'}"


@pytest.fixture(scope="function")
def engine(database_url: str):
    """Create a sync test database engine with the schema in place."""
    engine = create_engine(database_url, connect_args={"check_same_thread": False})

    @event.listens_for(engine, "connect")
    def on_connect(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db_session(engine) -> Generator[Session, None, None]:
    """Create a new sync database session for each test."""
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)
    session = SessionLocal()

    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture(scope="function")
def db(db_session: Session) -> Generator[Session, None, None]:
    """Alias for db_session."""
    yield db_session


@pytest.fixture(scope="function")
async def async_session() -> AsyncGenerator[AsyncSession, None]:
    """Async session on a private in-memory database."""
    engine, factory = create_session_factory(
        "sqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with factory() as session:
        yield session

    await engine.dispose()


@pytest.fixture(scope="function")
def store(async_session: AsyncSession) -> ProgramStore:
    return ProgramStore(async_session)


# ============ FastAPI Test Client Fixtures ============


@pytest.fixture
def youtube_handler() -> Callable[[httpx.Request], httpx.Response]:
    """Default YouTube API stub: every lookup finds nothing."""
    return lambda request: httpx.Response(200, json={"items": []})


@pytest.fixture(scope="function")
def app(engine, database_url: str, youtube_handler) -> FastAPI:
    """Create a test FastAPI application."""
    app = create_app()

    # One connection per session so nothing outlives the client's event loop
    _, factory = create_session_factory(
        database_url,
        poolclass=NullPool,
        connect_args={"check_same_thread": False},
    )

    async def override_get_db():
        async with factory() as session:
            yield session

    async def override_get_youtube_client():
        client = YouTubeMetadataClient(
            api_key="test-key",
            transport=httpx.MockTransport(youtube_handler),
        )
        async with client:
            yield client

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: (lambda: NOW)
    app.dependency_overrides[get_youtube_client] = override_get_youtube_client

    return app


@pytest.fixture(scope="function")
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    """
    Create a synchronous test client.

    Used without the context manager so the application lifespan (which
    initializes the configured database) does not run.
    """
    yield TestClient(app)


# ============ Config Fixtures ============


@pytest.fixture(scope="function")
def temp_config_file(temp_dir: Path) -> Path:
    """Create a temporary config file."""
    config_file = temp_dir / "config.yaml"
    config_content = """
server:
  host: "127.0.0.1"
  port: 9000
  debug: true

database:
  url: "sqlite:///:memory:"

guide:
  timezone: "Europe/Istanbul"
  history_days: 3

scheduling:
  filler:
    title: "Test Pattern"
    video_id: "abcdefghijk"

logging:
  level: "DEBUG"
"""
    config_file.write_text(config_content)
    return config_file


# ============ Environment Fixtures ============


@pytest.fixture(autouse=True)
def clean_environment():
    """Clean environment variables and cached config for each test."""
    original_env = os.environ.copy()

    for key in list(os.environ.keys()):
        if key.startswith("STREAMGUIDE_"):
            del os.environ[key]
    config_module._config = None

    yield

    config_module._config = None
    os.environ.clear()
    os.environ.update(original_env)


# ============ Markers ============


def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")

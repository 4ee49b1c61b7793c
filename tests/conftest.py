"""
Pytest configuration and fixtures
"""

import pytest
import pytest_asyncio
import httpx
from unittest.mock import AsyncMock, patch
from pathlib import Path
from typing import AsyncGenerator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.ext.asyncio import AsyncSession
from core.config import Settings
from core.database import Database
from api.main import create_app


@pytest.fixture
def db_path(tmp_path) -> Path:
    """A fresh SQLite file per test"""
    return tmp_path / "sources.db"


@pytest.fixture
def test_settings(tmp_path, db_path) -> Settings:
    return Settings(
        DATABASE_URL=f"sqlite+aiosqlite:///{db_path}",
        UPLOAD_DIR=str(tmp_path / "uploads"),
        ENVIRONMENT="test",
        LOG_LEVEL="WARNING",
    )


@pytest.fixture
def sync_engine(db_path):
    """Plain synchronous engine for inspecting or seeding the file directly"""
    engine = create_engine(f"sqlite:///{db_path}")
    yield engine
    engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def database(test_settings) -> AsyncGenerator[Database, None]:
    """Initialized Database (schema evolved) on the per-test file"""
    database = Database(test_settings.DATABASE_URL)
    await database.init()
    yield database
    await database.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(database) -> AsyncGenerator[AsyncSession, None]:
    """Create database session for tests"""
    async with database.session() as session:
        yield session
        await session.rollback()


@pytest.fixture
def client(test_settings):
    """TestClient over an app built from test settings; lifespan opens the store"""
    app = create_app(test_settings)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def http_client():
    """
    Patched httpx.AsyncClient. Configure `request` (URL probes) or `get`
    (remote file reads) with a return_value or side_effect.
    """
    with patch("httpx.AsyncClient") as mock_client:
        client = mock_client.return_value.__aenter__.return_value
        mock_client.return_value.__aexit__.return_value = False
        client.request = AsyncMock()
        client.get = AsyncMock()
        client.factory = mock_client
        yield client


def make_response(status_code: int, url: str = "https://api.example.com/data", method: str = "GET", **kwargs) -> httpx.Response:
    return httpx.Response(status_code, request=httpx.Request(method, url), **kwargs)


@pytest.fixture
def response_factory():
    return make_response


@pytest.fixture
def url_source_payload():
    return {
        "name": "Orders API",
        "type": "url",
        "description": "Production orders endpoint",
        "config": {
            "url": "https://api.example.com/orders",
            "method": "get",
            "headers": {"Accept": "application/json"},
            "params": {"limit": 10},
            "timeout": 5000
        }
    }


@pytest.fixture
def file_source_payload(tmp_path):
    data_file = tmp_path / "orders.csv"
    data_file.write_text("id,total\n1,9.99\n2,19.99\n", encoding="utf-8")
    return {
        "name": "Orders export",
        "type": "file",
        "description": "Nightly CSV export",
        "config": {"path": str(data_file), "encoding": "utf8", "format": "csv"}
    }

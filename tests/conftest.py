"""
Shared fixtures: an app wired to a throwaway SQLite file and upload dir.
"""

from pathlib import Path
from typing import Dict

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from config.settings import Settings
from database.session import build_engine, build_session_factory, init_models
from main import create_app


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        jwt_secret="test-secret",
        bcrypt_rounds=4,
        upload_dir=str(tmp_path / "uploads"),
        max_upload_bytes=1024,
    )


@pytest.fixture()
def app(settings: Settings):
    return create_app(settings)


@pytest.fixture()
def client(app):
    with TestClient(app) as c:
        yield c


@pytest_asyncio.fixture()
async def session_factory(settings: Settings):
    engine = build_engine(settings.database_url)
    await init_models(engine)
    yield build_session_factory(engine)
    await engine.dispose()


@pytest.fixture()
def login_as(client: TestClient):
    """Register a user and return an ``Authorization`` header for it."""

    def _login_as(username: str, password: str = "pw") -> Dict[str, str]:
        resp = client.post("/register", json={"username": username, "password": password})
        assert resp.status_code == 200, resp.text
        resp = client.post("/login", json={"username": username, "password": password})
        assert resp.status_code == 200, resp.text
        return {"Authorization": f"Bearer {resp.json()['token']}"}

    return _login_as

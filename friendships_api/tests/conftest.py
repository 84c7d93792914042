import os
import tempfile
from pathlib import Path

import pytest_asyncio
from httpx import AsyncClient, ASGITransport

# Configure test environment before the app (and its engine) is imported
TEST_DB = Path(tempfile.gettempdir()) / 'friendships_api_test.db'
os.environ['DATABASE_URL'] = os.getenv('TEST_DATABASE_URL', f'sqlite+aiosqlite:///{TEST_DB}')
os.environ.setdefault('JWT_SECRET', 'testsecret')

from friendships_api.main import app  # noqa: E402
from friendships_api.models import Base, engine  # noqa: E402


@pytest_asyncio.fixture
async def db():
    """Fresh schema for every test."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def client(db):
    async with AsyncClient(transport=ASGITransport(app=app), base_url='http://test') as ac:
        yield ac


@pytest_asyncio.fixture
async def make_user(client):
    """Register and log in a user; returns (user json, auth headers, token json)."""
    async def _make(username: str, password: str = 'secret123'):
        r = await client.post('/api/users/register', json={
            'username': username,
            'email': f'{username}@example.com',
            'password': password,
            'display_name': username.title(),
        })
        assert r.status_code == 200, r.text
        login = await client.post('/api/users/login', data={'username': username, 'password': password})
        assert login.status_code == 200, login.text
        tokens = login.json()
        return r.json(), {'Authorization': f"Bearer {tokens['access_token']}"}, tokens
    return _make

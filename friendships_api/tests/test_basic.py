import logging
import pytest
from friendships_api.core import setup_logging
from friendships_api.models import async_database_url


@pytest.mark.asyncio
async def test_healthz(client):
    res = await client.get('/healthz')
    assert res.status_code == 200
    assert res.json() == {'status': 'ok'}


@pytest.mark.asyncio
async def test_me_requires_auth(client):
    res = await client.get('/api/users/me')
    assert res.status_code == 401


def test_setup_logging_falls_back_to_info():
    logger = setup_logging('verbose-please')
    assert logger.level == logging.INFO
    assert setup_logging('debug').level == logging.DEBUG
    setup_logging('INFO')


def test_async_database_url():
    assert async_database_url('postgresql://u:p@h/db') == 'postgresql+asyncpg://u:p@h/db'
    assert async_database_url('sqlite+aiosqlite:///x.db') == 'sqlite+aiosqlite:///x.db'
    assert async_database_url(None).startswith('postgresql+asyncpg://')

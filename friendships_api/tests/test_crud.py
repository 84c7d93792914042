import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from friendships_api import crud
from friendships_api.schemas.users import RegisterIn


async def _user(name):
    return await crud.create_user(RegisterIn(username=name, email=f'{name}@example.com', password='pw'))


@pytest.mark.asyncio
async def test_send_twice_keeps_single_edge(db):
    a = await _user('a')
    b = await _user('b')
    first = await crud.send_friendship_request(a.id, b.id)
    second = await crud.send_friendship_request(a.id, b.id)
    assert first.id == second.id
    assert second.status == 'requested'
    assert len(await crud.list_incoming_requests(b.id)) == 1


@pytest.mark.asyncio
async def test_send_to_accepted_friend_propagates_integrity_error(db):
    a = await _user('a')
    b = await _user('b')
    await crud.send_friendship_request(a.id, b.id)
    await crud.accept_friendship_request(b.id, a.id)

    with pytest.raises(IntegrityError):
        await crud.send_friendship_request(a.id, b.id)

    assert (await crud.get_friendship(a.id, b.id)).status == 'accepted'


@pytest.mark.asyncio
async def test_pending_and_existence_checks(db):
    a = await _user('a')
    b = await _user('b')
    assert await crud.user_exists(b.id)
    assert not await crud.user_exists(b.id + 100)

    assert not await crud.has_pending_request(a.id, b.id)
    await crud.send_friendship_request(a.id, b.id)
    assert await crud.has_pending_request(a.id, b.id)
    assert not await crud.has_pending_request(b.id, a.id)

    await crud.decline_friendship_request(b.id, a.id)
    assert not await crud.has_pending_request(a.id, b.id)


@pytest.mark.asyncio
async def test_create_user_duplicate_returns_none(db):
    await _user('a')
    assert await _user('a') is None


@pytest.mark.asyncio
async def test_accept_rolls_back_on_failure(db, monkeypatch):
    a = await _user('a')
    b = await _user('b')
    await crud.send_friendship_request(a.id, b.id)

    def failing_add(self, instance, _warn=True):
        raise RuntimeError('insert failed')

    # the reciprocal insert fails after the incoming edge was already updated
    monkeypatch.setattr(AsyncSession, 'add', failing_add)
    with pytest.raises(RuntimeError):
        await crud.accept_friendship_request(b.id, a.id)
    monkeypatch.undo()

    assert (await crud.get_friendship(a.id, b.id)).status == 'requested'
    assert await crud.get_friendship(b.id, a.id) is None


@pytest.mark.asyncio
async def test_revoke_refresh_token_only_for_owner(db):
    await _user('a')
    b = await _user('b')
    tokens = await crud.authenticate_user('b', 'pw')

    assert not await crud.revoke_refresh_token(tokens['refresh_token'], b.id + 100)
    assert await crud.refresh_access_token(tokens['refresh_token']) is not None

    assert await crud.revoke_refresh_token(tokens['refresh_token'], b.id)
    assert await crud.refresh_access_token(tokens['refresh_token']) is None

from fastapi import APIRouter, Depends, HTTPException, Form
import logging
from ..schemas.users import RegisterIn, TokenOut, UserOut, RefreshIn
from ..schemas.friendships import ActionOkOut
from ..crud import (
    create_user,
    authenticate_user,
    get_user_by_id,
    refresh_access_token,
    revoke_refresh_token,
    list_friends
)
from ..auth import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post('/register', response_model=UserOut)
async def register(payload: RegisterIn):
    user = await create_user(payload)
    if not user:
        raise HTTPException(400, 'Username or email already registered')

    logger.info({'msg': 'user_registered', 'user_id': user.id})
    return user


@router.post('/login', response_model=TokenOut)
async def login(
    username: str = Form(...),
    password: str = Form(...),
    device_id: str = Form(None)
):
    token = await authenticate_user(username, password, device_id=device_id)
    if not token:
        raise HTTPException(status_code=401, detail='Invalid credentials')
    return token


@router.post('/refresh', response_model=TokenOut)
async def refresh(payload: RefreshIn):
    token = await refresh_access_token(payload.refresh_token)
    if not token:
        raise HTTPException(status_code=401, detail='Invalid refresh token')
    return token


@router.post('/logout', response_model=ActionOkOut)
async def logout(
    refresh_token: str = Form(None),
    current_user: dict = Depends(get_current_user)
):
    if refresh_token:
        await revoke_refresh_token(refresh_token, current_user['id'])

    logger.info({'msg': 'user_logged_out', 'user_id': current_user['id']})
    return {'ok': True}


@router.get('/me', response_model=UserOut)
async def me(current_user: dict = Depends(get_current_user)):
    user = await get_user_by_id(current_user['id'])
    if not user:
        raise HTTPException(404, 'User not found')
    return user


@router.get('/me/friends', response_model=list[UserOut])
async def my_friends(current_user: dict = Depends(get_current_user)):
    return await list_friends(current_user['id'])

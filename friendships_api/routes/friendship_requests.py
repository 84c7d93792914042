from fastapi import APIRouter, Depends, HTTPException
from typing import List
import logging
from ..schemas.friendships import FriendshipRequestIn, FriendshipOut, ActionOkOut
from ..crud import (
    send_friendship_request,
    accept_friendship_request,
    decline_friendship_request,
    list_incoming_requests,
    get_friendship
)
from ..auth import get_current_user
from ..guards import can_send_friendship_request, can_answer_friendship_request
from ..core import FRIENDSHIP_REQUESTS

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post('/send', response_model=ActionOkOut)
async def send(
    payload: FriendshipRequestIn = Depends(can_send_friendship_request),
    current_user: dict = Depends(get_current_user)
):
    await send_friendship_request(current_user['id'], payload.friend_user_id)

    FRIENDSHIP_REQUESTS.labels(action='send').inc()
    logger.info({
        'msg': 'friendship_request_sent',
        'user_id': current_user['id'],
        'friend_user_id': payload.friend_user_id
    })

    return {'ok': True}


@router.post('/accept', response_model=ActionOkOut)
async def accept(
    payload: FriendshipRequestIn = Depends(can_answer_friendship_request),
    current_user: dict = Depends(get_current_user)
):
    await accept_friendship_request(current_user['id'], payload.friend_user_id)

    FRIENDSHIP_REQUESTS.labels(action='accept').inc()
    logger.info({
        'msg': 'friendship_request_accepted',
        'user_id': current_user['id'],
        'friend_user_id': payload.friend_user_id
    })

    return {'ok': True}


@router.post('/decline', response_model=ActionOkOut)
async def decline(
    payload: FriendshipRequestIn = Depends(can_answer_friendship_request),
    current_user: dict = Depends(get_current_user)
):
    await decline_friendship_request(current_user['id'], payload.friend_user_id)

    FRIENDSHIP_REQUESTS.labels(action='decline').inc()
    logger.info({
        'msg': 'friendship_request_declined',
        'user_id': current_user['id'],
        'friend_user_id': payload.friend_user_id
    })

    return {'ok': True}


@router.get('/incoming', response_model=List[FriendshipOut])
async def incoming(current_user: dict = Depends(get_current_user)):
    return await list_incoming_requests(current_user['id'])


@router.get('/outgoing/{friend_user_id}', response_model=FriendshipOut)
async def outgoing(friend_user_id: int, current_user: dict = Depends(get_current_user)):
    """The caller's own edge towards ``friend_user_id``, whatever its status."""
    edge = await get_friendship(current_user['id'], friend_user_id)
    if not edge:
        raise HTTPException(404, 'Not found')
    return edge

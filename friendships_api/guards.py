"""
Authorization predicates for the friendship request procedures.

Each guard sits on top of ``get_current_user``, parses the request body and
checks a precondition row before the handler runs. They hand the parsed body
on to the handler so it is only read once.
"""
from fastapi import Depends, HTTPException
from .auth import get_current_user
from .crud import user_exists, has_pending_request
from .schemas.friendships import FriendshipRequestIn


async def can_send_friendship_request(
    payload: FriendshipRequestIn,
    current_user: dict = Depends(get_current_user)
) -> FriendshipRequestIn:
    if not await user_exists(payload.friend_user_id):
        raise HTTPException(400, 'User not found')
    return payload


async def can_answer_friendship_request(
    payload: FriendshipRequestIn,
    current_user: dict = Depends(get_current_user)
) -> FriendshipRequestIn:
    # the request being answered goes friend -> me
    if not await has_pending_request(payload.friend_user_id, current_user['id']):
        raise HTTPException(400, 'No pending friendship request')
    return payload

from datetime import datetime
from pydantic import BaseModel, Field
from ..models.friendships import FriendshipStatus

class FriendshipRequestIn(BaseModel):
    """Body shared by send/accept/decline."""
    friend_user_id: int = Field(..., alias='friendUserId', gt=0)

    class Config:
        populate_by_name = True

class FriendshipOut(BaseModel):
    id: int
    user_id: int
    friend_user_id: int
    status: FriendshipStatus
    created_at: datetime | None = None

    class Config:
        from_attributes = True

class ActionOkOut(BaseModel):
    ok: bool = True

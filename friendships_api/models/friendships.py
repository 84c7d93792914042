from enum import Enum
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint, func
from . import Base


class FriendshipStatus(str, Enum):
    REQUESTED = 'requested'
    ACCEPTED = 'accepted'
    DECLINED = 'declined'


class Friendship(Base):
    """One directed edge: ``user_id`` considers ``friend_user_id`` a friend (or asked to)."""
    __tablename__ = 'friendships'
    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey('users.id', ondelete='CASCADE'), index=True, nullable=False)
    friend_user_id = Column(Integer, ForeignKey('users.id', ondelete='CASCADE'), index=True, nullable=False)
    status = Column(String(20), nullable=False, default=FriendshipStatus.REQUESTED.value)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
    __table_args__ = (
        UniqueConstraint('user_id', 'friend_user_id', name='uix_friendship_edge'),
    )

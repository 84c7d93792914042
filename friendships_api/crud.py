from .models import AsyncSessionLocal
from .models.users import User
from .models.session_tokens import SessionToken
from .models.friendships import Friendship, FriendshipStatus
from passlib.context import CryptContext
from .auth import create_access_token, generate_refresh_token, hash_token, REFRESH_TOKEN_TTL_DAYS
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from datetime import datetime, timedelta, timezone

pwd_ctx = CryptContext(schemes=['bcrypt'], deprecated='auto')

async def create_user(payload):
    """Returns None when the username or email is already taken."""
    async with AsyncSessionLocal() as session:
        user = User(
            username=payload.username,
            email=payload.email,
            hashed_password=pwd_ctx.hash(payload.password),
            display_name=payload.display_name,
        )
        session.add(user)
        try:
            await session.commit()
        except IntegrityError:
            await session.rollback()
            return None
        await session.refresh(user)
        return user

async def authenticate_user(username, password, device_id: str | None = None):
    async with AsyncSessionLocal() as session:
        q = await session.execute(select(User).where(User.username == username))
        user = q.scalars().first()
        if not user or not pwd_ctx.verify(password, user.hashed_password):
            return None
        access = create_access_token({'id': user.id, 'username': user.username})
        refresh = generate_refresh_token()
        expires_at = datetime.now(timezone.utc) + timedelta(days=REFRESH_TOKEN_TTL_DAYS)
        st = SessionToken(user_id=user.id, device_id=device_id, token_hash=hash_token(refresh), expires_at=expires_at)
        session.add(st)
        await session.commit()
        return {'access_token': access, 'token_type': 'bearer', 'refresh_token': refresh}

async def refresh_access_token(refresh_token: str):
    async with AsyncSessionLocal() as session:
        token_hash = hash_token(refresh_token)
        q = await session.execute(select(SessionToken).where(SessionToken.token_hash == token_hash, SessionToken.revoked_at.is_(None), SessionToken.expires_at > datetime.now(timezone.utc)))
        st = q.scalars().first()
        if not st:
            return None
        uq = await session.execute(select(User).where(User.id == st.user_id))
        user = uq.scalars().first()
        if not user:
            return None
        access = create_access_token({'id': user.id, 'username': user.username})
        return {'access_token': access, 'token_type': 'bearer'}

async def revoke_refresh_token(refresh_token: str, user_id: int):
    """Revoke one of ``user_id``'s own refresh tokens; tokens of other users are left alone."""
    async with AsyncSessionLocal() as session:
        token_hash = hash_token(refresh_token)
        q = await session.execute(select(SessionToken).where(SessionToken.token_hash == token_hash, SessionToken.user_id == user_id, SessionToken.revoked_at.is_(None)))
        st = q.scalars().first()
        if not st:
            return False
        st.revoked_at = datetime.now(timezone.utc)
        await session.commit()
        return True

async def get_user_by_id(user_id: int):
    async with AsyncSessionLocal() as session:
        q = await session.execute(select(User).where(User.id==user_id))
        return q.scalars().first()

async def user_exists(user_id: int) -> bool:
    async with AsyncSessionLocal() as session:
        q = await session.execute(select(User.id).where(User.id==user_id).limit(1))
        return q.scalar() is not None

# friendships
async def get_friendship(user_id: int, friend_user_id: int):
    async with AsyncSessionLocal() as session:
        q = await session.execute(select(Friendship).where(Friendship.user_id==user_id, Friendship.friend_user_id==friend_user_id))
        return q.scalars().first()

async def has_pending_request(from_user_id: int, to_user_id: int) -> bool:
    async with AsyncSessionLocal() as session:
        q = await session.execute(
            select(Friendship.id).where(
                Friendship.user_id==from_user_id,
                Friendship.friend_user_id==to_user_id,
                Friendship.status==FriendshipStatus.REQUESTED.value,
            ).limit(1)
        )
        return q.scalar() is not None

async def send_friendship_request(user_id: int, friend_user_id: int):
    """Open a request user -> friend, re-opening a previously declined/requested edge.

    An already accepted edge is left to the unique constraint, so the
    IntegrityError reaches the caller.
    """
    async with AsyncSessionLocal() as session:
        q = await session.execute(
            select(Friendship).where(
                Friendship.user_id==user_id,
                Friendship.friend_user_id==friend_user_id,
                Friendship.status!=FriendshipStatus.ACCEPTED.value,
            )
        )
        existing = q.scalars().first()
        if existing:
            existing.status = FriendshipStatus.REQUESTED.value
            edge = existing
        else:
            edge = Friendship(user_id=user_id, friend_user_id=friend_user_id, status=FriendshipStatus.REQUESTED.value)
            session.add(edge)
        await session.commit()
        await session.refresh(edge)
        return edge

async def accept_friendship_request(user_id: int, friend_user_id: int):
    """Accept friend -> user and make sure user -> friend is accepted too, atomically."""
    async with AsyncSessionLocal() as session:
        async with session.begin():
            await session.execute(
                update(Friendship)
                .where(Friendship.user_id==friend_user_id, Friendship.friend_user_id==user_id)
                .values(status=FriendshipStatus.ACCEPTED.value)
            )
            q = await session.execute(select(Friendship).where(Friendship.user_id==user_id, Friendship.friend_user_id==friend_user_id))
            reciprocal = q.scalars().first()
            if reciprocal is None:
                session.add(Friendship(user_id=user_id, friend_user_id=friend_user_id, status=FriendshipStatus.ACCEPTED.value))
            else:
                reciprocal.status = FriendshipStatus.ACCEPTED.value

async def decline_friendship_request(user_id: int, friend_user_id: int):
    async with AsyncSessionLocal() as session:
        await session.execute(
            update(Friendship)
            .where(Friendship.user_id==friend_user_id, Friendship.friend_user_id==user_id)
            .values(status=FriendshipStatus.DECLINED.value)
        )
        await session.commit()

async def list_incoming_requests(user_id: int):
    async with AsyncSessionLocal() as session:
        res = await session.execute(
            select(Friendship)
            .where(Friendship.friend_user_id==user_id, Friendship.status==FriendshipStatus.REQUESTED.value)
            .order_by(Friendship.id.asc())
        )
        return res.scalars().all()

async def list_friends(user_id: int):
    async with AsyncSessionLocal() as session:
        # one accepted outgoing edge per friend
        ids = select(Friendship.friend_user_id).where(
            Friendship.user_id==user_id,
            Friendship.status==FriendshipStatus.ACCEPTED.value,
        )
        users = await session.execute(select(User).where(User.id.in_(ids)).order_by(User.id.asc()))
        return users.scalars().all()

import logging
from datetime import UTC, datetime, timedelta

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.security import (
    create_access_token,
    create_refresh_token,
    decode_refresh_token,
    hash_password,
    verify_password,
)
from app.models.refresh_token import RefreshToken, naive_utc
from app.models.user import User, UserCreate, UserPublic, UserRole

logger = logging.getLogger(__name__)


async def get_user_by_identifier(session: AsyncSession, identifier: str) -> User | None:
    """Clients sign in with their username or their document number."""
    result = await session.execute(
        select(User).where(or_(User.username == identifier, User.document == identifier))
    )
    return result.scalars().first()


async def get_user_by_id(session: AsyncSession, user_id: int) -> User | None:
    result = await session.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def username_or_document_taken(
    session: AsyncSession, username: str, document: str | None
) -> str | None:
    """Name of the clashing field, if any."""
    result = await session.execute(select(User.id).where(User.username == username))
    if result.first():
        return "username"
    if document:
        result = await session.execute(select(User.id).where(User.document == document))
        if result.first():
            return "document"
    return None


async def create_user(session: AsyncSession, data: UserCreate) -> User:
    user = User(
        **data.model_dump(exclude={"password"}),
        hashed_password=hash_password(data.password),
    )
    session.add(user)
    await session.flush()
    await session.refresh(user)
    return user


def user_to_public(user: User) -> UserPublic:
    return UserPublic.model_validate(user, from_attributes=True)


def make_token_pair(user: User) -> tuple[str, str, int]:
    access = create_access_token(user.id, user.role.value)
    refresh = create_refresh_token(user.id)
    expires_in = settings.access_token_expire_minutes * 60
    return access, refresh, expires_in


async def store_refresh_token(
    session: AsyncSession, user_id: int, refresh_token: str
) -> None:
    user_id_str, jti = decode_refresh_token(refresh_token)
    if not user_id_str or not jti:
        return
    expires_at = naive_utc(datetime.now(UTC) + timedelta(days=settings.refresh_token_expire_days))
    session.add(RefreshToken(user_id=user_id, jti=jti, expires_at=expires_at))
    await session.flush()


async def _issue_tokens(session: AsyncSession, user: User) -> tuple[User, str, str, int]:
    access, refresh, expires_in = make_token_pair(user)
    await store_refresh_token(session, user_id=user.id, refresh_token=refresh)
    return user, access, refresh, expires_in


async def login_user(
    session: AsyncSession, identifier: str, password: str
) -> tuple[User, str, str, int] | None:
    user = await get_user_by_identifier(session, identifier)
    if not user or not verify_password(password, user.hashed_password):
        logger.info("Failed login for %s", identifier)
        return None
    return await _issue_tokens(session, user)


async def signup_user(
    session: AsyncSession, data: UserCreate
) -> tuple[User, str, str, int] | str:
    """Register a client. Returns the clashing field name when username or document is taken."""
    clash = await username_or_document_taken(session, data.username, data.document)
    if clash:
        return clash
    # Admin accounts are provisioned by the shop, never through signup
    data = data.model_copy(update={"role": UserRole.client, "provider_id": None})
    user = await create_user(session, data)
    logger.info("Registered client %s (id=%s)", user.username, user.id)
    return await _issue_tokens(session, user)


async def revoke_refresh_token(session: AsyncSession, jti: str) -> None:
    result = await session.execute(select(RefreshToken).where(RefreshToken.jti == jti))
    row = result.scalar_one_or_none()
    if row:
        row.revoked = True
        session.add(row)


async def refresh_tokens(
    session: AsyncSession, refresh_token: str
) -> tuple[User, str, str, int] | None:
    user_id_str, jti = decode_refresh_token(refresh_token)
    if not user_id_str or not jti:
        return None
    result = await session.execute(
        select(RefreshToken).where(
            RefreshToken.jti == jti,
            RefreshToken.revoked == False,  # noqa: E712
            RefreshToken.expires_at > naive_utc(datetime.now(UTC)),
        )
    )
    token_row = result.scalar_one_or_none()
    if not token_row:
        return None
    user = await get_user_by_id(session, int(user_id_str))
    if not user:
        return None
    token_row.revoked = True
    session.add(token_row)
    return await _issue_tokens(session, user)

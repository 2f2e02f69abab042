"""User profile helpers."""
from __future__ import annotations

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.user import User


async def get_display_name(session: AsyncSession, user_id: str) -> str | None:
    """Return the profile display name for ``user_id``."""

    stmt: Select[tuple[str | None]] = select(User.display_name).where(User.user_id == user_id)
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def ensure_user(session: AsyncSession, *, user_id: str, display_name: str | None = None) -> User:
    """Fetch a user or create one if it does not yet exist."""

    user = await session.get(User, user_id)
    if user is None:
        user = User(user_id=user_id, display_name=display_name)
        session.add(user)
        await session.flush()
        return user

    if display_name is not None and user.display_name is None:
        user.display_name = display_name
    return user

"""Room membership and profile lookups used to gate call access."""
from __future__ import annotations

from typing import Optional, Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from ..repositories import memberships as memberships_repo
from ..repositories import users as users_repo


class Directory(Protocol):
    async def membership(self, room_id: str, user_id: str) -> Optional[str]: ...

    async def display_name(self, user_id: str) -> Optional[str]: ...


class SqlDirectory:
    """Directory backed by the homeserver database."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def membership(self, room_id: str, user_id: str) -> Optional[str]:
        return await memberships_repo.get_membership(self._session, room_id=room_id, user_id=user_id)

    async def display_name(self, user_id: str) -> Optional[str]:
        return await users_repo.get_display_name(self._session, user_id)

"""Room membership lookups."""
from __future__ import annotations

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.membership import RoomMembership


async def get_membership(session: AsyncSession, *, room_id: str, user_id: str) -> str | None:
    """Return the membership state of ``user_id`` in ``room_id``, if any."""

    stmt: Select[tuple[str]] = select(RoomMembership.membership).where(
        RoomMembership.room_id == room_id,
        RoomMembership.user_id == user_id,
    )
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def set_membership(session: AsyncSession, *, room_id: str, user_id: str, membership: str) -> RoomMembership:
    """Insert or update a membership row."""

    row = await session.get(RoomMembership, (room_id, user_id))
    if row is None:
        row = RoomMembership(room_id=room_id, user_id=user_id, membership=membership)
        session.add(row)
    else:
        row.membership = membership
    await session.flush()
    return row

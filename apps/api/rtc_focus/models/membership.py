"""Room membership model."""
from __future__ import annotations

import enum

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class MembershipState(str, enum.Enum):
    INVITE = "invite"
    JOIN = "join"
    KNOCK = "knock"
    LEAVE = "leave"
    BAN = "ban"


class RoomMembership(Base):
    """Current membership of a user in a room, as resolved from room state."""

    __tablename__ = "room_memberships"

    room_id: Mapped[str] = mapped_column(String, primary_key=True)
    user_id: Mapped[str] = mapped_column(String, primary_key=True)
    membership: Mapped[str] = mapped_column(String, nullable=False)

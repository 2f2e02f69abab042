"""Expose ORM models."""
from .base import Base
from .membership import MembershipState, RoomMembership
from .user import User

__all__ = [
    "Base",
    "MembershipState",
    "RoomMembership",
    "User",
]

"""Create database schema and seed a demo room for local call testing."""
from __future__ import annotations

import asyncio

from rtc_focus.db.session import SessionLocal, engine
from rtc_focus.models.base import Base
from rtc_focus.models.membership import MembershipState
from rtc_focus.repositories import memberships as memberships_repo
from rtc_focus.repositories import users as users_repo

DEMO_ROOM_ID = "!demo:localhost"

USERS = [
	{"user_id": "@alice:localhost", "display_name": "Alice"},
	{"user_id": "@bob:localhost", "display_name": None},
	{"user_id": "@mallory:localhost", "display_name": "Mallory"},
]

MEMBERSHIPS = [
	(DEMO_ROOM_ID, "@alice:localhost", MembershipState.JOIN),
	(DEMO_ROOM_ID, "@bob:localhost", MembershipState.JOIN),
	(DEMO_ROOM_ID, "@mallory:localhost", MembershipState.INVITE),
]


async def create_schema() -> None:
	async with engine.begin() as conn:
		await conn.run_sync(Base.metadata.create_all)


async def seed_directory() -> None:
	"""Insert demo users and their memberships in the demo room."""

	async with SessionLocal() as session:
		async with session.begin():
			for user_data in USERS:
				await users_repo.ensure_user(session, **user_data)
			for room_id, user_id, state in MEMBERSHIPS:
				await memberships_repo.set_membership(
					session, room_id=room_id, user_id=user_id, membership=state.value
				)


async def main() -> None:
	await create_schema()
	await seed_directory()
	print("Database schema ensured and demo room seeded.")


if __name__ == "__main__":
	asyncio.run(main())

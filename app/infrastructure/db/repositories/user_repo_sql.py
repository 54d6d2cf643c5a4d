from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.interfaces.user_repo import UserRecord, UserRepo
from app.infrastructure.db.rows import to_record
from app.infrastructure.db.tables import users


class UserRepoSQL(UserRepo):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, user_id: int) -> UserRecord | None:
        result = await self._session.execute(select(users).where(users.c.id == user_id).limit(1))
        row = result.mappings().first()
        return to_record(UserRecord, row) if row else None

    async def get_by_open_id(self, open_id: str) -> UserRecord | None:
        result = await self._session.execute(select(users).where(users.c.open_id == open_id).limit(1))
        row = result.mappings().first()
        return to_record(UserRecord, row) if row else None

    async def touch_last_signed_in(self, user_id: int, when: datetime) -> None:
        await self._session.execute(update(users).where(users.c.id == user_id).values(last_signed_in=when))

    async def set_role(self, user_id: int, role: str) -> None:
        await self._session.execute(update(users).where(users.c.id == user_id).values(role=role))

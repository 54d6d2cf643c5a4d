from dataclasses import dataclass
from datetime import datetime


@dataclass
class UserRecord:
    id: int
    open_id: str
    name: str | None
    email: str | None
    role: str
    status: str
    login_method: str | None = None
    created_at: datetime | None = None
    last_signed_in: datetime | None = None


class UserRepo:
    async def get_by_id(self, user_id: int) -> UserRecord | None:
        raise NotImplementedError

    async def get_by_open_id(self, open_id: str) -> UserRecord | None:
        raise NotImplementedError

    async def touch_last_signed_in(self, user_id: int, when: datetime) -> None:
        raise NotImplementedError

    async def set_role(self, user_id: int, role: str) -> None:
        raise NotImplementedError

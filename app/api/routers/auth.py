from fastapi import APIRouter, Depends

from app.api.auth import get_current_user, get_optional_user
from app.api.schemas.common import UserOut
from app.application.interfaces.user_repo import UserRecord

router = APIRouter()


@router.get("/auth/me", response_model=UserOut | None)
async def me(user: UserRecord | None = Depends(get_optional_user)) -> UserOut | None:
    return UserOut.model_validate(user) if user else None


@router.post("/auth/logout")
async def logout(user: UserRecord = Depends(get_current_user)) -> dict:
    # Los tokens son stateless; el cliente descarta el suyo.
    return {"success": True}

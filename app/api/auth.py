"""
Dependencias de acceso para los routers.

Cuatro niveles: público, autenticado, cotista (usuario con perfil de
cotista) y admin (rol ``admin``). El token Bearer lo emite el proveedor de
identidad con el secreto compartido; ``sub`` es el ``open_id`` del usuario.
"""

import logging

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db_session
from app.application.interfaces.cotista_repo import CotistaRecord
from app.application.interfaces.user_repo import UserRecord
from app.config import Settings, get_settings
from app.core.security import decode_token
from app.domain.enums import UserRole, UserStatus
from app.domain.errors import ForbiddenError, UnauthenticatedError
from app.infrastructure.db.repositories.cotista_repo_sql import CotistaRepoSQL
from app.infrastructure.db.repositories.user_repo_sql import UserRepoSQL

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


async def _resolve_user(token: str, session: AsyncSession, settings: Settings) -> UserRecord:
    payload = decode_token(token, settings)
    user = await UserRepoSQL(session).get_by_open_id(payload["sub"])
    if user is None:
        raise UnauthenticatedError("Unknown user")
    if user.status == UserStatus.SUSPENDED.value:
        raise ForbiddenError("Account suspended")
    return user


async def get_optional_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
) -> UserRecord | None:
    """Usuario del token o ``None`` para visitantes y tokens inválidos."""
    if credentials is None:
        return None
    try:
        return await _resolve_user(credentials.credentials, session, settings)
    except UnauthenticatedError:
        logger.info("Ignoring invalid bearer token on public route")
        return None


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
) -> UserRecord:
    if credentials is None:
        raise UnauthenticatedError()
    return await _resolve_user(credentials.credentials, session, settings)


async def require_admin(user: UserRecord = Depends(get_current_user)) -> UserRecord:
    if user.role != UserRole.ADMIN.value:
        raise ForbiddenError("Admin role required")
    return user


async def require_cotista(
    user: UserRecord = Depends(get_current_user),
    session: AsyncSession = Depends(get_db_session),
) -> CotistaRecord:
    cotista = await CotistaRepoSQL(session).get_by_user(user.id)
    if cotista is None:
        raise ForbiddenError("Cotista profile required")
    return cotista

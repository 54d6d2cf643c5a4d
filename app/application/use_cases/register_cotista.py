import logging
from typing import Any

from app.application.interfaces.audit_repo import AuditRepo
from app.application.interfaces.catalog_query import CatalogQuery
from app.application.interfaces.clock import Clock
from app.application.interfaces.cotista_repo import CotistaRecord, CotistaRepo
from app.application.interfaces.transaction_manager import TransactionManager
from app.application.interfaces.user_repo import UserRecord, UserRepo
from app.application.use_cases.upload_cotista_document import DOCUMENT_KEY_COLUMNS
from app.domain.enums import AuditEntityType, CotistaDocumentType, CotistaStatus, UserRole
from app.domain.errors import BadRequestError, ConflictError, NotFoundError


class RegisterCotistaUseCase:
    def __init__(
        self,
        cotista_repo: CotistaRepo,
        user_repo: UserRepo,
        catalog_query: CatalogQuery,
        audit_repo: AuditRepo,
        transaction_manager: TransactionManager,
        clock: Clock,
    ) -> None:
        self._cotista_repo = cotista_repo
        self._user_repo = user_repo
        self._catalog_query = catalog_query
        self._audit_repo = audit_repo
        self._transaction_manager = transaction_manager
        self._clock = clock
        self._logger = logging.getLogger(__name__)

    async def execute(
        self,
        user: UserRecord,
        development_id: int,
        terms_accepted: bool,
        personal_data: dict[str, Any] | None = None,
        bank_details: dict[str, Any] | None = None,
        document_keys: dict[CotistaDocumentType, str] | None = None,
    ) -> CotistaRecord:
        if not terms_accepted:
            raise BadRequestError("Terms must be accepted to register as cotista")

        keys = {
            DOCUMENT_KEY_COLUMNS[CotistaDocumentType(doc_type)]: key
            for doc_type, key in (document_keys or {}).items()
            if key
        }
        for key in keys.values():
            if not key.startswith(f"cotista-documents/{user.id}/"):
                raise BadRequestError("Document key does not belong to this user")
        # Con los tres documentos el perfil entra directo a revisión.
        status = CotistaStatus.UNDER_REVIEW if len(keys) == len(DOCUMENT_KEY_COLUMNS) else CotistaStatus.REGISTERED

        async with self._transaction_manager.start():
            if await self._catalog_query.get_development(development_id) is None:
                raise NotFoundError("Development", development_id)
            if await self._cotista_repo.get_by_user(user.id) is not None:
                raise ConflictError("User is already registered as cotista")

            cotista = await self._cotista_repo.create(
                user_id=user.id,
                development_id=development_id,
                personal_data=personal_data,
                bank_details=bank_details,
                document_keys=keys,
                terms_accepted_at=self._clock.now(),
                status=status.value,
            )
            if user.role == UserRole.USER.value:
                await self._user_repo.set_role(user.id, UserRole.COTISTA.value)
            await self._audit_repo.add(
                entity_type=AuditEntityType.COTISTA.value,
                entity_id=cotista.id,
                actor_id=user.id,
                action="registered",
                metadata={"development_id": development_id, "status": status.value},
                created_at=self._clock.now(),
            )

        self._logger.info(
            "Cotista registered",
            extra={"cotista_id": cotista.id, "user_id": user.id, "status": status.value},
        )
        return cotista

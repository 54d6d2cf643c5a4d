import logging
from typing import Sequence

from app.application.file_validation import DOCUMENT_TYPES, MAX_DOCUMENT_SIZE_MB, validate_file
from app.application.interfaces.clock import Clock
from app.application.interfaces.cotista_repo import CotistaRepo
from app.application.interfaces.object_storage import ObjectStorage
from app.application.interfaces.transaction_manager import TransactionManager
from app.application.uploads import COTISTA_DOCUMENTS, UploadedFile, compensate_on_error, upload_file
from app.domain.enums import CotistaDocumentType, CotistaStatus
from app.domain.errors import BadRequestError

# Columna de ``cotistas`` donde se guarda la llave de cada tipo.
DOCUMENT_KEY_COLUMNS: dict[CotistaDocumentType, str] = {
    CotistaDocumentType.IDENTITY: "identity_document_key",
    CotistaDocumentType.ADDRESS_PROOF: "address_proof_key",
    CotistaDocumentType.OWNERSHIP_PROOF: "ownership_proof_key",
}


class UploadCotistaDocumentUseCase:
    """
    Sube un documento de cotista (identidad, domicilio, propiedad).

    Puede usarse antes del registro: la llave devuelta se envía luego en
    ``register``. Si el usuario ya tiene perfil, la llave se guarda en él y,
    cuando los tres documentos están presentes, el perfil pasa a revisión.
    """

    def __init__(
        self,
        cotista_repo: CotistaRepo,
        storage: ObjectStorage,
        transaction_manager: TransactionManager,
        clock: Clock,
        allowed_types: Sequence[str] = DOCUMENT_TYPES,
        max_size_mb: int = MAX_DOCUMENT_SIZE_MB,
    ) -> None:
        self._cotista_repo = cotista_repo
        self._storage = storage
        self._transaction_manager = transaction_manager
        self._clock = clock
        self._allowed_types = allowed_types
        self._max_size_mb = max_size_mb
        self._logger = logging.getLogger(__name__)

    async def execute(
        self,
        user_id: int,
        document_type: CotistaDocumentType,
        file_bytes: bytes,
        file_name: str,
        content_type: str,
    ) -> UploadedFile:
        validation = validate_file(content_type, len(file_bytes), self._allowed_types, self._max_size_mb)
        if not validation.valid:
            raise BadRequestError(validation.error or "Invalid file")

        uploaded = await upload_file(
            self._storage, file_bytes, user_id, COTISTA_DOCUMENTS, file_name, content_type, self._clock
        )

        async with compensate_on_error(self._storage, uploaded.file_key):
            async with self._transaction_manager.start():
                cotista = await self._cotista_repo.get_by_user(user_id)
                if cotista is not None:
                    column = DOCUMENT_KEY_COLUMNS[CotistaDocumentType(document_type)]
                    await self._cotista_repo.set_document_key(cotista.id, column, uploaded.file_key)
                    refreshed = await self._cotista_repo.get(cotista.id)
                    if refreshed and refreshed.status == CotistaStatus.REGISTERED.value and _has_all_documents(refreshed):
                        await self._cotista_repo.update_status(
                            cotista.id, CotistaStatus.REGISTERED.value, CotistaStatus.UNDER_REVIEW.value
                        )

        self._logger.info(
            "Cotista document uploaded",
            extra={"user_id": user_id, "document_type": CotistaDocumentType(document_type).value},
        )
        return uploaded


def _has_all_documents(cotista) -> bool:
    return all(getattr(cotista, column) for column in DOCUMENT_KEY_COLUMNS.values())

import logging
from typing import Sequence

from app.application.file_validation import DOCUMENT_TYPES, MAX_DOCUMENT_SIZE_MB, validate_file
from app.application.interfaces.clock import Clock
from app.application.interfaces.document_repo import DocumentRecord, DocumentRepo
from app.application.interfaces.object_storage import ObjectStorage
from app.application.interfaces.reservation_repo import ReservationRepo
from app.application.interfaces.transaction_manager import TransactionManager
from app.application.lifecycle_manager import ReservationLifecycleManager
from app.application.uploads import CUSTOMER_DOCUMENTS, compensate_on_error, upload_file
from app.domain.enums import DocumentStatus, DocumentType, LifecycleEvent
from app.domain.errors import BadRequestError, ForbiddenError, InvalidTransitionError, NotFoundError
from app.domain.lifecycle import can_apply


class UploadCustomerDocumentUseCase:
    """
    Sube un documento de verificación del cliente.

    Orden: validación del archivo y del estado de la reservación, luego
    almacenamiento, luego fila ``documents`` + transición. Si la escritura en
    base de datos falla, el objeto subido se borra.
    """

    def __init__(
        self,
        reservation_repo: ReservationRepo,
        document_repo: DocumentRepo,
        storage: ObjectStorage,
        lifecycle: ReservationLifecycleManager,
        transaction_manager: TransactionManager,
        clock: Clock,
        allowed_types: Sequence[str] = DOCUMENT_TYPES,
        max_size_mb: int = MAX_DOCUMENT_SIZE_MB,
    ) -> None:
        self._reservation_repo = reservation_repo
        self._document_repo = document_repo
        self._storage = storage
        self._lifecycle = lifecycle
        self._transaction_manager = transaction_manager
        self._clock = clock
        self._allowed_types = allowed_types
        self._max_size_mb = max_size_mb
        self._logger = logging.getLogger(__name__)

    async def execute(
        self,
        reservation_id: int,
        customer_id: int,
        document_type: DocumentType,
        file_bytes: bytes,
        file_name: str,
        content_type: str,
    ) -> DocumentRecord:
        reservation = await self._reservation_repo.get(reservation_id)
        if reservation is None:
            raise NotFoundError("Reservation", reservation_id)
        if reservation.customer_id != customer_id:
            raise ForbiddenError()

        validation = validate_file(content_type, len(file_bytes), self._allowed_types, self._max_size_mb)
        if not validation.valid:
            raise BadRequestError(validation.error or "Invalid file")

        if not can_apply(reservation.status, LifecycleEvent.DOCUMENT_UPLOADED):
            raise InvalidTransitionError(
                reservation.id, reservation.status, LifecycleEvent.DOCUMENT_UPLOADED.value
            )

        uploaded = await upload_file(
            self._storage, file_bytes, customer_id, CUSTOMER_DOCUMENTS, file_name, content_type, self._clock
        )

        async with compensate_on_error(self._storage, uploaded.file_key):
            async with self._transaction_manager.start():
                document = await self._document_repo.create(
                    reservation_id=reservation.id,
                    customer_id=customer_id,
                    document_type=DocumentType(document_type).value,
                    file_url=uploaded.file_url,
                    file_key=uploaded.file_key,
                    status=DocumentStatus.UNDER_REVIEW.value,
                )
                missing = await self._lifecycle.missing_document_types(reservation.id, accept_under_review=True)
                event = LifecycleEvent.DOCUMENT_UPLOADED if missing else LifecycleEvent.DOCUMENTS_SUBMITTED
                await self._lifecycle.transition(
                    reservation.id,
                    event,
                    actor_id=customer_id,
                    reason=f"document {document.id} ({document.document_type}) uploaded",
                )

        self._logger.info(
            "Customer document uploaded",
            extra={
                "reservation_id": reservation.id,
                "document_id": document.id,
                "document_type": document.document_type,
            },
        )
        return document

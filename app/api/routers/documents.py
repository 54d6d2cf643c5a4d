from fastapi import APIRouter, Depends, status

from app.api.auth import get_current_user
from app.api.dependencies import get_use_cases
from app.api.schemas.common import DocumentOut, UploadedFileOut
from app.api.schemas.documents import UploadCotistaDocumentRequest, UploadCustomerDocumentRequest
from app.application.interfaces.user_repo import UserRecord
from app.infrastructure.db.retry import retry_on_deadlock

router = APIRouter(prefix="/documents")


@router.post("/customer", response_model=DocumentOut, status_code=status.HTTP_201_CREATED)
async def upload_customer_document(
    payload: UploadCustomerDocumentRequest,
    user: UserRecord = Depends(get_current_user),
    use_cases=Depends(get_use_cases),
) -> DocumentOut:
    document = await retry_on_deadlock(
        lambda: use_cases["upload_customer_document"].execute(
            reservation_id=payload.reservation_id,
            customer_id=user.id,
            document_type=payload.document_type,
            file_bytes=payload.file_data,
            file_name=payload.file_name,
            content_type=payload.content_type,
        )
    )
    return DocumentOut.model_validate(document)


@router.post("/cotista", response_model=UploadedFileOut, status_code=status.HTTP_201_CREATED)
async def upload_cotista_document(
    payload: UploadCotistaDocumentRequest,
    user: UserRecord = Depends(get_current_user),
    use_cases=Depends(get_use_cases),
) -> UploadedFileOut:
    uploaded = await retry_on_deadlock(
        lambda: use_cases["upload_cotista_document"].execute(
            user_id=user.id,
            document_type=payload.document_type,
            file_bytes=payload.file_data,
            file_name=payload.file_name,
            content_type=payload.content_type,
        )
    )
    return UploadedFileOut.model_validate(uploaded)


@router.get("/reservation/{reservation_id}", response_model=list[DocumentOut])
async def list_reservation_documents(
    reservation_id: int,
    user: UserRecord = Depends(get_current_user),
    use_cases=Depends(get_use_cases),
) -> list[DocumentOut]:
    documents = await use_cases["list_documents"].execute(reservation_id, user)
    return [DocumentOut.model_validate(d) for d in documents]

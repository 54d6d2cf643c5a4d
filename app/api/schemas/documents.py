from pydantic import Base64Bytes, BaseModel, ConfigDict, Field

from app.domain.enums import CotistaDocumentType, DocumentType


class _FilePayload(BaseModel):
    model_config = ConfigDict(extra="forbid")

    file_name: str = Field(min_length=1, max_length=255)
    content_type: str = Field(min_length=1, max_length=100)
    file_data: Base64Bytes = Field(description="Contenido del archivo en base64")


class UploadCustomerDocumentRequest(_FilePayload):
    reservation_id: int
    document_type: DocumentType


class UploadCotistaDocumentRequest(_FilePayload):
    document_type: CotistaDocumentType


class UploadVoucherRequest(_FilePayload):
    notes: str | None = None

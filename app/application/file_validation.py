"""Validación de archivos entrantes antes de cualquier escritura."""

from dataclasses import dataclass
from typing import Sequence

DOCUMENT_TYPES: tuple[str, ...] = (
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/webp",
    "application/pdf",
)

MAX_DOCUMENT_SIZE_MB = 10


@dataclass(frozen=True)
class FileValidationResult:
    valid: bool
    error: str | None = None


def validate_file(
    content_type: str,
    size_bytes: int,
    allowed_types: Sequence[str] = DOCUMENT_TYPES,
    max_size_mb: int = MAX_DOCUMENT_SIZE_MB,
) -> FileValidationResult:
    """
    Acepta el archivo si algún tipo permitido aparece dentro de
    ``content_type`` y si el tamaño no supera ``max_size_mb`` MiB.

    La comparación es por subcadena, de modo que ``image/png; charset=x``
    también pasa.
    """
    if not any(allowed in content_type for allowed in allowed_types):
        return FileValidationResult(
            valid=False,
            error=f"File type not allowed. Allowed types: {', '.join(allowed_types)}",
        )

    max_bytes = max_size_mb * 1024 * 1024
    if size_bytes > max_bytes:
        return FileValidationResult(
            valid=False,
            error=f"File too large. Maximum size: {max_size_mb}MB",
        )

    return FileValidationResult(valid=True)

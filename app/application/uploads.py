"""
Pipeline de subida de archivos.

Los bytes se escriben primero en el almacenamiento de objetos y luego se
registran en la base de datos. ``compensate_on_error`` envuelve la escritura
en base de datos: si falla, el objeto recién subido se borra antes de
propagar el error, para no dejar archivos huérfanos.
"""

import logging
import re
import secrets
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass

from app.application.interfaces.clock import Clock, SystemClock
from app.application.interfaces.object_storage import ObjectStorage

logger = logging.getLogger(__name__)

CUSTOMER_DOCUMENTS = "customer-documents"
COTISTA_DOCUMENTS = "cotista-documents"
VOUCHERS = "vouchers"

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9.\-]")


@dataclass(frozen=True)
class UploadedFile:
    file_key: str
    file_url: str
    file_name: str
    content_type: str
    size: int


def sanitize_file_name(file_name: str) -> str:
    return _UNSAFE_CHARS.sub("_", file_name)


def build_file_key(category: str, owner_id: int, file_name: str, clock: Clock | None = None) -> str:
    """``category/owner_id/<epoch-ms>-<16 hex>-<nombre saneado>``"""
    clock = clock or SystemClock()
    return f"{category}/{owner_id}/{clock.epoch_ms()}-{secrets.token_hex(8)}-{sanitize_file_name(file_name)}"


async def upload_file(
    storage: ObjectStorage,
    file_bytes: bytes,
    owner_id: int,
    category: str,
    file_name: str,
    content_type: str,
    clock: Clock | None = None,
) -> UploadedFile:
    key = build_file_key(category, owner_id, file_name, clock)
    stored = await storage.put(key, file_bytes, content_type)
    logger.info(
        "File stored",
        extra={"file_key": stored.key, "category": category, "owner_id": owner_id, "size": len(file_bytes)},
    )
    return UploadedFile(
        file_key=stored.key,
        file_url=stored.url,
        file_name=sanitize_file_name(file_name),
        content_type=content_type,
        size=len(file_bytes),
    )


@asynccontextmanager
async def compensate_on_error(storage: ObjectStorage, file_key: str) -> AsyncIterator[None]:
    try:
        yield
    except Exception:
        logger.warning("Database write failed after upload, deleting stored object", extra={"file_key": file_key})
        try:
            await storage.delete(file_key)
        except Exception as cleanup_exc:  # noqa: BLE001
            logger.error("Could not delete orphaned object", exc_info=cleanup_exc, extra={"file_key": file_key})
        raise

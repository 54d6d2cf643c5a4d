import asyncio
import logging

import boto3
from botocore.config import Config
from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    ConnectionClosedError,
    EndpointConnectionError,
    ReadTimeoutError,
)

from app.application.interfaces.object_storage import ObjectStorage, StoredObject
from app.domain.errors import GatewayError
from app.infrastructure.circuit_breaker import CircuitBreakerError, storage_breaker
from app.infrastructure.db.retry import retry_with_backoff

logger = logging.getLogger(__name__)

_TRANSIENT_CODES = {"SlowDown", "RequestTimeout", "InternalError", "ServiceUnavailable", "500", "503"}


def is_transient_storage_error(error: Exception) -> bool:
    if isinstance(error, (EndpointConnectionError, ConnectionClosedError, ReadTimeoutError)):
        return True
    if isinstance(error, ClientError):
        return error.response.get("Error", {}).get("Code") in _TRANSIENT_CODES
    return False


class S3ObjectStorage(ObjectStorage):
    """S3-compatible object store (AWS, MinIO, Hetzner) using path-style addressing."""

    def __init__(
        self,
        bucket_name: str,
        region: str | None = None,
        endpoint_url: str | None = None,
        access_key_id: str | None = None,
        secret_access_key: str | None = None,
        public_base_url: str | None = None,
        presign_expiration: int = 3600,
    ) -> None:
        self._bucket = bucket_name
        self._public_base_url = public_base_url.rstrip("/") if public_base_url else None
        self._presign_expiration = presign_expiration
        self._client = boto3.client(
            "s3",
            aws_access_key_id=access_key_id,
            aws_secret_access_key=secret_access_key,
            region_name=region,
            endpoint_url=endpoint_url,
            config=Config(signature_version="s3v4", s3={"addressing_style": "path"}),
        )

    async def _call(self, operation: str, func, **params):
        async def attempt():
            return await asyncio.to_thread(storage_breaker.call, func, **params)

        try:
            return await retry_with_backoff(
                attempt,
                should_retry=is_transient_storage_error,
                max_attempts=3,
                base_delay=0.2,
                operation=f"s3.{operation}",
            )
        except CircuitBreakerError as exc:
            logger.error("Storage circuit breaker is open", extra={"operation": operation})
            raise GatewayError("storage", "File storage temporarily unavailable") from exc
        except (ClientError, BotoCoreError) as exc:
            logger.error("S3 request failed", exc_info=exc, extra={"operation": operation})
            raise GatewayError("storage", "File storage error") from exc

    def _url_for(self, key: str) -> str:
        if self._public_base_url:
            return f"{self._public_base_url}/{key}"
        return self._client.generate_presigned_url(
            "get_object",
            Params={"Bucket": self._bucket, "Key": key},
            ExpiresIn=self._presign_expiration,
        )

    async def put(self, key: str, data: bytes, content_type: str) -> StoredObject:
        await self._call(
            "put_object",
            self._client.put_object,
            Bucket=self._bucket,
            Key=key,
            Body=data,
            ContentType=content_type,
        )
        logger.info("Stored object", extra={"key": key, "size": len(data)})
        return StoredObject(key=key, url=self._url_for(key))

    async def delete(self, key: str) -> None:
        await self._call("delete_object", self._client.delete_object, Bucket=self._bucket, Key=key)
        logger.info("Deleted object", extra={"key": key})

from dataclasses import dataclass

from app.application.interfaces.object_storage import ObjectStorage, StoredObject


@dataclass
class _Blob:
    data: bytes
    content_type: str


class InMemoryObjectStorage(ObjectStorage):
    def __init__(self, base_url: str = "memory://uploads") -> None:
        self._base_url = base_url.rstrip("/")
        self.objects: dict[str, _Blob] = {}
        self.deleted: list[str] = []

    async def put(self, key: str, data: bytes, content_type: str) -> StoredObject:
        self.objects[key] = _Blob(data=data, content_type=content_type)
        return StoredObject(key=key, url=f"{self._base_url}/{key}")

    async def delete(self, key: str) -> None:
        self.objects.pop(key, None)
        self.deleted.append(key)

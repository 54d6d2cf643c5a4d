from dataclasses import dataclass


@dataclass
class StoredObject:
    key: str
    url: str


class ObjectStorage:
    async def put(self, key: str, data: bytes, content_type: str) -> StoredObject:
        raise NotImplementedError

    async def delete(self, key: str) -> None:
        raise NotImplementedError

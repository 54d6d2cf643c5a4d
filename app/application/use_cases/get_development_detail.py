from dataclasses import dataclass
from typing import Any

from app.application.interfaces.catalog_query import CatalogQuery
from app.domain.errors import NotFoundError


@dataclass
class DevelopmentDetail:
    development: dict[str, Any]
    photos: list[dict[str, Any]]
    amenities: list[dict[str, Any]]
    businesses: list[dict[str, Any]]


class GetDevelopmentDetailUseCase:
    def __init__(self, catalog_query: CatalogQuery) -> None:
        self._catalog_query = catalog_query

    async def execute(self, development_id: int | None = None, slug: str | None = None) -> DevelopmentDetail:
        if development_id is not None:
            development = await self._catalog_query.get_development(development_id)
        else:
            development = await self._catalog_query.get_development_by_slug(slug or "")
        if development is None:
            raise NotFoundError("Development", development_id if development_id is not None else slug)

        dev_id = development["id"]
        return DevelopmentDetail(
            development=development,
            photos=await self._catalog_query.list_photos(dev_id),
            amenities=await self._catalog_query.list_amenities(dev_id),
            businesses=await self._catalog_query.list_businesses(dev_id),
        )

from typing import Any

from fastapi import APIRouter, Depends

from app.api.dependencies import get_catalog_query
from app.application.interfaces.catalog_query import CatalogQuery
from app.domain.errors import NotFoundError

router = APIRouter(prefix="/geography")


@router.get("/countries")
async def list_countries(catalog: CatalogQuery = Depends(get_catalog_query)) -> list[dict[str, Any]]:
    return await catalog.list_countries()


@router.get("/countries/{country_id}/states")
async def list_states(country_id: int, catalog: CatalogQuery = Depends(get_catalog_query)) -> list[dict[str, Any]]:
    return await catalog.list_states(country_id)


@router.get("/states/{state_id}/cities")
async def list_cities(state_id: int, catalog: CatalogQuery = Depends(get_catalog_query)) -> list[dict[str, Any]]:
    return await catalog.list_cities(state_id)


@router.get("/cities/{slug}")
async def get_city(slug: str, catalog: CatalogQuery = Depends(get_catalog_query)) -> dict[str, Any]:
    city = await catalog.get_city_by_slug(slug)
    if city is None:
        raise NotFoundError("City", slug)
    return city

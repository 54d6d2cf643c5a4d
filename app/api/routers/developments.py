from dataclasses import asdict
from datetime import date
from typing import Any

from fastapi import APIRouter, Depends, Query

from app.api.dependencies import get_catalog_query, get_use_cases
from app.application.interfaces.catalog_query import CatalogQuery
from app.domain.errors import NotFoundError

router = APIRouter(prefix="/developments")


@router.get("")
async def list_developments(catalog: CatalogQuery = Depends(get_catalog_query)) -> list[dict[str, Any]]:
    return await catalog.list_developments_with_location()


@router.get("/by-city/{city_id}")
async def list_by_city(city_id: int, catalog: CatalogQuery = Depends(get_catalog_query)) -> list[dict[str, Any]]:
    return await catalog.list_developments_by_city(city_id)


@router.get("/by-slug/{slug}")
async def get_by_slug(slug: str, use_cases=Depends(get_use_cases)) -> dict[str, Any]:
    detail = await use_cases["get_development"].execute(slug=slug)
    return asdict(detail)


@router.get("/{development_id}")
async def get_development(development_id: int, use_cases=Depends(get_use_cases)) -> dict[str, Any]:
    detail = await use_cases["get_development"].execute(development_id=development_id)
    return asdict(detail)


@router.get("/{development_id}/availability")
async def list_availability(
    development_id: int,
    start_date: date | None = Query(default=None),
    end_date: date | None = Query(default=None),
    catalog: CatalogQuery = Depends(get_catalog_query),
) -> list[dict[str, Any]]:
    if await catalog.get_development(development_id) is None:
        raise NotFoundError("Development", development_id)
    return await catalog.list_open_slots(development_id, start_date, end_date)

from fastapi import APIRouter, Depends, Query

from app.api.dependencies import get_catalog_query
from app.application.interfaces.catalog_query import CatalogQuery
from app.domain.enums import Language

router = APIRouter()


@router.get("/i18n/translations")
async def get_translations(
    language: Language = Query(default=Language.EN),
    keys: list[str] | None = Query(default=None),
    catalog: CatalogQuery = Depends(get_catalog_query),
) -> dict[str, str]:
    return await catalog.get_translations(language.value, keys)


@router.get("/i18n/translations/{category}")
async def get_translations_by_category(
    category: str,
    language: Language = Query(default=Language.EN),
    catalog: CatalogQuery = Depends(get_catalog_query),
) -> dict[str, str]:
    return await catalog.get_translations_by_category(language.value, category)

from datetime import date
from typing import Any, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.interfaces.catalog_query import CatalogQuery
from app.infrastructure.db.tables import (
    amenities,
    business_developments,
    cities,
    cotista_availability,
    cotistas,
    countries,
    development_amenities,
    development_photos,
    developments,
    sponsored_businesses,
    states,
    translations,
)


def _plain(row: Any) -> dict[str, Any]:
    # Numeric llega como Decimal; la API expone float.
    data = dict(row)
    for key in ("latitude", "longitude", "rating"):
        if data.get(key) is not None:
            data[key] = float(data[key])
    return data


class CatalogQuerySQL(CatalogQuery):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def _all(self, stmt) -> list[dict[str, Any]]:
        result = await self._session.execute(stmt)
        return [_plain(row) for row in result.mappings().all()]

    async def _first(self, stmt) -> dict[str, Any] | None:
        result = await self._session.execute(stmt.limit(1))
        row = result.mappings().first()
        return _plain(row) if row else None

    async def get_translations(self, language: str, keys: Sequence[str] | None = None) -> dict[str, str]:
        stmt = select(translations.c.key, translations.c.value).where(translations.c.language == language)
        if keys:
            stmt = stmt.where(translations.c.key.in_(list(keys)))
        result = await self._session.execute(stmt)
        return {row.key: row.value for row in result}

    async def get_translations_by_category(self, language: str, category: str) -> dict[str, str]:
        stmt = select(translations.c.key, translations.c.value).where(
            translations.c.language == language,
            translations.c.category == category,
        )
        result = await self._session.execute(stmt)
        return {row.key: row.value for row in result}

    async def list_countries(self) -> list[dict[str, Any]]:
        return await self._all(select(countries).order_by(countries.c.id))

    async def list_states(self, country_id: int) -> list[dict[str, Any]]:
        return await self._all(select(states).where(states.c.country_id == country_id).order_by(states.c.id))

    async def list_cities(self, state_id: int) -> list[dict[str, Any]]:
        return await self._all(select(cities).where(cities.c.state_id == state_id).order_by(cities.c.id))

    async def get_city_by_slug(self, slug: str) -> dict[str, Any] | None:
        return await self._first(select(cities).where(cities.c.slug == slug))

    async def list_developments_with_location(self) -> list[dict[str, Any]]:
        stmt = (
            select(
                developments,
                cities.c.slug.label("city_slug"),
                cities.c.name_key.label("city_name_key"),
                states.c.code.label("state_code"),
                countries.c.code.label("country_code"),
            )
            .join(cities, cities.c.id == developments.c.city_id)
            .join(states, states.c.id == cities.c.state_id)
            .join(countries, countries.c.id == states.c.country_id)
            .where(developments.c.is_active.is_(True))
            .order_by(developments.c.id)
        )
        return await self._all(stmt)

    async def list_developments_by_city(self, city_id: int) -> list[dict[str, Any]]:
        stmt = (
            select(developments)
            .where(developments.c.city_id == city_id, developments.c.is_active.is_(True))
            .order_by(developments.c.id)
        )
        return await self._all(stmt)

    async def get_development(self, development_id: int) -> dict[str, Any] | None:
        return await self._first(select(developments).where(developments.c.id == development_id))

    async def get_development_by_slug(self, slug: str) -> dict[str, Any] | None:
        return await self._first(select(developments).where(developments.c.slug == slug))

    async def list_photos(self, development_id: int) -> list[dict[str, Any]]:
        stmt = (
            select(development_photos)
            .where(development_photos.c.development_id == development_id)
            .order_by(development_photos.c.sort_order, development_photos.c.id)
        )
        return await self._all(stmt)

    async def list_amenities(self, development_id: int) -> list[dict[str, Any]]:
        stmt = (
            select(amenities)
            .join(development_amenities, development_amenities.c.amenity_id == amenities.c.id)
            .where(development_amenities.c.development_id == development_id)
            .order_by(amenities.c.id)
        )
        return await self._all(stmt)

    async def list_businesses(self, development_id: int) -> list[dict[str, Any]]:
        stmt = (
            select(sponsored_businesses)
            .join(business_developments, business_developments.c.business_id == sponsored_businesses.c.id)
            .where(
                business_developments.c.development_id == development_id,
                sponsored_businesses.c.is_active.is_(True),
            )
            .order_by(business_developments.c.sort_order, sponsored_businesses.c.id)
        )
        return await self._all(stmt)

    async def list_open_slots(
        self,
        development_id: int,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> list[dict[str, Any]]:
        stmt = (
            select(cotista_availability)
            .join(cotistas, cotistas.c.id == cotista_availability.c.cotista_id)
            .where(
                cotistas.c.development_id == development_id,
                cotistas.c.status == "approved",
                cotista_availability.c.is_published.is_(True),
                cotista_availability.c.is_booked.is_(False),
            )
            .order_by(cotista_availability.c.start_date, cotista_availability.c.id)
        )
        if start_date is not None:
            stmt = stmt.where(cotista_availability.c.start_date >= start_date)
        if end_date is not None:
            stmt = stmt.where(cotista_availability.c.end_date <= end_date)
        return await self._all(stmt)

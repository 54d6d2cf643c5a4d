"""Consultas de solo lectura del catálogo público (traducciones, geografía, desarrollos)."""

from datetime import date
from typing import Any, Sequence


class CatalogQuery:
    async def get_translations(self, language: str, keys: Sequence[str] | None = None) -> dict[str, str]:
        raise NotImplementedError

    async def get_translations_by_category(self, language: str, category: str) -> dict[str, str]:
        raise NotImplementedError

    async def list_countries(self) -> list[dict[str, Any]]:
        raise NotImplementedError

    async def list_states(self, country_id: int) -> list[dict[str, Any]]:
        raise NotImplementedError

    async def list_cities(self, state_id: int) -> list[dict[str, Any]]:
        raise NotImplementedError

    async def get_city_by_slug(self, slug: str) -> dict[str, Any] | None:
        raise NotImplementedError

    async def list_developments_with_location(self) -> list[dict[str, Any]]:
        raise NotImplementedError

    async def list_developments_by_city(self, city_id: int) -> list[dict[str, Any]]:
        raise NotImplementedError

    async def get_development(self, development_id: int) -> dict[str, Any] | None:
        raise NotImplementedError

    async def get_development_by_slug(self, slug: str) -> dict[str, Any] | None:
        raise NotImplementedError

    async def list_photos(self, development_id: int) -> list[dict[str, Any]]:
        raise NotImplementedError

    async def list_amenities(self, development_id: int) -> list[dict[str, Any]]:
        raise NotImplementedError

    async def list_businesses(self, development_id: int) -> list[dict[str, Any]]:
        raise NotImplementedError

    async def list_open_slots(
        self,
        development_id: int,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> list[dict[str, Any]]:
        """Slots publicados y libres de cotistas aprobados del desarrollo."""
        raise NotImplementedError

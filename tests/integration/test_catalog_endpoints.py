"""Integration tests del catálogo público: geografía, desarrollos, disponibilidad e i18n."""

from datetime import timedelta

from sqlalchemy import update

from app.infrastructure.db import tables
from tests.helpers import insert_row, insert_slot


class TestGeography:
    async def test_drill_down(self, client, seed):
        countries = (await client.get("/api/v1/geography/countries")).json()
        assert [c["code"] for c in countries] == ["BR"]

        states = (await client.get(f"/api/v1/geography/countries/{countries[0]['id']}/states")).json()
        assert [s["code"] for s in states] == ["BA"]

        cities = (await client.get(f"/api/v1/geography/states/{states[0]['id']}/cities")).json()
        assert [c["slug"] for c in cities] == ["porto-seguro"]

    async def test_city_by_slug(self, client, seed):
        response = await client.get("/api/v1/geography/cities/porto-seguro")
        assert response.status_code == 200
        assert response.json()["latitude"] == -16.4497

        missing = await client.get("/api/v1/geography/cities/atlantis")
        assert missing.status_code == 404


class TestDevelopments:
    async def test_list_includes_location(self, client, seed):
        developments = (await client.get("/api/v1/developments")).json()
        assert len(developments) == 1
        development = developments[0]
        assert development["slug"] == "praia-azul"
        assert development["city_slug"] == "porto-seguro"
        assert development["country_code"] == "BR"
        assert development["rating"] == 4.5

    async def test_inactive_developments_are_hidden(self, client, seed, db_session):
        await db_session.execute(
            update(tables.developments).where(tables.developments.c.id == seed.development_id).values(is_active=False)
        )
        await db_session.commit()

        assert (await client.get("/api/v1/developments")).json() == []

    async def test_detail_by_id_and_slug(self, client, seed, db_session):
        amenity_id = await insert_row(db_session, tables.amenities, name_key="amenity.pool", icon="waves")
        await insert_row(
            db_session, tables.development_amenities, development_id=seed.development_id, amenity_id=amenity_id
        )
        await insert_row(
            db_session,
            tables.development_photos,
            development_id=seed.development_id,
            url="https://cdn.example.com/1.jpg",
            file_key="developments/1.jpg",
            sort_order=0,
        )
        await db_session.commit()

        by_id = (await client.get(f"/api/v1/developments/{seed.development_id}")).json()
        by_slug = (await client.get("/api/v1/developments/by-slug/praia-azul")).json()

        assert by_id["development"]["id"] == seed.development_id
        assert by_slug["development"]["id"] == seed.development_id
        assert [a["name_key"] for a in by_id["amenities"]] == ["amenity.pool"]
        assert [p["url"] for p in by_id["photos"]] == ["https://cdn.example.com/1.jpg"]
        assert by_id["businesses"] == []

    async def test_unknown_development(self, client, seed):
        assert (await client.get("/api/v1/developments/999")).status_code == 404
        assert (await client.get("/api/v1/developments/by-slug/nope")).status_code == 404
        assert (await client.get("/api/v1/developments/999/availability")).status_code == 404


class TestAvailability:
    async def test_only_published_unbooked_slots(self, client, seed, db_session):
        later = seed.slot_end + timedelta(days=5)
        booked_id = await insert_slot(db_session, seed.cotista_id, later, later + timedelta(days=3))
        await db_session.execute(
            update(tables.cotista_availability)
            .where(tables.cotista_availability.c.id == booked_id)
            .values(is_booked=True)
        )
        await db_session.commit()

        slots = (await client.get(f"/api/v1/developments/{seed.development_id}/availability")).json()
        assert [s["id"] for s in slots] == [seed.slot_id]

    async def test_date_window(self, client, seed):
        response = await client.get(
            f"/api/v1/developments/{seed.development_id}/availability",
            params={"start_date": (seed.slot_start + timedelta(days=1)).isoformat()},
        )
        assert response.json() == []


class TestTranslations:
    async def test_translations_by_language_and_category(self, client, seed, db_session):
        for key, language, value in (
            ("amenity.pool", "en", "Pool"),
            ("amenity.pool", "pt", "Piscina"),
            ("city.porto-seguro", "en", "Porto Seguro"),
        ):
            await insert_row(
                db_session, tables.translations, key=key, language=language, value=value, category=key.split(".")[0]
            )
        await db_session.commit()

        pt = (await client.get("/api/v1/i18n/translations", params={"language": "pt"})).json()
        assert pt == {"amenity.pool": "Piscina"}

        subset = (
            await client.get("/api/v1/i18n/translations", params={"language": "en", "keys": ["amenity.pool"]})
        ).json()
        assert subset == {"amenity.pool": "Pool"}

        category = (await client.get("/api/v1/i18n/translations/city", params={"language": "en"})).json()
        assert category == {"city.porto-seguro": "Porto Seguro"}

    async def test_unsupported_language(self, client, seed):
        response = await client.get("/api/v1/i18n/translations", params={"language": "de"})
        assert response.status_code == 422

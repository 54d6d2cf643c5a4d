import argparse
import asyncio
import sys
from datetime import date, timedelta
from pathlib import Path

# Add project root to sys.path
project_root = Path(__file__).resolve().parent.parent
sys.path.append(str(project_root))

from sqlalchemy import insert  # noqa: E402

from app.config import get_settings  # noqa: E402
from app.infrastructure.db import tables  # noqa: E402
from app.infrastructure.db.engine import build_engine  # noqa: E402

TRANSLATIONS = {
    "country.br": {"pt": "Brasil", "en": "Brazil", "es": "Brasil"},
    "state.br.ba": {"pt": "Bahia", "en": "Bahia", "es": "Bahía"},
    "city.porto-seguro": {"pt": "Porto Seguro", "en": "Porto Seguro", "es": "Porto Seguro"},
    "development.praia-azul.name": {"pt": "Resort Praia Azul", "en": "Praia Azul Resort", "es": "Resort Praia Azul"},
    "development.praia-azul.description": {
        "pt": "Resort pé na areia com piscinas e clube infantil.",
        "en": "Beachfront resort with pools and a kids club.",
        "es": "Resort frente al mar con piscinas y club infantil.",
    },
    "development.praia-azul.short": {"pt": "Frente ao mar", "en": "Beachfront", "es": "Frente al mar"},
    "development.praia-azul.rules": {
        "pt": "Check-in a partir das 15h.",
        "en": "Check-in from 3 pm.",
        "es": "Check-in a partir de las 15 h.",
    },
    "amenity.pool": {"pt": "Piscina", "en": "Pool", "es": "Piscina"},
    "amenity.wifi": {"pt": "Wi-Fi", "en": "Wi-Fi", "es": "Wi-Fi"},
    "business.cafe-mar.name": {"pt": "Café do Mar", "en": "Café do Mar", "es": "Café do Mar"},
    "business.cafe-mar.description": {
        "pt": "Café da manhã regional.",
        "en": "Regional breakfast.",
        "es": "Desayuno regional.",
    },
}


async def seed(drop: bool) -> None:
    engine = build_engine(get_settings())
    async with engine.begin() as conn:
        if drop:
            await conn.run_sync(tables.metadata.drop_all)
            print("Dropped all tables.")
        await conn.run_sync(tables.metadata.create_all)
        print("Created all tables.")

        await conn.execute(
            insert(tables.translations),
            [
                {"key": key, "language": language, "value": value, "category": key.split(".")[0]}
                for key, values in TRANSLATIONS.items()
                for language, value in values.items()
            ],
        )

        country_id = (
            await conn.execute(insert(tables.countries).values(code="BR", name_key="country.br"))
        ).inserted_primary_key[0]
        state_id = (
            await conn.execute(
                insert(tables.states).values(country_id=country_id, code="BA", name_key="state.br.ba")
            )
        ).inserted_primary_key[0]
        city_id = (
            await conn.execute(
                insert(tables.cities).values(
                    state_id=state_id,
                    slug="porto-seguro",
                    name_key="city.porto-seguro",
                    latitude=-16.4497,
                    longitude=-39.0647,
                )
            )
        ).inserted_primary_key[0]
        development_id = (
            await conn.execute(
                insert(tables.developments).values(
                    city_id=city_id,
                    slug="praia-azul",
                    name_key="development.praia-azul.name",
                    description_key="development.praia-azul.description",
                    short_description_key="development.praia-azul.short",
                    rules_key="development.praia-azul.rules",
                    address="Av. Beira Mar 1000, Porto Seguro",
                    latitude=-16.4301,
                    longitude=-39.0512,
                    rating=4.7,
                    starting_price=18000,
                    is_active=True,
                )
            )
        ).inserted_primary_key[0]
        await conn.execute(
            insert(tables.development_photos),
            [
                {
                    "development_id": development_id,
                    "url": f"https://cdn.example.com/developments/praia-azul/{n}.jpg",
                    "file_key": f"developments/praia-azul/{n}.jpg",
                    "sort_order": n,
                }
                for n in range(3)
            ],
        )

        pool_id = (
            await conn.execute(
                insert(tables.amenities).values(name_key="amenity.pool", icon="waves", category="leisure")
            )
        ).inserted_primary_key[0]
        wifi_id = (
            await conn.execute(
                insert(tables.amenities).values(name_key="amenity.wifi", icon="wifi", category="services")
            )
        ).inserted_primary_key[0]
        await conn.execute(
            insert(tables.development_amenities),
            [
                {"development_id": development_id, "amenity_id": pool_id},
                {"development_id": development_id, "amenity_id": wifi_id},
            ],
        )

        business_id = (
            await conn.execute(
                insert(tables.sponsored_businesses).values(
                    name_key="business.cafe-mar.name",
                    description_key="business.cafe-mar.description",
                    category="restaurant",
                    phone_number="+55 73 3288-0000",
                    is_active=True,
                )
            )
        ).inserted_primary_key[0]
        await conn.execute(
            insert(tables.business_developments).values(business_id=business_id, development_id=development_id)
        )
        print("Seeded catalog.")

        user_ids = {}
        for open_id, name, role in (
            ("admin-demo", "Admin Demo", "admin"),
            ("customer-demo", "Cliente Demo", "user"),
            ("cotista-demo", "Cotista Demo", "user"),
        ):
            user_ids[open_id] = (
                await conn.execute(
                    insert(tables.users).values(
                        open_id=open_id,
                        name=name,
                        email=f"{open_id}@example.com",
                        login_method="demo",
                        role=role,
                        status="approved",
                    )
                )
            ).inserted_primary_key[0]

        cotista_id = (
            await conn.execute(
                insert(tables.cotistas).values(
                    user_id=user_ids["cotista-demo"],
                    development_id=development_id,
                    personal_data={"full_name": "Cotista Demo"},
                    identity_document_key="cotistas/demo/identity.pdf",
                    address_proof_key="cotistas/demo/address.pdf",
                    ownership_proof_key="cotistas/demo/ownership.pdf",
                    terms_accepted=True,
                    status="approved",
                )
            )
        ).inserted_primary_key[0]

        first_monday = date.today() + timedelta(days=(7 - date.today().weekday()) % 7 or 7)
        await conn.execute(
            insert(tables.cotista_availability),
            [
                {
                    "cotista_id": cotista_id,
                    "start_date": first_monday + timedelta(weeks=week),
                    "end_date": first_monday + timedelta(weeks=week, days=7),
                    "price_per_night": 25000,
                    "is_published": True,
                    "is_booked": False,
                }
                for week in range(4)
            ],
        )
        print("Seeded demo users, cotista and availability.")

    await engine.dispose()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed demo catalog and accounts")
    parser.add_argument("--drop", action="store_true", help="Drop all tables before seeding")
    args = parser.parse_args()
    asyncio.run(seed(args.drop))

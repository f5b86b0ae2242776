from __future__ import annotations

from decimal import Decimal

from sqlalchemy import select

from .db import SessionLocal
from .models import Fuel


SEED_FUELS = [
    {"name": "Diesel", "price": Decimal("102.00")},
    {"name": "Octane", "price": Decimal("122.00")},
]


def seed_fuels() -> int:
    created = 0
    with SessionLocal() as session:
        for entry in SEED_FUELS:
            exists = session.execute(
                select(Fuel).where(Fuel.name == entry["name"])
            ).scalar_one_or_none()
            if exists:
                continue
            session.add(Fuel(name=entry["name"], price=entry["price"]))
            created += 1
        if created:
            session.commit()
    return created


def main() -> None:
    created = seed_fuels()
    print(f"Seeded fuels: {created}")


if __name__ == "__main__":
    main()

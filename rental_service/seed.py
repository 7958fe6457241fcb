from decimal import Decimal
from sqlalchemy.orm import Session

from shared.core.database import Base, RentalSessionLocal, rental_engine
from rental_service.app.enum.rental_enum import PlatformRole
from rental_service.app.models import Platform

DEFAULT_PLATFORMS = [
    ("Airbnb", Decimal("15.00"), PlatformRole.airbnb),
    ("Booking", Decimal("15.00"), PlatformRole.booking),
    ("Direct", Decimal("0.00"), PlatformRole.manual),
    ("Free", Decimal("0.00"), PlatformRole.available),
]


def seed_platforms(db: Session) -> int:
    existing = {name for (name,) in db.query(Platform.name).all()}
    created = 0
    for name, commission, role in DEFAULT_PLATFORMS:
        if name in existing:
            continue
        db.add(Platform(name=name, commission_percentage=commission, role=role.value))
        created += 1
    db.commit()
    return created


def seed_data():
    Base.metadata.create_all(bind=rental_engine)
    db: Session = RentalSessionLocal()
    try:
        created = seed_platforms(db)
        print(f"✅ Seeded {created} platforms")
    finally:
        db.close()


if __name__ == "__main__":
    seed_data()

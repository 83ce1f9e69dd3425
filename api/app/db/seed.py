"""Database seeding script."""

from typing import Optional

from sqlalchemy.orm import Session

from app.database import Base, SessionLocal, engine
from app.services.record_store import SqlRecordStore

DEMO_ARTWORKS = [
    {"title": "Sunset Study", "subtitle": "Oil on linen", "order_index": 1},
    {"title": "Harbor at Dawn", "subtitle": None, "order_index": 2},
    {"title": "Untitled No. 7", "subtitle": "Generative piece", "order_index": 3},
]


def seed_database(db: Optional[Session] = None) -> int:
    """Seed database with demo artworks (without assets).

    Returns:
        Number of artworks created (0 if already seeded)
    """
    owns_session = db is None
    if owns_session:
        Base.metadata.create_all(bind=engine)
        db = SessionLocal()

    try:
        store = SqlRecordStore(db)

        if store.list_ordered():
            print("Database already seeded. Skipping.")
            return 0

        for fields in DEMO_ARTWORKS:
            artwork = store.insert({**fields, "is_active": True})
            print(f"Created artwork: {artwork.title} (order {artwork.order_index})")

        print("\n✓ Database seeded successfully!")
        return len(DEMO_ARTWORKS)

    finally:
        if owns_session:
            db.close()


if __name__ == "__main__":
    print("Starting database seeding...")
    seed_database()

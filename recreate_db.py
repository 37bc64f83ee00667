"""
Drop and recreate every table, then seed the Addis Ababa subcities
"""
from sqlalchemy import inspect
from sebeta_mart.database import Base, engine, SessionLocal
from sebeta_mart.models import *  # noqa: F401,F403  registers every table on Base.metadata
from sebeta_mart.models.subcity import Subcity

ADDIS_ABABA_SUBCITIES = [
    "Addis Ketema",
    "Akaky Kaliti",
    "Arada",
    "Bole",
    "Gullele",
    "Kirkos",
    "Kolfe Keranio",
    "Lemi Kura",
    "Lideta",
    "Nifas Silk-Lafto",
    "Yeka",
]


def seed_subcities(db) -> int:
    existing = {name for (name,) in db.query(Subcity.name).all()}
    added = 0
    for name in ADDIS_ABABA_SUBCITIES:
        if name not in existing:
            db.add(Subcity(name=name))
            added += 1
    db.commit()
    return added


def recreate_db():
    print("Dropping database tables...")
    Base.metadata.drop_all(bind=engine)

    print("Creating database tables...")
    Base.metadata.create_all(bind=engine)
    print("Database created successfully!")

    db = SessionLocal()
    try:
        added = seed_subcities(db)
        print(f"Seeded {added} subcities")
    finally:
        db.close()

    # Verify tables were created
    tables = inspect(engine).get_table_names()
    print(f"Created tables: {', '.join(tables)}")


if __name__ == "__main__":
    recreate_db()

from datetime import date, timedelta

from database.connection import SessionLocal, engine, Base
from models import Event, Interest, Offer
from services import accounts, events, lifecycle, offers
from stores.sql_store import SqlStore

DEFAULT_INTERESTS = [
    "Art", "Business", "Cooking", "Dance", "Fitness", "Gaming", "Movies",
    "Music", "Networking", "Photography", "Reading", "Sports", "Technology", "Travel",
]

DEMO_EMAIL = "demo@flypside.com"
DEMO_PASSWORD = "demo1234!"


def seed_interests(db):
    existing = {name for (name,) in db.query(Interest.name).all()}
    missing = [name for name in DEFAULT_INTERESTS if name not in existing]
    for name in missing:
        db.add(Interest(name=name))
    db.commit()
    print(f"{len(missing)} interests created ({len(existing)} already present)")


def seed_demo_account(store: SqlStore):
    if store.get_user_by_email(DEMO_EMAIL):
        print(f"Demo account {DEMO_EMAIL} already exists, skipping")
        return

    user = accounts.register_user(store, {
        "email": DEMO_EMAIL,
        "username": "demo",
        "password": DEMO_PASSWORD,
        "first_name": "Demo",
        "last_name": "Partner",
    })
    partner = accounts.create_profile(store, user, {
        "first_name": "Demo",
        "last_name": "Partner",
        "contact_number": "9876543210",
        "sex": "Other",
        "dob": date(1990, 1, 1),
        "is_business": True,
        "current_city": "Bengaluru",
    }, ["Music", "Networking"])

    now = lifecycle.utcnow().replace(minute=0, second=0, microsecond=0)
    for name, days, price in [("Rooftop Jazz Night", 7, 499), ("Founders Breakfast", 14, 0)]:
        start = now + timedelta(days=days)
        events.create_event(store, partner, {
            "name": name,
            "description": f"{name} hosted by {partner.full_name}",
            "location": "Bengaluru",
            "start_date": start,
            "end_date": start + timedelta(hours=3),
            "max_participants": 50,
            "price": price,
        })

    offers.create_offer(store, partner, {
        "text": "Early bird discount",
        "percentage": 20,
        "start_date": now,
        "expiry_date": now + timedelta(days=30),
    }, link_all=True)
    offers.create_offer(store, partner, {
        "text": "Member discount",
        "percentage": 10,
        "start_date": now,
        "expiry_date": None,
    })

    print(f"Demo account created: {DEMO_EMAIL} / {DEMO_PASSWORD}")


def seed_database():
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()

    try:
        seed_interests(db)
        seed_demo_account(SqlStore(db))

        print("\n✓ Seed complete")
        print(f"✓ Events: {db.query(Event).count()}")
        print(f"✓ Offers: {db.query(Offer).count()}")
    finally:
        db.close()


if __name__ == "__main__":
    seed_database()

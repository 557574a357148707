#!/usr/bin/env python3
"""Seed demo companies and users.

Creates a handful of representative records through the same repositories the
API uses, so timestamps, revisions and password hashes look like real data.
Running it again replaces the previous demo records.

Usage:
    # From project root (with MongoDB running):
    python scripts/seed_demo_data.py

    # Or against another server:
    MONGO_URL=mongodb://localhost:27017 MONGO_DATABASE=roster \
        python scripts/seed_demo_data.py
"""

import os
import sys
from datetime import UTC, datetime

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from roster.database import get_db, init_db
from roster.models import COMPANY_SCHEMA, USER_SCHEMA
from roster.services.repository import RecordRepository

# Demo records are recognised by these values when re-seeding
DEMO_EMAIL_DOMAIN = "demo.example.com"
DEMO_PASSWORD = "demopass123"

DEMO_COMPANIES = [
    {"name": "Acme Corporation", "since": datetime(1949, 9, 17, tzinfo=UTC)},
    {"name": "Globex", "since": datetime(1989, 3, 1, tzinfo=UTC)},
    {"name": "Initech", "since": datetime(1999, 2, 19, tzinfo=UTC)},
    {"name": "Umbrella Holdings", "since": datetime(1968, 10, 1, tzinfo=UTC)},
]

# Trashed after creation so soft deletion shows up in listings
TRASHED_COMPANY = {"name": "Defunct Dynamics", "since": datetime(1970, 1, 1, tzinfo=UTC)}

DEMO_USERS = [
    ("Ada Lovelace", "ada"),
    ("Grace Hopper", "grace"),
    ("Alan Turing", "alan"),
]


def seed_demo_data():
    """Seed the configured database with demo companies and users."""
    db = get_db()
    init_db(db)
    companies = RecordRepository(db, COMPANY_SCHEMA)
    users = RecordRepository(db, USER_SCHEMA)

    removed_companies = db[COMPANY_SCHEMA.collection].delete_many(
        {"name": {"$in": [c["name"] for c in [*DEMO_COMPANIES, TRASHED_COMPANY]]}}
    )
    removed_users = db[USER_SCHEMA.collection].delete_many(
        {"email": {"$regex": f"@{DEMO_EMAIL_DOMAIN.replace('.', '[.]')}$"}}
    )
    if removed_companies.deleted_count or removed_users.deleted_count:
        print("Demo data already exists. Cleared and re-seeding...")

    print("Creating companies...")
    for values in DEMO_COMPANIES:
        record = companies.create(values)
        print(f"  {record['id']} {record['name']}")

    trashed = companies.trash(companies.create(TRASHED_COMPANY)["key"])
    print(f"  {trashed['id']} {trashed['name']} (trashed)")

    print("Creating users...")
    for name, handle in DEMO_USERS:
        record = users.create(
            {
                "name": name,
                "email": f"{handle}@{DEMO_EMAIL_DOMAIN}",
                "password": DEMO_PASSWORD,
                "avatar": f"/storage/{handle}.png",
            }
        )
        print(f"  {record['id']} {record['email']}")

    print("Demo data seeded successfully!")


if __name__ == "__main__":
    seed_demo_data()

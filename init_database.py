#!/usr/bin/env python3
"""
Script to initialize the database on a clean installation.

Creates the users and stored_collections tables directly from the
SQLAlchemy models and optionally loads the demo records.

Usage:
    python init_database.py [--seed-demo]
"""
import sys

from sqlalchemy import inspect
from digforweb import create_app
from digforweb.extensions import db
from digforweb.services.backends import BlobBackend
from digforweb.services.demo_data import seed_demo_data
from digforweb.services.entity_store import EntityStore
from digforweb.services.permissions import ROLE_OFFICER

EXPECTED_TABLES = ['users', 'stored_collections']


def verify_tables():
    """Verify that all expected tables were created."""
    tables = inspect(db.engine).get_table_names()
    missing = [t for t in EXPECTED_TABLES if t not in tables]

    if missing:
        print(f"Warning: Some expected tables are missing: {missing}")
        return False

    print(f"Verified {len(tables)} tables created.")
    return True


def init_database(seed_demo=False):
    """Initialize database for a fresh installation."""
    app = create_app()

    with app.app_context():
        print("Creating all tables from models...")
        db.create_all()

        if not verify_tables():
            return False

        if seed_demo or app.config['SEED_DEMO_DATA']:
            store = EntityStore(BlobBackend(app.config['STORAGE_KEY_PREFIX']), role=ROLE_OFFICER)
            if len(store.snapshot):
                print("Store already holds records; demo data not loaded.")
            else:
                print(f"Demo data loaded: {seed_demo_data(store)}")

        print("")
        print("=" * 60)
        print("DATABASE INITIALIZED SUCCESSFULLY")
        print("=" * 60)
        print("")
        print("Tables created:")
        print("  - users: Officer and viewer accounts")
        print("  - stored_collections: Victims, cases, evidence and forensic actions")
        print("")
        print("Next step:")
        print("  python create_test_user.py")
        print("")
        return True


if __name__ == '__main__':
    success = init_database(seed_demo='--seed-demo' in sys.argv[1:])
    sys.exit(0 if success else 1)

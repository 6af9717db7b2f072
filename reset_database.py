#!/usr/bin/env python3
"""Drop every Career Coach collection and recreate the indexes."""

from dotenv import load_dotenv

load_dotenv()

from careercoach.database import create_indexes, get_database

COLLECTIONS = (
    "users",
    "sessions",
    "verification_codes",
    "cover_letters",
    "industry_insights",
    "assessments",
)


def reset_all_collections():
    """Drop all collections and start fresh."""
    db = get_database()

    print("🗑️  Clearing all collections...")
    for collection_name in COLLECTIONS:
        try:
            db[collection_name].drop()
            print(f"   ✓ Dropped {collection_name}")
        except Exception as e:
            print(f"   ⚠️  Could not drop {collection_name}: {e}")

    create_indexes()
    print("\n✅ Database reset complete; indexes recreated.")


if __name__ == "__main__":
    print(f"🚀 Resetting database '{get_database().name}'.")
    print("   This will DELETE ALL existing data.")

    confirm = input("\n⚠️  Are you sure? Type 'yes' to continue: ")
    if confirm.lower() == 'yes':
        reset_all_collections()
    else:
        print("❌ Reset cancelled.")

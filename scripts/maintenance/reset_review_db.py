"""
Reset the review database.

DANGEROUS: This deletes all items and review history!
Only use when you want to start fresh for testing.

Usage:
    python -m scripts.maintenance.reset_review_db
"""

from core import srs
from core.config import configure_logging


def main():
    configure_logging()
    store = srs.SqlRecordStore.from_url()

    print("=" * 60)
    print("WARNING: Reset Review Database")
    print("=" * 60)
    print()
    print(f"Database: {store.engine.url}")
    print("This will DELETE:")
    print("  - All items and their scheduling state")
    print("  - All review events (logs of past reviews)")
    print("  - All session reflections")
    print()

    response = input("Are you sure you want to reset? (type 'yes' to confirm): ")

    if response.lower() == "yes":
        print("\nResetting database...")
        store.reset_db()
        print("✓ Database reset complete!")
        print("\nThe database now has empty tables ready for new items.")
    else:
        print("\nCancelled. No changes made.")


if __name__ == "__main__":
    main()

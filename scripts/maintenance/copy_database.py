"""
Copy review data between databases.

Typical use is moving a local SQLite file to Postgres:
    python -m scripts.maintenance.copy_database sqlite:///logs/review.db postgresql://user:pw@host/review_db

This will:
1. Create the tables on the target if needed
2. Copy item_state, review_events and session_reflections
3. Validate row counts before and after

The target must not already contain the copied items.
"""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import datetime
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from core import srs
from core.config import configure_logging
from core.srs.models import ItemState, ReviewEvent, SessionReflection

logger = logging.getLogger(__name__)

# Parents before children (review_events references item_state)
TABLES = (ItemState, ReviewEvent, SessionReflection)


def _row_values(row) -> dict[str, Any]:
    return {column.name: getattr(row, column.name) for column in row.__table__.columns}


def copy_database(source: srs.SqlRecordStore, target: srs.SqlRecordStore) -> dict[str, Any]:
    """
    Copy every review table from source to target in one transaction.

    Returns:
        Dictionary with per-table counts and a status
    """
    target.init_db()
    counts: dict[str, dict[str, int]] = {}

    with Session(source.engine) as src, Session(target.engine) as dst:
        try:
            for model in TABLES:
                rows = src.query(model).all()
                dst.add_all(model(**_row_values(row)) for row in rows)
                counts[model.__tablename__] = {"source": len(rows)}
                print(f"✓ Copied {len(rows)} rows from {model.__tablename__}")
            dst.commit()
        except SQLAlchemyError as exc:
            dst.rollback()
            logger.error("Copy failed: %s", exc)
            return {"status": "failed", "error": str(exc), "tables": counts}

        for model in TABLES:
            counts[model.__tablename__]["target"] = dst.query(model).count()

    mismatched = [
        table for table, count in counts.items()
        if count["source"] != count["target"]
    ]
    if mismatched:
        return {"status": "failed", "error": f"Row count mismatch: {', '.join(mismatched)}", "tables": counts}
    return {"status": "success", "tables": counts}


def main():
    parser = argparse.ArgumentParser(description="Copy review data between databases")
    parser.add_argument("source_url", help="SQLAlchemy URL to read from")
    parser.add_argument("target_url", help="SQLAlchemy URL to write to")
    args = parser.parse_args()

    configure_logging()

    print("\n" + "=" * 70)
    print("Copy Review Database")
    print("=" * 70)

    result = copy_database(
        srs.SqlRecordStore(srs.get_engine(args.source_url)),
        srs.SqlRecordStore(srs.get_engine(args.target_url)),
    )

    for table, count in result["tables"].items():
        print(f"  - {table}: {count.get('source', 'N/A')} -> {count.get('target', 'N/A')}")

    print("\n" + "=" * 70)
    print(f"{result['status'].upper()} at {datetime.now().isoformat()}")
    print("=" * 70 + "\n")

    if result["status"] != "success":
        print(f"✗ {result['error']}")
        sys.exit(1)


if __name__ == "__main__":
    main()

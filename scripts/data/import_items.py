"""
Import items from a CSV file into the review database.

Expected columns:
- front  (required)  question side
- back   (required)  answer side
- deck   (optional)  deck id, falls back to --deck
- tags   (optional)  comma-separated tags

Rows whose (deck, front, back) already exist are skipped, so the same
CSV can be imported again after adding rows to it.

Usage:
    python -m scripts.data.import_items data/items.csv --deck spanish
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

import pandas as pd

from core import srs
from core.config import configure_logging, load_settings

logger = logging.getLogger(__name__)

FRONT_COL = "front"
BACK_COL = "back"
DECK_COL = "deck"
TAGS_COL = "tags"


def normalize(s: pd.Series) -> pd.Series:
    s = s.fillna("").astype(str).str.strip()
    # collapse multiple spaces
    return s.str.replace(r"\s+", " ", regex=True)


def load_items_csv(path: Path, default_deck: str) -> pd.DataFrame:
    """
    Read and clean an item CSV.

    Raises:
        ValueError: required columns missing
    """
    df = pd.read_csv(path)
    missing = [col for col in (FRONT_COL, BACK_COL) if col not in df.columns]
    if missing:
        raise ValueError(
            f"CSV must contain columns '{FRONT_COL}' and '{BACK_COL}'. "
            f"Found: {list(df.columns)}"
        )

    df[FRONT_COL] = normalize(df[FRONT_COL])
    df[BACK_COL] = normalize(df[BACK_COL])
    df[DECK_COL] = normalize(df[DECK_COL]) if DECK_COL in df.columns else ""
    df.loc[df[DECK_COL] == "", DECK_COL] = default_deck
    df[TAGS_COL] = df[TAGS_COL].fillna("").astype(str) if TAGS_COL in df.columns else ""

    df = df[(df[FRONT_COL] != "") & (df[BACK_COL] != "")]
    return df.drop_duplicates(subset=[DECK_COL, FRONT_COL, BACK_COL])


def import_items(store: srs.SqlRecordStore, df: pd.DataFrame) -> tuple[int, int]:
    """
    Add every row of df as a new item.

    Returns:
        (added, skipped) counts
    """
    existing = {
        (item.deck_id, item.front, item.back)
        for item in store.all_items()
    }

    added = 0
    skipped = 0
    for row in df.itertuples(index=False):
        deck_id = getattr(row, DECK_COL)
        front = getattr(row, FRONT_COL)
        back = getattr(row, BACK_COL)
        if (deck_id, front, back) in existing:
            skipped += 1
            continue

        tags = tuple(tag.strip() for tag in getattr(row, TAGS_COL).split(",") if tag.strip())
        store.add_item(srs.initialize_new_item(
            item_id=srs.new_item_id(),
            front=front,
            back=back,
            deck_id=deck_id,
            tags=tags,
        ))
        added += 1

    logger.info("Imported %d items (%d already present)", added, skipped)
    return added, skipped


def main() -> None:
    settings = load_settings()
    parser = argparse.ArgumentParser(description="Import review items from CSV")
    parser.add_argument("csv_path", type=Path, help="CSV file with front/back columns")
    parser.add_argument("--deck", default=settings.default_deck_id, help="Deck for rows without a deck column")
    args = parser.parse_args()

    configure_logging(settings.log_level)

    if not args.csv_path.exists():
        raise FileNotFoundError(f"Missing file: {args.csv_path}")

    store = srs.SqlRecordStore.from_url(settings.database_url)
    df = load_items_csv(args.csv_path, args.deck)
    added, skipped = import_items(store, df)

    print(f"✓ Added {added} items, skipped {skipped} existing ({store.engine.url})")


if __name__ == "__main__":
    main()

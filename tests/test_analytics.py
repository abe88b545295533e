from datetime import timedelta

import pandas as pd

from core import srs
from core.analytics import build_deck_dashboard
from core.analytics.metrics import compute_phase_counts, compute_rating_distribution
from core.analytics.queries import load_item_snapshots_df, load_review_events_df
from core.srs.scheduler import apply_review

from tests.factories import make_item


def review(store, item, outcome, when):
    state = apply_review(item, outcome, now=when)
    store.put(item.item_id, state)
    return state


def test_dashboard_for_reviewed_deck(store, now):
    first = make_item("a")
    second = make_item("b")
    store.add_item(first)
    store.add_item(second)
    store.add_item(make_item("c", deck_id="french"))

    review(store, first, srs.ReviewOutcome.EASY, now)
    review(store, second, srs.ReviewOutcome.AGAIN, now)

    dashboard = build_deck_dashboard(store, "spanish", now=now + timedelta(minutes=5))

    assert dashboard.total_items == 2
    assert dashboard.reviews_total == 2
    assert dashboard.retention_rate == 0.5
    assert dashboard.learning_items == 1
    assert dashboard.mature_items == 1
    # "b" came back after one minute, "a" waits four days
    assert dashboard.due_items == 1
    assert dashboard.average_easiness == 2.5
    assert dashboard.reviews_daily.tolist() == [2]
    assert dashboard.rating_distribution.to_dict() == {"Again": 1, "Hard": 0, "Good": 0, "Easy": 1}


def test_dashboard_for_empty_deck(store, now):
    dashboard = build_deck_dashboard(store, "spanish", now=now)

    assert dashboard.total_items == 0
    assert dashboard.retention_rate is None
    assert dashboard.average_easiness is None
    assert dashboard.reviews_daily.empty
    assert dashboard.rating_distribution.sum() == 0


def test_reviews_across_days(store, now):
    item = make_item()
    store.add_item(item)
    state = review(store, item, srs.ReviewOutcome.GOOD, now)
    state = review(store, state, srs.ReviewOutcome.GOOD, now + timedelta(minutes=10))
    review(store, state, srs.ReviewOutcome.GOOD, now + timedelta(days=2))

    dashboard = build_deck_dashboard(store, "spanish", now=now + timedelta(days=2))

    # the middle day has no reviews but still appears
    assert dashboard.reviews_daily.tolist() == [2, 0, 1]
    assert dashboard.retention_daily.tolist() == [1.0, 1.0]


def test_loaders_return_empty_frames(store):
    assert load_review_events_df(store).empty
    assert load_item_snapshots_df(store).empty
    assert compute_phase_counts(load_item_snapshots_df(store), None) == {"learning": 0, "mature": 0, "due": 0}


def test_rating_distribution_order():
    events = pd.DataFrame({"quality": [4, 4, 5, 2]})
    assert compute_rating_distribution(events).index.tolist() == ["Again", "Hard", "Good", "Easy"]

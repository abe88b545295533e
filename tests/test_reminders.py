from datetime import date, timedelta

from core import srs

from tests.factories import make_item


def test_optimal_review_windows(now):
    windows = srs.optimal_review_windows(now)
    assert [(window - now).days for window in windows] == [1, 3, 7, 14, 30]


def test_reminders_grouped_by_deck_and_day(now):
    items = [
        make_item("a", due=now + timedelta(days=1)),
        make_item("b", due=now + timedelta(days=1, hours=2)),
        make_item("c", deck_id="french", due=now + timedelta(days=1)),
        make_item("d", due=now + timedelta(days=3)),
        make_item("overdue", due=now - timedelta(days=1)),
        make_item("far", due=now + timedelta(days=45)),
    ]

    reminders = srs.plan_review_reminders(items, now)

    assert [(r.deck_id, r.day, r.item_count) for r in reminders] == [
        ("french", date(2024, 3, 2), 1),
        ("spanish", date(2024, 3, 2), 2),
        ("spanish", date(2024, 3, 4), 1),
    ]
    assert reminders[1].reminder_id == "spacing-spanish-2024-03-02"


def test_no_items_no_reminders(now):
    assert srs.plan_review_reminders([], now) == []

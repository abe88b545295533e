from datetime import timedelta

import pytest

from core import srs
from core.review_session import ReviewSession, SessionState

from tests.factories import InMemoryStore, make_item


def make_session(store, now, **kwargs):
    return ReviewSession(store, deck_id="spanish", clock=lambda: now, session_id="s-1", **kwargs)


@pytest.fixture
def two_item_store(now):
    return InMemoryStore([
        make_item("first", due=now - timedelta(hours=2)),
        make_item("second", due=now - timedelta(hours=1)),
    ])


@pytest.fixture
def started(two_item_store, now):
    session = make_session(two_item_store, now)
    session.start(now)
    return session


def test_start_shows_first_due_item(started):
    assert started.state == SessionState.AWAITING_REVEAL
    assert started.current_item.item_id == "first"
    assert started.queue.item_ids == ("first", "second")


def test_start_twice_is_rejected(started, now):
    with pytest.raises(srs.InvalidSessionState):
        started.start(now)


def test_empty_deck_completes_immediately(now):
    session = make_session(InMemoryStore(), now)
    summaries = []
    session.on_session_complete(summaries.append)

    session.start(now)

    assert session.is_complete
    assert session.current_item is None
    assert len(summaries) == 1
    assert summaries[0].total_items == 0
    assert summaries[0].accuracy is None


def test_rating_requires_reveal(started):
    with pytest.raises(srs.InvalidSessionState):
        started.commit(srs.ReviewOutcome.GOOD)
    with pytest.raises(srs.InvalidSessionState):
        started.preview_all()


def test_reveal_only_once(started):
    item = started.reveal()

    assert item.item_id == "first"
    assert started.state == SessionState.AWAITING_RATING
    with pytest.raises(srs.InvalidSessionState):
        started.reveal()


def test_preview_all_labels_every_outcome(started):
    started.reveal()
    before = started.current_item

    previews = started.preview_all()

    assert previews == {
        srs.ReviewOutcome.AGAIN: "1 min",
        srs.ReviewOutcome.HARD: "1 min",
        srs.ReviewOutcome.GOOD: "10 min",
        srs.ReviewOutcome.EASY: "4 days",
    }
    assert started.current_item is before
    assert started.state == SessionState.AWAITING_RATING


def test_commit_persists_and_advances(started, two_item_store, now):
    started.reveal()

    feedback = started.commit(srs.ReviewOutcome.GOOD, "  el primero  ")

    assert feedback.text == "Good progress. Next step in 10 min."
    assert started.state == SessionState.AWAITING_REVEAL
    assert started.current_item.item_id == "second"
    assert started.reviewed_count == 1
    assert started.correct_count == 1

    item_id, saved, session_id = two_item_store.puts[0]
    assert item_id == "first"
    assert session_id == "s-1"
    assert saved.current_learning_step == 1
    assert saved.note == "el primero"
    assert saved.last_reviewed == now


def test_last_commit_completes_session(started):
    summaries = []
    started.on_session_complete(summaries.append)

    for outcome in (srs.ReviewOutcome.AGAIN, srs.ReviewOutcome.EASY):
        started.reveal()
        started.commit(outcome)

    assert started.is_complete
    summary = started.summary
    assert summaries == [summary]
    assert summary.reviewed_count == 2
    assert summary.correct_count == 1
    assert summary.accuracy == 0.5
    assert summary.outcome_counts == {srs.ReviewOutcome.AGAIN: 1, srs.ReviewOutcome.EASY: 1}


def test_hook_registered_after_completion_fires(now):
    session = make_session(InMemoryStore(), now)
    session.start(now)
    summaries = []

    session.on_session_complete(summaries.append)

    assert summaries == [session.summary]


def test_failed_write_stays_on_same_item(started, two_item_store):
    started.reveal()
    two_item_store.fail_with = srs.PersistenceFailure("disk full")

    with pytest.raises(srs.PersistenceFailure):
        started.commit(srs.ReviewOutcome.GOOD)

    assert started.state == SessionState.AWAITING_RATING
    assert started.current_item.item_id == "first"
    assert started.queue.position == 0
    assert started.reviewed_count == 0
    assert "disk full" in started.last_error
    assert two_item_store.items["first"].quality_history == ()

    two_item_store.fail_with = None
    started.commit(srs.ReviewOutcome.GOOD)

    assert started.current_item.item_id == "second"
    assert started.last_error is None


def test_unexpected_store_errors_become_persistence_failures(started, two_item_store):
    started.reveal()
    two_item_store.fail_with = RuntimeError("connection reset")

    with pytest.raises(srs.PersistenceFailure) as excinfo:
        started.commit(srs.ReviewOutcome.EASY)

    assert isinstance(excinfo.value.__cause__, RuntimeError)
    assert started.state == SessionState.AWAITING_RATING


class ReentrantStore(InMemoryStore):
    """Calls back into the session while a write is in progress."""

    def __init__(self, items):
        super().__init__(items)
        self.session = None
        self.seen_busy = False
        self.errors = []

    def put(self, item_id, state, expected_last_reviewed=None, session_id=None):
        self.seen_busy = self.session.is_busy
        for attempt in (
            lambda: self.session.commit(srs.ReviewOutcome.AGAIN),
            lambda: self.session.reveal(),
            lambda: self.session.preview_all(),
        ):
            try:
                attempt()
            except srs.SessionBusy as exc:
                self.errors.append(exc)
        super().put(item_id, state, expected_last_reviewed, session_id)


def test_calls_during_commit_are_rejected(now):
    store = ReentrantStore([make_item("only")])
    session = make_session(store, now)
    store.session = session
    session.start(now)
    session.reveal()

    session.commit(srs.ReviewOutcome.GOOD)

    assert store.seen_busy is True
    assert len(store.errors) == 3
    assert len(store.puts) == 1
    assert store.items["only"].quality_history[-1].quality == 4
    assert session.is_complete


def test_commit_key_matches_commit(now):
    by_key = make_session(InMemoryStore([make_item()]), now)
    by_button = make_session(InMemoryStore([make_item()]), now)
    for session in (by_key, by_button):
        session.start(now)
        session.reveal()

    by_key.commit_key("3")
    by_button.commit(srs.ReviewOutcome.GOOD)

    assert by_key.store.items["item-1"] == by_button.store.items["item-1"]


def test_unbound_key_is_ignored(started):
    started.reveal()

    assert started.commit_key("x") is None
    assert started.state == SessionState.AWAITING_RATING
    assert started.reviewed_count == 0


def test_reflection_after_completion(now):
    store = InMemoryStore()
    session = make_session(store, now)

    with pytest.raises(srs.InvalidSessionState):
        session.save_reflection("too early")

    session.start(now)

    assert session.save_reflection("   ") is None
    assert session.save_reflection(" verbs are hard ") == 1
    assert store.reflections == [("verbs are hard", "s-1")]


def test_abandon_stops_the_session(started):
    started.abandon()

    assert started.state == SessionState.ABANDONED
    assert started.current_item is None
    with pytest.raises(srs.InvalidSessionState):
        started.reveal()


def test_items_rated_in_session_are_not_requeued(started):
    started.reveal()
    started.commit(srs.ReviewOutcome.AGAIN)
    started.reveal()
    started.commit(srs.ReviewOutcome.AGAIN)

    assert started.is_complete
    assert started.queue.total == 2


def test_session_against_sql_store(store, now):
    store.add_item(make_item("uno", due=now - timedelta(minutes=5)))
    store.add_item(make_item(
        "dos",
        due=now - timedelta(days=1),
        repetitions=2,
        interval=6.0,
        is_learning=False,
    ))
    session = make_session(store, now)
    session.start(now)

    assert session.queue.item_ids == ("uno", "dos")
    while not session.is_complete:
        session.reveal()
        session.commit(srs.ReviewOutcome.GOOD)

    assert store.get("uno").current_learning_step == 1
    dos = store.get("dos")
    assert dos.interval == 15
    assert dos.repetitions == 3
    events = store.review_events(deck_id="spanish")
    assert [event["session_id"] for event in events] == ["s-1", "s-1"]


def test_hard_counts_as_a_miss(started):
    for outcome in (srs.ReviewOutcome.HARD, srs.ReviewOutcome.GOOD):
        started.reveal()
        started.commit(outcome)

    assert started.summary.reviewed_count == 2
    assert started.summary.correct_count == 1
    assert started.summary.accuracy == 0.5


def test_interrupted_write_does_not_leave_session_busy(started, two_item_store):
    started.reveal()
    two_item_store.fail_with = KeyboardInterrupt()

    with pytest.raises(KeyboardInterrupt):
        started.commit(srs.ReviewOutcome.GOOD)

    assert started.state == SessionState.AWAITING_RATING
    assert not started.is_busy
    assert started.current_item.item_id == "first"

    two_item_store.fail_with = None
    started.commit(srs.ReviewOutcome.GOOD)
    assert started.current_item.item_id == "second"

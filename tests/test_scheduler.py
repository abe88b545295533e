from dataclasses import replace
from datetime import timedelta

import pytest

from core import srs
from core.srs.scheduler import apply_review, quality_for, round_half_up

from tests.factories import make_item


SCHEDULING_FIELDS = ("easiness", "repetitions", "interval", "is_learning", "current_learning_step")


def scheduling(state):
    return {name: getattr(state, name) for name in SCHEDULING_FIELDS}


@pytest.fixture
def mature_item():
    return make_item(easiness=2.0, repetitions=3, interval=10.0, is_learning=False)


def test_new_item_good_good_easy(now):
    """New item climbs the ladder, graduates, then gets an EASY boost."""
    item = make_item()

    first = apply_review(item, srs.ReviewOutcome.GOOD, now=now)
    assert first.current_learning_step == 1
    assert first.interval == pytest.approx(10 / 1440)
    assert first.is_learning is True
    assert first.repetitions == 0

    second = apply_review(first, srs.ReviewOutcome.GOOD, now=now)
    assert second.repetitions == 1
    assert second.interval == 1
    assert second.is_learning is False
    assert second.current_learning_step == 0

    third = apply_review(second, srs.ReviewOutcome.EASY, now=now)
    assert third.repetitions == 2
    assert third.easiness == 2.5
    assert third.interval == 3


def test_mature_lapse_restarts_ladder(mature_item, now):
    result = apply_review(mature_item, srs.ReviewOutcome.AGAIN, now=now)

    assert result.repetitions == 0
    assert result.is_learning is True
    assert result.current_learning_step == 0
    assert result.interval == pytest.approx(1 / 1440)
    assert result.easiness == pytest.approx(1.8)


def test_hard_is_handled_like_again(mature_item, now):
    again = apply_review(mature_item, srs.ReviewOutcome.AGAIN, now=now)
    hard = apply_review(mature_item, srs.ReviewOutcome.HARD, now=now)

    assert scheduling(hard) == scheduling(again)
    assert hard.next_review_date == again.next_review_date
    assert hard.quality_history[-1].quality == 2
    assert again.quality_history[-1].quality == 1


def test_learning_failure_keeps_easiness(now):
    item = make_item(current_learning_step=1, interval=10 / 1440, easiness=2.1)

    result = apply_review(item, srs.ReviewOutcome.AGAIN, now=now)

    assert result.easiness == 2.1
    assert result.current_learning_step == 0


def test_easiness_never_drops_below_floor(now):
    item = make_item(easiness=1.3, repetitions=5, interval=20.0, is_learning=False)

    for outcome in (srs.ReviewOutcome.AGAIN, srs.ReviewOutcome.HARD):
        assert apply_review(item, outcome, now=now).easiness == 1.3

    near_floor = replace(item, easiness=1.35)
    assert apply_review(near_floor, 3, now=now).easiness == 1.3


def test_learning_easy_graduates_immediately(now):
    result = apply_review(make_item(), srs.ReviewOutcome.EASY, now=now)

    assert result.is_learning is False
    assert result.repetitions == 1
    assert result.interval == 4
    assert result.easiness == 2.5


def test_mature_good_multiplies_by_easiness(mature_item, now):
    result = apply_review(mature_item, srs.ReviewOutcome.GOOD, now=now)

    assert result.interval == 20
    assert result.easiness == 2.0
    assert result.repetitions == 4


def test_mature_easy_raises_easiness_and_interval(mature_item, now):
    result = apply_review(mature_item, srs.ReviewOutcome.EASY, now=now)

    assert result.easiness == pytest.approx(2.15)
    # 10 * 2.15 * 1.3 = 27.95
    assert result.interval == 28


def test_quality_three_path(mature_item, now):
    result = apply_review(mature_item, 3, now=now)

    assert result.easiness == pytest.approx(1.85)
    assert result.interval == 12
    assert result.is_learning is False


def test_quality_zero_is_a_failure(mature_item, now):
    result = apply_review(mature_item, 0, now=now)
    assert result.is_learning is True
    assert result.repetitions == 0


def test_graduation_is_monotonic(now):
    ladder = srs.LearningLadder(steps_minutes=(1, 10, 60), graduating_interval_days=2)
    state = make_item()
    intervals = []

    for _ in ladder.steps_minutes:
        assert state.in_learning_phase
        state = apply_review(state, srs.ReviewOutcome.GOOD, now=now, ladder=ladder)
        intervals.append(state.interval)

    assert state.is_learning is False
    assert state.interval == 2
    assert intervals == sorted(intervals)


def test_apply_review_is_pure(mature_item, now):
    snapshot = replace(mature_item)

    first = apply_review(mature_item, srs.ReviewOutcome.GOOD, "hint", now=now)
    second = apply_review(mature_item, srs.ReviewOutcome.GOOD, "hint", now=now)

    assert first == second
    assert mature_item == snapshot
    assert mature_item.quality_history == ()


def test_review_dates_and_history(mature_item, now):
    result = apply_review(mature_item, srs.ReviewOutcome.GOOD, now=now)

    assert result.last_reviewed == now
    assert result.next_review_date == now + timedelta(days=20)
    assert len(result.quality_history) == 1
    record = result.quality_history[0]
    assert record.timestamp == now
    assert record.quality == 4
    assert record.interval == 20
    assert record.is_learning is False


def test_note_is_trimmed_and_blank_keeps_previous(now):
    item = make_item(note="old note")

    assert apply_review(item, srs.ReviewOutcome.GOOD, "  new note  ", now=now).note == "new note"
    assert apply_review(item, srs.ReviewOutcome.GOOD, "   ", now=now).note == "old note"
    assert apply_review(item, srs.ReviewOutcome.GOOD, None, now=now).note == "old note"


@pytest.mark.parametrize("rating", [-1, 6, 2.0, "GOOD", True, None])
def test_invalid_ratings_are_rejected(rating, now):
    with pytest.raises(srs.InvalidRating):
        apply_review(make_item(), rating, now=now)


def test_invalid_rating_is_a_value_error():
    with pytest.raises(ValueError, match="between 0 and 5"):
        quality_for(9)


def test_outcome_quality_mapping():
    assert [quality_for(outcome) for outcome in srs.OUTCOME_ORDER] == [1, 2, 4, 5]


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(3.5) == 4
    assert round_half_up(2.49) == 2

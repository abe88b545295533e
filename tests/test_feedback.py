from core import srs
from core.srs.scheduler import apply_review

from tests.factories import make_item


def feedback_for(item, outcome, now):
    return srs.build_feedback(item, apply_review(item, outcome, now=now), outcome)


def test_learning_good_reports_next_step(now):
    feedback = feedback_for(make_item(), srs.ReviewOutcome.GOOD, now)

    assert feedback.text == "Good progress. Next step in 10 min."
    assert feedback.tone == "success"
    assert feedback.estimate == "10 min"


def test_last_step_good_reports_graduation(now):
    item = make_item(current_learning_step=1, interval=10 / 1440)
    feedback = feedback_for(item, srs.ReviewOutcome.GOOD, now)

    assert feedback.text == "Graduated! Next review in 1 day."


def test_learning_easy_reports_fast_graduation(now):
    feedback = feedback_for(make_item(), srs.ReviewOutcome.EASY, now)
    assert feedback.text == "Fast graduation! Interval jumps to 4 days."


def test_mature_outcomes(now):
    item = make_item(easiness=2.0, repetitions=3, interval=10.0, is_learning=False)

    assert feedback_for(item, srs.ReviewOutcome.GOOD, now).text == "Well remembered! Next review in 3 weeks."
    assert feedback_for(item, srs.ReviewOutcome.EASY, now).text == "Perfect! Interval extended to 4 weeks."

    again = feedback_for(item, srs.ReviewOutcome.AGAIN, now)
    assert again.text == "Forgotten. Relearning starts in 1 min."
    assert again.tone == "error"


def test_failures_while_learning(now):
    again = feedback_for(make_item(), srs.ReviewOutcome.AGAIN, now)
    assert again.text == "Restarting learning. You'll see it again in 1 min."

    hard = feedback_for(make_item(), srs.ReviewOutcome.HARD, now)
    assert hard.text == "Tough one. Back to the first step in 1 min."
    assert hard.tone == "warning"

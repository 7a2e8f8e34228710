"""
Tests for DecayService

A seeded / fixed random source pins the weight decay rate so outputs are exact.
"""

import random
from datetime import datetime, timedelta, timezone

import pytest
from sqlmodel import Session

from config.database import engine, create_db_and_tables
from services.decay_service import DecayService
from utils.clock import as_utc
from factories import create_test_feedback, create_test_recommendation, make_context


class FixedRandom(random.Random):
    def __init__(self, value: float):
        super().__init__(0)
        self.value = value

    def random(self):
        return self.value


def setup_module():
    create_db_and_tables()


def test_no_entries_is_success():
    with Session(engine) as session:
        assert DecayService().recalculate_feed_countdown(session, make_context()) == 0


def test_countdown_and_weight_decay_after_two_days():
    now = datetime(2026, 3, 10, 12, 0, 0, tzinfo=timezone.utc)
    with Session(engine) as session:
        ctx = make_context()
        item = create_test_recommendation(session)
        feedback = create_test_feedback(
            session, ctx.user_id, item,
            weight=10.0,
            countdown_hours=1440.0,
            interaction_type="like",
            last_recalculated_at=now - timedelta(hours=48)
        )

        updated = DecayService(rng=FixedRandom(0.75)).recalculate_feed_countdown(session, ctx, now=now)

        assert updated == 1
        session.refresh(feedback)
        # weight 10 burns the countdown at 2x
        assert feedback.reminder_countdown_hours == pytest.approx(1440.0 - 96.0)
        # 0.1 per day for two days
        assert feedback.interaction_weight == pytest.approx(9.8)
        assert as_utc(feedback.last_recalculated_at) == now


def test_zero_elapsed_is_exact_noop():
    now = datetime(2026, 3, 10, 12, 0, 0, tzinfo=timezone.utc)
    with Session(engine) as session:
        ctx = make_context()
        item = create_test_recommendation(session)
        feedback = create_test_feedback(
            session, ctx.user_id, item,
            weight=3.3,
            countdown_hours=777.7,
            interaction_type="indifferent",
            last_recalculated_at=now
        )

        DecayService(rng=FixedRandom(0.5)).recalculate_feed_countdown(session, ctx, now=now)

        session.refresh(feedback)
        assert feedback.interaction_weight == 3.3
        assert feedback.reminder_countdown_hours == 777.7


def test_second_call_in_quick_succession_changes_nothing():
    now = datetime(2026, 3, 10, 12, 0, 0, tzinfo=timezone.utc)
    with Session(engine) as session:
        ctx = make_context()
        item = create_test_recommendation(session)
        feedback = create_test_feedback(
            session, ctx.user_id, item,
            weight=-4.0,
            countdown_hours=500.0,
            interaction_type="indifferent",
            last_recalculated_at=now - timedelta(days=3)
        )
        service = DecayService(rng=random.Random(7))

        service.recalculate_feed_countdown(session, ctx, now=now)
        session.refresh(feedback)
        after_first = (feedback.interaction_weight, feedback.reminder_countdown_hours)

        service.recalculate_feed_countdown(session, ctx, now=now)
        session.refresh(feedback)

        assert (feedback.interaction_weight, feedback.reminder_countdown_hours) == after_first
        assert -4.0 < after_first[0] < 0.0


def test_clock_skew_does_not_decay_or_rewind():
    now = datetime(2026, 3, 10, 12, 0, 0, tzinfo=timezone.utc)
    future = now + timedelta(hours=5)
    with Session(engine) as session:
        ctx = make_context()
        item = create_test_recommendation(session)
        feedback = create_test_feedback(
            session, ctx.user_id, item,
            weight=5.0,
            countdown_hours=100.0,
            last_recalculated_at=future
        )

        DecayService(rng=FixedRandom(0.5)).recalculate_feed_countdown(session, ctx, now=now)

        session.refresh(feedback)
        assert feedback.interaction_weight == 5.0
        assert feedback.reminder_countdown_hours == 100.0
        assert as_utc(feedback.last_recalculated_at) == future


@pytest.mark.parametrize("interaction_type", ["favorite", "dislike", "report"])
def test_non_decaying_types_keep_weight_but_countdown_moves(interaction_type):
    now = datetime(2026, 3, 10, 12, 0, 0, tzinfo=timezone.utc)
    with Session(engine) as session:
        ctx = make_context()
        item = create_test_recommendation(session)
        feedback = create_test_feedback(
            session, ctx.user_id, item,
            weight=0.0,
            countdown_hours=100.0,
            interaction_type=interaction_type,
            last_recalculated_at=now - timedelta(hours=10)
        )

        DecayService(rng=FixedRandom(0.5)).recalculate_feed_countdown(session, ctx, now=now)

        session.refresh(feedback)
        assert feedback.interaction_weight == 0.0
        assert feedback.reminder_countdown_hours == pytest.approx(90.0)


def test_dislike_slows_countdown_to_a_crawl():
    now = datetime(2026, 3, 10, 12, 0, 0, tzinfo=timezone.utc)
    with Session(engine) as session:
        ctx = make_context()
        item = create_test_recommendation(session)
        feedback = create_test_feedback(
            session, ctx.user_id, item,
            weight=-100.0,
            countdown_hours=87600.0,
            interaction_type="dislike",
            last_recalculated_at=now - timedelta(days=365)
        )

        DecayService().recalculate_feed_countdown(session, ctx, now=now)

        session.refresh(feedback)
        assert feedback.interaction_weight == -100.0
        # 2 ** -10 speed: a year barely moves it
        assert 87590.0 < feedback.reminder_countdown_hours < 87600.0


def test_weight_snaps_to_zero_instead_of_crossing():
    now = datetime(2026, 3, 10, 12, 0, 0, tzinfo=timezone.utc)
    with Session(engine) as session:
        ctx = make_context()
        item = create_test_recommendation(session)
        feedback = create_test_feedback(
            session, ctx.user_id, item,
            weight=0.25,
            countdown_hours=10.0,
            interaction_type="like",
            last_recalculated_at=now - timedelta(days=30)
        )

        DecayService(rng=FixedRandom(0.0)).recalculate_feed_countdown(session, ctx, now=now)

        session.refresh(feedback)
        assert feedback.interaction_weight == 0.0
        assert feedback.reminder_countdown_hours == 0.0


def test_only_callers_entries_are_touched():
    now = datetime(2026, 3, 10, 12, 0, 0, tzinfo=timezone.utc)
    with Session(engine) as session:
        ctx = make_context()
        other = make_context()
        item = create_test_recommendation(session)
        mine = create_test_feedback(
            session, ctx.user_id, item,
            weight=1.0, countdown_hours=50.0,
            last_recalculated_at=now - timedelta(hours=10)
        )
        theirs = create_test_feedback(
            session, other.user_id, item,
            weight=1.0, countdown_hours=50.0,
            last_recalculated_at=now - timedelta(hours=10)
        )

        updated = DecayService(rng=FixedRandom(0.5)).recalculate_feed_countdown(session, ctx, now=now)

        assert updated == 1
        session.refresh(mine)
        session.refresh(theirs)
        assert mine.reminder_countdown_hours < 50.0
        assert theirs.reminder_countdown_hours == 50.0
        assert as_utc(theirs.last_recalculated_at) == now - timedelta(hours=10)


def test_countdown_monotonic_across_passes():
    start = datetime(2026, 3, 1, tzinfo=timezone.utc)
    with Session(engine) as session:
        ctx = make_context()
        item = create_test_recommendation(session)
        feedback = create_test_feedback(
            session, ctx.user_id, item,
            weight=7.0, countdown_hours=1440.0,
            last_recalculated_at=start
        )
        service = DecayService(rng=random.Random(42))

        previous = feedback.reminder_countdown_hours
        for hours in [1, 5, 24, 100, 1000]:
            service.recalculate_feed_countdown(session, ctx, now=start + timedelta(hours=hours))
            session.refresh(feedback)
            assert feedback.reminder_countdown_hours <= previous
            assert feedback.reminder_countdown_hours >= 0.0
            previous = feedback.reminder_countdown_hours


def test_recalculated_rows_keep_updated_at():
    now = datetime(2026, 3, 10, 12, 0, 0, tzinfo=timezone.utc)
    updated_at = now - timedelta(days=2)
    with Session(engine) as session:
        ctx = make_context()
        item = create_test_recommendation(session)
        feedback = create_test_feedback(
            session, ctx.user_id, item,
            weight=20.0, interaction_type="favorite",
            last_recalculated_at=updated_at, updated_at=updated_at
        )

        DecayService().recalculate_feed_countdown(session, ctx, now=now)

        session.refresh(feedback)
        assert as_utc(feedback.updated_at) == updated_at

"""
Decay pass over a user's discover feedback.

Triggered by the client (typically on opening the discover page) rather than
by a scheduler, so it must tolerate being called repeatedly: every pass
measures elapsed time from the stored last_recalculated_at, which makes a
second call right after the first a no-op.
"""

from __future__ import annotations
import random
from datetime import datetime
from typing import List, Optional
from sqlmodel import Session, select

from models import RecommendationFeedback
from services.scoring import decay_countdown, decay_weight, hours_between
from utils.clock import as_utc, utc_now
from utils.logger import setup_logger
from utils.request_context import RequestContext
from utils.transaction import scoped_transaction

logger = setup_logger(__name__)


class DecayService:
    def __init__(self, rng: Optional[random.Random] = None):
        # Seed the generator to make weight decay reproducible
        self.rng = rng or random.Random()

    def recalculate_feed_countdown(
        self,
        db_session: Session,
        ctx: RequestContext,
        now: Optional[datetime] = None
    ) -> int:
        now = as_utc(now) if now else utc_now()

        entries: List[RecommendationFeedback] = list(db_session.exec(
            select(RecommendationFeedback)
            .where(RecommendationFeedback.user_id == ctx.user_id)
        ).all())

        if not entries:
            logger.info("No feedback to recalculate", extra=ctx.log_extra())
            return 0

        # Rows are independent; one commit is only a batching convenience
        with scoped_transaction(db_session, ctx, "recalculate_feed_countdown"):
            for entry in entries:
                self._decay_entry(entry, now)
                db_session.add(entry)

        logger.info(
            "Recalculated feed countdowns",
            extra=ctx.log_extra(count=len(entries))
        )

        return len(entries)

    def _decay_entry(self, entry: RecommendationFeedback, now: datetime) -> None:
        last_recalculated_at = as_utc(entry.last_recalculated_at)
        hours_elapsed = hours_between(last_recalculated_at, now)

        if hours_elapsed > 0:
            weight = entry.interaction_weight
            entry.reminder_countdown_hours = decay_countdown(
                entry.reminder_countdown_hours, weight, hours_elapsed
            )
            entry.interaction_weight = decay_weight(
                weight, entry.last_interaction_type, hours_elapsed, self.rng
            )

        # Never move the timestamp backwards when the clock is skewed
        if now > last_recalculated_at:
            entry.last_recalculated_at = now

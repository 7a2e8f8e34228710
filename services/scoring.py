"""
Scoring policy for discover feedback.

Pure functions only: feedback ingestion and the decay pass call into these
and own all persistence. Weights live in [MIN_WEIGHT, MAX_WEIGHT]; countdowns
are hours until an item may resurface in the user's feed.
"""

from __future__ import annotations
import math
import random
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional, Union

from models.feedback import InteractionType
from utils.clock import as_utc

MAX_WEIGHT = 100.0
MIN_WEIGHT = -100.0

HOURS_PER_DAY = 24

POSITIVE_COUNTDOWN_HOURS = 60 * HOURS_PER_DAY
INDIFFERENT_SEED_COUNTDOWN_HOURS = 48
INDIFFERENT_MAX_COUNTDOWN_HOURS = 180 * HOURS_PER_DAY
SUPPRESSED_COUNTDOWN_HOURS = 10 * 365 * HOURS_PER_DAY

FAVORITE_FLOOR = 10.0
FAVORITE_BOOST = 5.0
LIKE_BOOST = 1.0
INDIFFERENT_PENALTY = 0.25

# Weight is permanent for these until the user reacts again
NON_DECAYING_TYPES = frozenset({
    InteractionType.FAVORITE.value,
    InteractionType.DISLIKE.value,
    InteractionType.REPORT.value,
})

# Already favorited or suppressed, never offered again as fresh discovery
EXCLUDED_FROM_FEED = NON_DECAYING_TYPES

BASE_DAILY_DECAY_RATE = 0.1
DECAY_RATE_OFFSET = 0.25

# (minimum weight, days a favorite stays listed), highest tier first
FAVORITE_TIERS = (
    (50.0, 30),
    (45.0, 20),
    (40.0, 15),
    (35.0, 10),
    (30.0, 7),
    (25.0, 5),
    (20.0, 3),
    (15.0, 2),
    (10.0, 1),
)


@dataclass(frozen=True)
class ScoreUpdate:
    weight: float
    countdown_hours: float
    delta: float


def clamp_weight(weight: float) -> float:
    return max(MIN_WEIGHT, min(MAX_WEIGHT, weight))


def _sign(value: float) -> int:
    if value > 0:
        return 1
    if value < 0:
        return -1
    return 0


def apply_interaction(
    interaction_type: Union[InteractionType, str],
    old_weight: float = 0.0,
    existing_countdown: Optional[float] = None,
) -> ScoreUpdate:
    """
    Compute the weight and countdown that follow one interaction.

    `existing_countdown` is None when the user has no entry for the item yet.
    Repeated calls reinforce: each application adds to or resets the previous
    values rather than setting them absolutely.
    """
    interaction_type = InteractionType(interaction_type)

    if interaction_type == InteractionType.FAVORITE:
        new_weight = max(FAVORITE_FLOOR, old_weight + FAVORITE_BOOST)
        countdown = POSITIVE_COUNTDOWN_HOURS
    elif interaction_type == InteractionType.LIKE:
        new_weight = old_weight + LIKE_BOOST
        countdown = POSITIVE_COUNTDOWN_HOURS
    elif interaction_type == InteractionType.INDIFFERENT:
        new_weight = old_weight - INDIFFERENT_PENALTY
        if existing_countdown is None:
            countdown = INDIFFERENT_SEED_COUNTDOWN_HOURS
        else:
            countdown = min(existing_countdown * 2, INDIFFERENT_MAX_COUNTDOWN_HOURS)
    else:
        # dislike and report
        new_weight = MIN_WEIGHT
        countdown = SUPPRESSED_COUNTDOWN_HOURS

    new_weight = clamp_weight(new_weight)

    return ScoreUpdate(
        weight=new_weight,
        countdown_hours=float(countdown),
        delta=new_weight - old_weight,
    )


def hours_between(earlier: datetime, later: datetime) -> float:
    """Elapsed hours; clock skew counts as no time passing."""
    elapsed = (as_utc(later) - as_utc(earlier)).total_seconds() / 3600.0
    return max(0.0, elapsed)


def decay_countdown(countdown_hours: float, weight: float, hours_elapsed: float) -> float:
    # weight 0 burns at 1x, 10 at 2x, 20 at 4x, -10 at 0.5x
    if hours_elapsed <= 0:
        return countdown_hours
    rate_multiplier = math.pow(2, weight / 10)
    return max(0.0, countdown_hours - hours_elapsed * rate_multiplier)


def draw_daily_decay_rate(rng: random.Random) -> float:
    """Uniform in [0.025, 0.125) weight units per day."""
    return BASE_DAILY_DECAY_RATE * (DECAY_RATE_OFFSET + rng.random())


def decay_weight(
    weight: float,
    last_interaction_type: Optional[str],
    hours_elapsed: float,
    rng: random.Random,
) -> float:
    """Pull a weight toward zero without ever crossing it."""
    if last_interaction_type in NON_DECAYING_TYPES:
        return weight
    if hours_elapsed <= 0 or weight == 0:
        return weight

    decay_amount = draw_daily_decay_rate(rng) * (hours_elapsed / HOURS_PER_DAY)
    decayed = weight - _sign(weight) * decay_amount

    if _sign(decayed) != _sign(weight):
        return 0.0
    return decayed


def favorite_window(weight: float) -> Optional[timedelta]:
    """How long after its last update a favorite stays listed; None if already expired."""
    for min_weight, days in FAVORITE_TIERS:
        if weight >= min_weight:
            return timedelta(days=days)
    return None


def favorite_expires_at(updated_at: datetime, weight: float) -> Optional[datetime]:
    window = favorite_window(weight)
    if window is None:
        return None
    return updated_at + window

from __future__ import annotations
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

import random
from typing import Dict, List, Optional
from sqlmodel import Session, select

from config.database import engine, create_db_and_tables
from models import RecommendationFeedback
from services.decay_service import DecayService
from services.errors import StorageError
from utils.request_context import AuthenticatedUser, RequestContext


def find_users_with_feedback(session: Session) -> List[str]:
    return list(session.exec(
        select(RecommendationFeedback.user_id).distinct()
    ).all())


def recalculate_all_feedback(seed: Optional[int] = None) -> Dict[str, int]:
    """Run one decay pass for every user that owns feedback rows."""
    create_db_and_tables()
    decay_service = DecayService(rng=random.Random(seed))

    stats = {
        "users_processed": 0,
        "users_failed": 0,
        "entries_updated": 0
    }

    with Session(engine) as session:
        user_ids = find_users_with_feedback(session)
        print(f"\nFound {len(user_ids)} users with feedback")

        for user_id in user_ids:
            ctx = RequestContext.for_user(AuthenticatedUser(user_id=user_id))
            try:
                stats["entries_updated"] += decay_service.recalculate_feed_countdown(session, ctx)
                stats["users_processed"] += 1
            except StorageError as e:
                # Each user's pass stands alone; keep going
                print(f"  Failed for user {user_id}: {e}")
                stats["users_failed"] += 1

    return stats


def print_recalculation_stats(stats: Dict[str, int]) -> None:
    print("\n" + "="*60)
    print("FEEDBACK DECAY STATISTICS")
    print("="*60)
    print(f"Users processed:   {stats['users_processed']}")
    print(f"Users failed:      {stats['users_failed']}")
    print(f"Entries updated:   {stats['entries_updated']}")
    print("="*60)


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(
        description="Apply elapsed-time decay to every user's discover feedback"
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for the weight decay rate draws"
    )

    args = parser.parse_args()

    stats = recalculate_all_feedback(seed=args.seed)
    print_recalculation_stats(stats)

    if stats["users_failed"]:
        sys.exit(1)

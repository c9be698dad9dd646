"""
Awarding service: exactly-once insert into `user_badges`.

award() never checks-then-inserts. It attempts the INSERT inside a
SAVEPOINT and lets the (user_id, badge_key, scope_key) unique constraint
decide: an IntegrityError means another caller already earned the badge,
which is reported as newly_awarded=False rather than an error. Existing
rows are never updated, so the snapshot of the first award is permanent.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models.badge import Badge
from app.models.scope import scope_key_for
from app.models.user_badge import UserBadge


@dataclass(frozen=True)
class AwardResult:
    badge_key: str
    newly_awarded: bool


def award(
    db: Session,
    user_id: str,
    badge: Badge,
    trip_id: Optional[str] = None,
    progress_snapshot: Optional[str] = None,
    now: Optional[datetime] = None,
) -> AwardResult:
    """
    Insert the award for (user, badge, trip-or-global). Flushes inside a
    savepoint; the caller owns the outer commit.
    """
    scoped_trip = trip_id if badge.is_per_trip else None
    row = UserBadge(
        user_id=user_id,
        badge_key=badge.key,
        trip_id=scoped_trip,
        scope_key=scope_key_for(scoped_trip),
        progress_snapshot=progress_snapshot,
        earned_at=now or datetime.now(tz=timezone.utc),
    )
    try:
        with db.begin_nested():
            db.add(row)
    except IntegrityError:
        return AwardResult(badge.key, newly_awarded=False)
    return AwardResult(badge.key, newly_awarded=True)


def list_user_badges(
    db: Session, user_id: str, trip_id: Optional[str] = None
) -> list[UserBadge]:
    """Awards for a user joined with badge metadata, newest first."""
    q = select(UserBadge).where(UserBadge.user_id == user_id)
    if trip_id:
        q = q.where(UserBadge.trip_id == trip_id)
    return list(
        db.execute(q.order_by(UserBadge.earned_at.desc(), UserBadge.id.desc())).scalars().unique()
    )

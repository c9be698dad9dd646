"""
Progress store: per (user, badge, scope) counters.

Public API
----------
upsert_progress(db, badge, user_id, trip_id, result, evidence) -> BadgeProgress   (flush only)
list_progress(db, user_id, trip_id=None)                       -> list[ProgressView]

Rows are overwritten with the freshly recomputed value on every evaluation.
Concurrent writers for the same key compute the same value from the same
source, so last-write-wins is correct and no locking is needed here.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models.badge import Badge
from app.models.badge_progress import BadgeProgress
from app.models.scope import scope_key_for
from app.models.user_badge import UserBadge
from app.services.evaluators import EvaluationResult
from app.services.evidence import Evidence, to_snapshot


class BadgeState(str, enum.Enum):
    not_started = "not_started"
    in_progress = "in_progress"
    earned = "earned"


@dataclass
class ProgressView:
    progress: BadgeProgress
    badge: Badge
    state: BadgeState


def _find(db: Session, user_id: str, badge_key: str, scope_key: str) -> Optional[BadgeProgress]:
    return db.execute(
        select(BadgeProgress).where(
            BadgeProgress.user_id == user_id,
            BadgeProgress.badge_key == badge_key,
            BadgeProgress.scope_key == scope_key,
        )
    ).scalar_one_or_none()


def _overwrite(row: BadgeProgress, result: EvaluationResult, snapshot: str) -> None:
    row.current_count = result.current_count
    row.target_count = result.target_count
    row.evidence = snapshot


def upsert_progress(
    db: Session,
    badge: Badge,
    user_id: str,
    trip_id: Optional[str],
    result: EvaluationResult,
    evidence: Evidence,
) -> BadgeProgress:
    """
    Create or overwrite the progress row for this key. Flushes, does not commit.
    `trip_id` is dropped for global badges so the key collapses to (user, badge).
    """
    scoped_trip = trip_id if badge.is_per_trip else None
    scope_key = scope_key_for(scoped_trip)
    snapshot = to_snapshot(evidence)

    row = _find(db, user_id, badge.key, scope_key)
    if row is not None:
        _overwrite(row, result, snapshot)
        db.flush()
        return row

    row = BadgeProgress(
        user_id=user_id,
        badge_key=badge.key,
        trip_id=scoped_trip,
        scope_key=scope_key,
    )
    _overwrite(row, result, snapshot)
    try:
        with db.begin_nested():
            db.add(row)
    except IntegrityError:
        # A concurrent evaluation created it first; its value is equivalent.
        row = _find(db, user_id, badge.key, scope_key)
        if row is None:
            raise
        _overwrite(row, result, snapshot)
        db.flush()
    return row


def _state(progress: BadgeProgress, earned: bool) -> BadgeState:
    if earned:
        return BadgeState.earned
    if progress.current_count > 0:
        return BadgeState.in_progress
    return BadgeState.not_started


def list_progress(
    db: Session, user_id: str, trip_id: Optional[str] = None
) -> list[ProgressView]:
    """Progress rows joined with their badge, each tagged with its state."""
    q = (
        select(BadgeProgress, Badge)
        .join(Badge, Badge.key == BadgeProgress.badge_key)
        .where(BadgeProgress.user_id == user_id)
    )
    if trip_id:
        q = q.where(BadgeProgress.trip_id == trip_id)
    rows = db.execute(q.order_by(Badge.category, Badge.key)).all()

    earned = {
        (ub.badge_key, ub.scope_key)
        for ub in db.execute(select(UserBadge).where(UserBadge.user_id == user_id)).scalars()
    }
    return [
        ProgressView(
            progress=p,
            badge=b,
            state=_state(p, (p.badge_key, p.scope_key) in earned),
        )
        for p, b in rows
    ]

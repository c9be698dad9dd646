"""
Trigger dispatcher: entry points called by action handlers after their own
write has committed (dare completed, checklist item toggled, invitation
sent or accepted).

  check_dare_badges(db, user_id, trip_id)
  check_checklist_badges(db, user_id, trip_id)
  check_invitation_badges(db, user_id, trip_id)
  check_combo_badges(db, user_id, trip_id)
  check_all_badges(db, user_id, trip_id)

Per family: gather evidence once → for every badge of the family upsert
progress and, if met, award → commit once.

Nothing here ever raises to the caller. A failing source or an unexpected
error rolls back that family's work and is logged; the badge will be picked
up by a later trigger since every evaluation recomputes from source. Entry
points may run redundantly and in any order.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.orm import Session

from app.core.errors import BadgeNotFoundError, SourceUnavailableError
from app.models.badge import BadgeFamily
from app.services.awarding import award
from app.services.catalog import get_badge
from app.services.evaluators import EVALUATORS, UnsupportedRequirementError
from app.services.evidence import to_snapshot
from app.services.progress import upsert_progress
from app.services.sources import SqlSources

logger = logging.getLogger(__name__)


@dataclass
class TriggerResult:
    """What one entry point did. Informational only."""
    family: str
    user_id: str
    trip_id: str
    awarded: list[str] = field(default_factory=list)          # newly earned
    already_earned: list[str] = field(default_factory=list)   # met, award existed
    skipped: list[str] = field(default_factory=list)          # catalog/config problems
    failed: bool = False
    error: Optional[str] = None


def _run_family(
    db: Session,
    family: BadgeFamily,
    user_id: str,
    trip_id: str,
    sources: Optional[SqlSources] = None,
    now: Optional[datetime] = None,
) -> TriggerResult:
    evaluator = EVALUATORS[family]
    result = TriggerResult(family=family.value, user_id=user_id, trip_id=trip_id)
    src = sources if sources is not None else SqlSources(db)
    at = now or datetime.now(tz=timezone.utc)

    awarded: list[str] = []
    already: list[str] = []
    try:
        evidence = evaluator.gather(src, user_id, trip_id)

        for key in evaluator.badge_keys:
            try:
                badge = get_badge(db, key)
                measured = evaluator.measure(badge, evidence, at)
            except (BadgeNotFoundError, UnsupportedRequirementError) as exc:
                logger.warning(
                    "badge config error family=%s badge=%s: %s", family.value, key, exc
                )
                result.skipped.append(key)
                continue

            upsert_progress(db, badge, user_id, trip_id, measured, evidence)
            if not measured.met:
                continue

            snapshot = to_snapshot(
                evidence,
                trip_id=trip_id if badge.is_per_trip else None,
                current_count=measured.current_count,
                target_count=measured.target_count,
            )
            outcome = award(db, user_id, badge, trip_id, snapshot, now=at)
            (awarded if outcome.newly_awarded else already).append(key)

        db.commit()
    except SourceUnavailableError as exc:
        db.rollback()
        logger.warning(
            "source unavailable family=%s source=%s user=%s trip=%s",
            family.value, exc.source, user_id, trip_id,
        )
        result.failed, result.error = True, exc.code
        return result
    except Exception as exc:
        db.rollback()
        logger.exception(
            "badge evaluation failed family=%s user=%s trip=%s", family.value, user_id, trip_id
        )
        result.failed, result.error = True, type(exc).__name__
        return result

    result.awarded, result.already_earned = awarded, already
    for key in awarded:
        logger.info("badge awarded badge=%s user=%s trip=%s", key, user_id, trip_id)
    return result


# ---------------------------------------------------------------------------
# Public entry points
# ---------------------------------------------------------------------------

def check_dare_badges(
    db: Session, user_id: str, trip_id: str, *,
    sources: Optional[SqlSources] = None, now: Optional[datetime] = None,
) -> TriggerResult:
    return _run_family(db, BadgeFamily.dare, user_id, trip_id, sources, now)


def check_checklist_badges(
    db: Session, user_id: str, trip_id: str, *,
    sources: Optional[SqlSources] = None, now: Optional[datetime] = None,
) -> TriggerResult:
    return _run_family(db, BadgeFamily.checklist, user_id, trip_id, sources, now)


def check_invitation_badges(
    db: Session, user_id: str, trip_id: str, *,
    sources: Optional[SqlSources] = None, now: Optional[datetime] = None,
) -> TriggerResult:
    return _run_family(db, BadgeFamily.invitation, user_id, trip_id, sources, now)


def check_combo_badges(
    db: Session, user_id: str, trip_id: str, *,
    sources: Optional[SqlSources] = None, now: Optional[datetime] = None,
) -> TriggerResult:
    return _run_family(db, BadgeFamily.combo, user_id, trip_id, sources, now)


TRIGGERS = {
    BadgeFamily.dare.value: check_dare_badges,
    BadgeFamily.checklist.value: check_checklist_badges,
    BadgeFamily.invitation.value: check_invitation_badges,
    BadgeFamily.combo.value: check_combo_badges,
}


def check_all_badges(
    db: Session, user_id: str, trip_id: str, *,
    sources: Optional[SqlSources] = None, now: Optional[datetime] = None,
) -> list[TriggerResult]:
    """Run every family. One family failing never stops the others."""
    return [
        trigger(db, user_id, trip_id, sources=sources, now=now)
        for trigger in TRIGGERS.values()
    ]

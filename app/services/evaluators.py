"""
Family evaluators: recompute evidence from the source collaborators and
measure catalog badges against it.

Protocol
--------
  evidence = evaluator.gather(sources, user_id, trip_id)   # one source pass
  result   = evaluator.measure(badge, evidence, now)       # per badge, pure

`evaluate(...)` chains the two for a single badge. Evaluators never read
`badge_progress`; the count always comes from the sources, so repeated or
out-of-order calls converge on the same answer.

Measurement by requirement_type
-------------------------------
  count_threshold       current = metric                      met: current >= value
  percentage_threshold  current = floor(100 * done / total)   met: total > 0 and 100*done >= value*total
  time_relative         current = whole days of lead time     met: checklist complete and lead >= value days
  compound_all_of       current = streams with evidence >= 1  met: every stream has evidence
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from app.models.badge import Badge, BadgeFamily, RequirementType
from app.services.evidence import (
    ChecklistEvidence,
    ComboEvidence,
    DareEvidence,
    Evidence,
    InvitationEvidence,
)
from app.services.sources import SqlSources


HARD_DIFFICULTY = "hard"


@dataclass(frozen=True)
class EvaluationResult:
    badge_key: str
    current_count: int
    target_count: int
    met: bool


class UnsupportedRequirementError(ValueError):
    """A catalog row asks a family for a requirement shape it cannot measure."""


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


# ---------------------------------------------------------------------------
# Base evaluator
# ---------------------------------------------------------------------------

class FamilyEvaluator:
    family: BadgeFamily
    # badge key -> evidence attribute(s): (count,) or (numerator, denominator)
    METRICS: dict[str, tuple[str, ...]] = {}

    @property
    def badge_keys(self) -> tuple[str, ...]:
        return tuple(self.METRICS)

    def gather(self, sources: SqlSources, user_id: str, trip_id: str) -> Evidence:
        raise NotImplementedError

    def measure(
        self, badge: Badge, evidence: Evidence, now: Optional[datetime] = None
    ) -> EvaluationResult:
        rtype = RequirementType(badge.requirement_type)
        metrics = self.METRICS.get(badge.key)
        if metrics is None:
            raise UnsupportedRequirementError(f"{self.family.value} cannot measure '{badge.key}'")

        if rtype is RequirementType.count_threshold:
            current = int(getattr(evidence, metrics[0]))
            return EvaluationResult(
                badge.key, current, badge.requirement_value, current >= badge.requirement_value
            )

        if rtype is RequirementType.percentage_threshold:
            done = int(getattr(evidence, metrics[0]))
            total = int(getattr(evidence, metrics[1]))
            return _percentage(badge, done, total)

        raise UnsupportedRequirementError(
            f"{self.family.value} cannot measure {rtype.value} for '{badge.key}'"
        )

    def evaluate(
        self,
        sources: SqlSources,
        badge: Badge,
        user_id: str,
        trip_id: str,
        now: Optional[datetime] = None,
    ) -> EvaluationResult:
        return self.measure(badge, self.gather(sources, user_id, trip_id), now)


def _percentage(badge: Badge, done: int, total: int) -> EvaluationResult:
    if total <= 0:
        return EvaluationResult(badge.key, 0, badge.requirement_value, False)
    current = (100 * done) // total
    met = 100 * done >= badge.requirement_value * total
    return EvaluationResult(badge.key, current, badge.requirement_value, met)


# ---------------------------------------------------------------------------
# Families
# ---------------------------------------------------------------------------

class DareEvaluator(FamilyEvaluator):
    family = BadgeFamily.dare
    METRICS = {
        "daredevil": ("completed",),
        "on_a_roll": ("completed",),
        "bucket_champion": ("completed",),
        "bucket_legend": ("completed", "total"),
        "no_fear": ("hard_completed",),
    }

    def gather(self, sources: SqlSources, user_id: str, trip_id: str) -> DareEvidence:
        records = sources.completion_records(user_id, trip_id)
        done = [r for r in records if r.is_completed]
        return DareEvidence(
            completed=len(done),
            total=len(records),
            hard_completed=sum(
                1 for r in done if (r.difficulty or "").strip().lower() == HARD_DIFFICULTY
            ),
        )


class ChecklistEvaluator(FamilyEvaluator):
    family = BadgeFamily.checklist
    METRICS = {
        "checklist_conqueror": ("completed_items", "total_items"),
        "detail_oriented": ("total_items",),
        "prepared_pro": ("completed_items", "total_items"),
        "checklist_master": ("completed_trips",),
    }

    def gather(self, sources: SqlSources, user_id: str, trip_id: str) -> ChecklistEvidence:
        state = sources.checklist_state(user_id, trip_id)
        window = sources.trip_window(trip_id)
        return ChecklistEvidence(
            total_items=max(state.total_items, 0),
            completed_items=max(min(state.completed_items, state.total_items), 0),
            completed_trips=sources.completed_checklist_trips(user_id),
            starts_at=window.starts_at if window else None,
        )

    def measure(
        self, badge: Badge, evidence: Evidence, now: Optional[datetime] = None
    ) -> EvaluationResult:
        if RequirementType(badge.requirement_type) is not RequirementType.time_relative:
            return super().measure(badge, evidence, now)

        assert isinstance(evidence, ChecklistEvidence)
        target = badge.requirement_value
        if not evidence.is_complete or evidence.starts_at is None:
            return EvaluationResult(badge.key, 0, target, False)

        lead = evidence.starts_at - (now or _utcnow())
        # Checked at evaluation time only; once the window closes the badge
        # is out of reach for this trip.
        met = lead >= timedelta(days=target)
        return EvaluationResult(badge.key, max(lead.days, 0), target, met)


class InvitationEvaluator(FamilyEvaluator):
    family = BadgeFamily.invitation
    METRICS = {
        "social_explorer": ("sent",),
        "travel_crew": ("sent",),
        "squad_goals": ("accepted",),
        "referral_master": ("accepted_all_trips",),
    }

    def gather(self, sources: SqlSources, user_id: str, trip_id: str) -> InvitationEvidence:
        on_trip = sources.invitation_records(user_id, trip_id)
        everywhere = sources.invitation_records(user_id, None)
        return InvitationEvidence(
            sent=len(on_trip),
            accepted=sum(1 for r in on_trip if r.is_accepted),
            accepted_all_trips=sum(1 for r in everywhere if r.is_accepted),
        )


class ComboEvaluator(FamilyEvaluator):
    """
    Cross-stream badges. Reads the constituent evaluators' current evidence,
    not their badge outcomes, and keeps no counter of its own.
    """
    family = BadgeFamily.combo
    METRICS = {
        "world_builder": ("dares", "checklist_items", "invitations"),
    }

    def __init__(
        self,
        dare: DareEvaluator,
        checklist: ChecklistEvaluator,
        invitation: InvitationEvaluator,
    ):
        self.dare = dare
        self.checklist = checklist
        self.invitation = invitation

    def gather(self, sources: SqlSources, user_id: str, trip_id: str) -> ComboEvidence:
        return ComboEvidence(
            dares=self.dare.gather(sources, user_id, trip_id).completed,
            checklist_items=self.checklist.gather(sources, user_id, trip_id).completed_items,
            invitations=self.invitation.gather(sources, user_id, trip_id).sent,
        )

    def measure(
        self, badge: Badge, evidence: Evidence, now: Optional[datetime] = None
    ) -> EvaluationResult:
        if RequirementType(badge.requirement_type) is not RequirementType.compound_all_of:
            return super().measure(badge, evidence, now)

        assert isinstance(evidence, ComboEvidence)
        streams = [getattr(evidence, name) for name in self.METRICS[badge.key]]
        with_evidence = sum(1 for n in streams if n >= 1)
        return EvaluationResult(
            badge.key, with_evidence, badge.requirement_value, with_evidence == len(streams)
        )

    def evaluate_combo(self, sources: SqlSources, user_id: str, trip_id: str) -> bool:
        """True iff every constituent stream has evidence for this trip in one pass."""
        ev = self.gather(sources, user_id, trip_id)
        return all(n >= 1 for n in ev.streams.values())


DARE = DareEvaluator()
CHECKLIST = ChecklistEvaluator()
INVITATION = InvitationEvaluator()
COMBO = ComboEvaluator(DARE, CHECKLIST, INVITATION)

EVALUATORS: dict[BadgeFamily, FamilyEvaluator] = {
    BadgeFamily.dare: DARE,
    BadgeFamily.checklist: CHECKLIST,
    BadgeFamily.invitation: INVITATION,
    BadgeFamily.combo: COMBO,
}

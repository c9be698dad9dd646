"""
Evidence records: one statically shaped variant per badge family.

Each evaluator gathers exactly one of these per invocation; every badge in
the family is then measured against the same record, so tiers (1 / 3 / 5 /
all dares) share one source query.

`to_snapshot()` is what gets stored in `badge_progress.evidence` and
`user_badges.progress_snapshot`. The `kind` tag lets readers parse the blob
back into the right shape (see app/schemas/badge.py).
"""
from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Literal, Optional, Union


@dataclass(frozen=True)
class DareEvidence:
    completed: int          # tracked dares with completed_at set
    total: int              # tracked dares, completed or not
    hard_completed: int     # completed dares with difficulty "hard"
    kind: Literal["dare"] = field(default="dare")


@dataclass(frozen=True)
class ChecklistEvidence:
    total_items: int
    completed_items: int
    completed_trips: int                # trips with a 100 % checklist (cross-trip)
    starts_at: Optional[datetime]       # trip start, None when unknown
    kind: Literal["checklist"] = field(default="checklist")

    @property
    def is_complete(self) -> bool:
        return self.total_items > 0 and self.completed_items >= self.total_items


@dataclass(frozen=True)
class InvitationEvidence:
    sent: int
    accepted: int
    accepted_all_trips: int             # accepted over every trip the user owns
    kind: Literal["invitation"] = field(default="invitation")


@dataclass(frozen=True)
class ComboEvidence:
    dares: int
    checklist_items: int
    invitations: int
    kind: Literal["combo"] = field(default="combo")

    @property
    def streams(self) -> dict[str, int]:
        return {
            "dare": self.dares,
            "checklist": self.checklist_items,
            "invitation": self.invitations,
        }


Evidence = Union[DareEvidence, ChecklistEvidence, InvitationEvidence, ComboEvidence]


def to_snapshot(evidence: Evidence, **extra: Any) -> str:
    """JSON-encode an evidence record, merging display extras (trip_id, counts)."""
    payload = asdict(evidence)
    payload.update(extra)
    return json.dumps(payload, default=str)


def parse_snapshot(raw: Optional[str]) -> Optional[dict[str, Any]]:
    if not raw:
        return None
    try:
        return json.loads(raw)
    except (ValueError, TypeError):
        return None

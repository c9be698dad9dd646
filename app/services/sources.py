"""
Source collaborators: read-only queries against tables owned by the
bucket-list, checklist, trip and invitation subsystems.

The engine never trusts its own counters; every evaluation calls one of
these to get the current authoritative state.

Public API
----------
SqlSources(db).completion_records(user_id, trip_id)     -> list[CompletionRecord]
SqlSources(db).checklist_state(user_id, trip_id)        -> ChecklistState
SqlSources(db).completed_checklist_trips(user_id)       -> int
SqlSources(db).trip_window(trip_id)                     -> TripWindow | None
SqlSources(db).invitation_records(user_id, trip_id)     -> list[InvitationRecord]

Any SQLAlchemyError is re-raised as SourceUnavailableError so the
dispatcher can abandon just that family.
"""
from __future__ import annotations

import functools
from dataclasses import dataclass
from datetime import datetime, time, timezone
from typing import Optional

from sqlalchemy import select, func, case
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import SourceUnavailableError
from app.models.bucket import BucketListItem, UserBucketProgress
from app.models.checklist import ChecklistItem
from app.models.invitation import InvitationStatus, TripInvitation
from app.models.trip import Trip


# ---------------------------------------------------------------------------
# Record types
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CompletionRecord:
    completed_at: Optional[datetime]
    difficulty: Optional[str] = None

    @property
    def is_completed(self) -> bool:
        return self.completed_at is not None


@dataclass(frozen=True)
class ChecklistState:
    total_items: int
    completed_items: int


@dataclass(frozen=True)
class TripWindow:
    starts_at: datetime


@dataclass(frozen=True)
class InvitationRecord:
    status: str

    @property
    def is_accepted(self) -> bool:
        return self.status == InvitationStatus.accepted.value


def _source(family: str, name: str):
    """Translate database failures into SourceUnavailableError."""
    def decorator(fn):
        @functools.wraps(fn)
        def wrapper(*args, **kwargs):
            try:
                return fn(*args, **kwargs)
            except SQLAlchemyError as exc:
                raise SourceUnavailableError(family, name, reason=type(exc).__name__) from exc
        return wrapper
    return decorator


# ---------------------------------------------------------------------------
# SQL-backed collaborators
# ---------------------------------------------------------------------------

class SqlSources:
    def __init__(self, db: Session):
        self.db = db

    @_source("dare", "completion_records")
    def completion_records(self, user_id: str, trip_id: str) -> list[CompletionRecord]:
        rows = self.db.execute(
            select(UserBucketProgress.completed_at, BucketListItem.difficulty_level)
            .join(BucketListItem, BucketListItem.id == UserBucketProgress.bucket_item_id, isouter=True)
            .where(
                UserBucketProgress.user_id == user_id,
                UserBucketProgress.trip_id == trip_id,
            )
        ).all()
        return [CompletionRecord(completed_at=r[0], difficulty=r[1]) for r in rows]

    @_source("checklist", "checklist_state")
    def checklist_state(self, user_id: str, trip_id: str) -> ChecklistState:
        total, completed = self.db.execute(
            select(
                func.count(ChecklistItem.id),
                func.coalesce(func.sum(case((ChecklistItem.is_completed.is_(True), 1), else_=0)), 0),
            ).where(
                ChecklistItem.user_id == user_id,
                ChecklistItem.trip_id == trip_id,
            )
        ).one()
        return ChecklistState(total_items=int(total or 0), completed_items=int(completed or 0))

    @_source("checklist", "completed_checklist_trips")
    def completed_checklist_trips(self, user_id: str) -> int:
        per_trip = (
            select(
                ChecklistItem.trip_id,
                func.count(ChecklistItem.id).label("total"),
                func.sum(case((ChecklistItem.is_completed.is_(True), 1), else_=0)).label("done"),
            )
            .where(ChecklistItem.user_id == user_id)
            .group_by(ChecklistItem.trip_id)
            .subquery()
        )
        n = self.db.execute(
            select(func.count())
            .select_from(per_trip)
            .where(per_trip.c.total > 0, per_trip.c.done >= per_trip.c.total)
        ).scalar_one()
        return int(n or 0)

    @_source("checklist", "trip_window")
    def trip_window(self, trip_id: str) -> Optional[TripWindow]:
        start = self.db.execute(
            select(Trip.start_date).where(Trip.id == trip_id)
        ).scalar_one_or_none()
        if start is None:
            return None
        # Trips carry a calendar date; the window opens at midnight UTC.
        return TripWindow(starts_at=datetime.combine(start, time.min, tzinfo=timezone.utc))

    @_source("invitation", "invitation_records")
    def invitation_records(
        self, user_id: str, trip_id: Optional[str] = None
    ) -> list[InvitationRecord]:
        q = select(TripInvitation.status).where(TripInvitation.inviter_id == user_id)
        if trip_id is not None:
            q = q.where(TripInvitation.trip_id == trip_id)
        else:
            # Cross-trip aggregate: every trip the user owns.
            q = q.join(Trip, Trip.id == TripInvitation.trip_id).where(Trip.user_id == user_id)
        return [InvitationRecord(status=_status_value(s)) for s in self.db.execute(q).scalars()]


def _status_value(v) -> str:
    return v.value if hasattr(v, "value") else str(v)

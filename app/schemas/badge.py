"""
Badge read-API schemas.

GET /badges                     → list[BadgeResponse]
GET /users/{id}/badges          → UserBadgeListResponse
GET /users/{id}/progress        → ProgressListResponse

Evidence blobs are parsed into a discriminated union on `kind`, one shape
per badge family.
"""
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class BadgeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    key: str
    name: str
    description: str
    emoji: Optional[str] = None
    category: str
    family: str
    requirement_type: str = Field(
        description='"count_threshold" | "percentage_threshold" | "time_relative" | "compound_all_of"'
    )
    requirement_value: int
    scope: str = Field(description='"global" | "per_trip"')


# ---------------------------------------------------------------------------
# Evidence snapshots
# ---------------------------------------------------------------------------

class _SnapshotBase(BaseModel):
    trip_id: Optional[str] = None
    current_count: Optional[int] = None
    target_count: Optional[int] = None


class DareSnapshot(_SnapshotBase):
    kind: Literal["dare"]
    completed: int
    total: int
    hard_completed: int


class ChecklistSnapshot(_SnapshotBase):
    kind: Literal["checklist"]
    total_items: int
    completed_items: int
    completed_trips: int
    starts_at: Optional[str] = None


class InvitationSnapshot(_SnapshotBase):
    kind: Literal["invitation"]
    sent: int
    accepted: int
    accepted_all_trips: int


class ComboSnapshot(_SnapshotBase):
    kind: Literal["combo"]
    dares: int
    checklist_items: int
    invitations: int


Snapshot = Annotated[
    Union[DareSnapshot, ChecklistSnapshot, InvitationSnapshot, ComboSnapshot],
    Field(discriminator="kind"),
]


# ---------------------------------------------------------------------------
# Awards and progress
# ---------------------------------------------------------------------------

class UserBadgeResponse(BaseModel):
    id: int
    user_id: str
    trip_id: Optional[str] = None
    earned_at: str
    badge: BadgeResponse
    progress_snapshot: Optional[Snapshot] = None


class UserBadgeListResponse(BaseModel):
    total: int
    items: list[UserBadgeResponse]


class ProgressResponse(BaseModel):
    user_id: str
    trip_id: Optional[str] = None
    current_count: int
    target_count: int
    state: str = Field(description='"not_started" | "in_progress" | "earned"')
    badge: BadgeResponse
    evidence: Optional[Snapshot] = None


class ProgressListResponse(BaseModel):
    total: int
    items: list[ProgressResponse]

"""
Per-user badge router (read-only, for the badge grid / modals).

GET /users/{user_id}/badges     earned badges, newest first
GET /users/{user_id}/progress   progress rows with state
"""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.db.base import get_db
from app.routers.serializers import progress_to_response, user_badge_to_response
from app.schemas.badge import ProgressListResponse, UserBadgeListResponse
from app.services.awarding import list_user_badges
from app.services.progress import list_progress

router = APIRouter(prefix="/users", tags=["users"])

_TRIP_QUERY = Query(
    default=None,
    description="Restrict to one trip. Omit to include global badges and every trip.",
)


@router.get(
    "/{user_id}/badges",
    response_model=UserBadgeListResponse,
    summary="Badges a user has earned",
)
def user_badges(
    user_id: str,
    trip_id: Optional[str] = _TRIP_QUERY,
    db: Session = Depends(get_db),
):
    items = list_user_badges(db, user_id, trip_id=trip_id)
    return UserBadgeListResponse(
        total=len(items),
        items=[user_badge_to_response(ub) for ub in items],
    )


@router.get(
    "/{user_id}/progress",
    response_model=ProgressListResponse,
    summary="Progress toward every evaluated badge",
)
def user_progress(
    user_id: str,
    trip_id: Optional[str] = _TRIP_QUERY,
    db: Session = Depends(get_db),
):
    """
    `state` is derived per row:

    | State | Meaning |
    |---|---|
    | `not_started` | evaluated, no evidence yet |
    | `in_progress` | some evidence, no award |
    | `earned`      | award exists (terminal) |
    """
    views = list_progress(db, user_id, trip_id=trip_id)
    return ProgressListResponse(
        total=len(views),
        items=[progress_to_response(v) for v in views],
    )

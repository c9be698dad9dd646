"""
Badge catalog router.

GET /badges          full catalog, optionally filtered by category
GET /badges/{key}    one badge (404 BADGE_NOT_FOUND)
"""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.db.base import get_db
from app.routers.serializers import badge_to_response
from app.schemas.badge import BadgeResponse
from app.services.catalog import get_badge, list_badges

router = APIRouter(prefix="/badges", tags=["badges"])


@router.get(
    "",
    response_model=list[BadgeResponse],
    summary="List the badge catalog",
)
def list_catalog(
    category: Optional[str] = Query(
        default=None,
        description='Display category: "dares", "checklist", "social", "combo". Omit for all.',
        examples=["dares"],
    ),
    db: Session = Depends(get_db),
):
    """Return every badge, ordered by category then key."""
    return [badge_to_response(b) for b in list_badges(db, category=category)]


@router.get(
    "/{key}",
    response_model=BadgeResponse,
    summary="Get one badge by key",
    responses={404: {"description": "No badge with that key."}},
)
def get_catalog_badge(key: str, db: Session = Depends(get_db)):
    return badge_to_response(get_badge(db, key))

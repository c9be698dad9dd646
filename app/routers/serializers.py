"""
ORM → response conversions shared by the badge routers.
"""
from __future__ import annotations

from app.models.badge import Badge
from app.models.user_badge import UserBadge
from app.schemas.badge import BadgeResponse, ProgressResponse, UserBadgeResponse
from app.services.evidence import parse_snapshot
from app.services.progress import ProgressView


def _ev(v) -> str:
    return v.value if hasattr(v, "value") else str(v)


def badge_to_response(b: Badge) -> BadgeResponse:
    return BadgeResponse(
        key=b.key,
        name=b.name,
        description=b.description or "",
        emoji=b.emoji,
        category=b.category,
        family=_ev(b.family),
        requirement_type=_ev(b.requirement_type),
        requirement_value=b.requirement_value,
        scope=_ev(b.scope),
    )


def user_badge_to_response(ub: UserBadge) -> UserBadgeResponse:
    return UserBadgeResponse(
        id=ub.id,
        user_id=ub.user_id,
        trip_id=ub.trip_id,
        earned_at=ub.earned_at.isoformat() if ub.earned_at else "",
        badge=badge_to_response(ub.badge),
        progress_snapshot=parse_snapshot(ub.progress_snapshot),
    )


def progress_to_response(view: ProgressView) -> ProgressResponse:
    p = view.progress
    return ProgressResponse(
        user_id=p.user_id,
        trip_id=p.trip_id,
        current_count=p.current_count,
        target_count=p.target_count,
        state=view.state.value,
        badge=badge_to_response(view.badge),
        evidence=parse_snapshot(p.evidence),
    )

"""
Badge catalog: read-only access to the `badges` table.

Public API
----------
get_badge(db, key)                 -> Badge        (raises BadgeNotFoundError)
list_badges(db, category=None)     -> list[Badge]
seed_badges(db)                    -> int          (rows inserted or refreshed)

BADGE_SEEDS is the canonical catalog. Migration 0001 inserts the same rows;
`seed_badges` exists for tests and for re-syncing display metadata.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.errors import BadgeNotFoundError
from app.models.badge import Badge, BadgeFamily, BadgeScope, RequirementType


@dataclass(frozen=True)
class BadgeSeed:
    key: str
    name: str
    description: str
    emoji: str
    category: str
    family: BadgeFamily
    requirement_type: RequirementType
    requirement_value: int
    scope: BadgeScope = BadgeScope.per_trip


_COUNT = RequirementType.count_threshold
_PCT = RequirementType.percentage_threshold

BADGE_SEEDS: tuple[BadgeSeed, ...] = (
    # ---- Dares / bucket list ----
    BadgeSeed("daredevil", "Daredevil", "Complete your first dare", "🎯",
              "dares", BadgeFamily.dare, _COUNT, 1),
    BadgeSeed("on_a_roll", "On a Roll", "Complete 3 dares on one trip", "🔥",
              "dares", BadgeFamily.dare, _COUNT, 3),
    BadgeSeed("bucket_champion", "Bucket Champion", "Complete 5 dares on one trip", "🏆",
              "dares", BadgeFamily.dare, _COUNT, 5),
    BadgeSeed("bucket_legend", "Bucket Legend", "Complete every dare on your trip list", "👑",
              "dares", BadgeFamily.dare, _PCT, 100),
    BadgeSeed("no_fear", "No Fear", "Complete a hard dare", "😈",
              "dares", BadgeFamily.dare, _COUNT, 1),

    # ---- Checklist ----
    BadgeSeed("checklist_conqueror", "Checklist Conqueror", "Tick off your whole checklist", "✅",
              "checklist", BadgeFamily.checklist, _PCT, 100),
    BadgeSeed("detail_oriented", "Detail-Oriented", "Build a checklist with 15 or more items", "🔍",
              "checklist", BadgeFamily.checklist, _COUNT, 15),
    BadgeSeed("prepared_pro", "Prepared Pro", "Finish your checklist 3 days before the trip", "🧳",
              "checklist", BadgeFamily.checklist, RequirementType.time_relative, 3),
    BadgeSeed("checklist_master", "Checklist Master", "Finish the checklist on 5 different trips", "📋",
              "checklist", BadgeFamily.checklist, _COUNT, 5, BadgeScope.global_),

    # ---- Invitations ----
    BadgeSeed("social_explorer", "Social Explorer", "Invite your first travel buddy", "👋",
              "social", BadgeFamily.invitation, _COUNT, 1),
    BadgeSeed("travel_crew", "Travel Crew", "Invite 3 people to one trip", "👥",
              "social", BadgeFamily.invitation, _COUNT, 3),
    BadgeSeed("squad_goals", "Squad Goals", "Get 3 invitations accepted on one trip", "🤝",
              "social", BadgeFamily.invitation, _COUNT, 3),
    BadgeSeed("referral_master", "Referral Master", "Get 5 invitations accepted across your trips", "🌟",
              "social", BadgeFamily.invitation, _COUNT, 5, BadgeScope.global_),

    # ---- Combo ----
    BadgeSeed("world_builder", "World Builder",
              "Complete a dare, tick a checklist item and invite someone on the same trip", "🌍",
              "combo", BadgeFamily.combo, RequirementType.compound_all_of, 3),
)


def get_badge(db: Session, key: str) -> Badge:
    badge = db.execute(select(Badge).where(Badge.key == key)).scalar_one_or_none()
    if badge is None:
        raise BadgeNotFoundError(key)
    return badge


def list_badges(db: Session, category: Optional[str] = None) -> list[Badge]:
    q = select(Badge)
    if category:
        q = q.where(Badge.category == category)
    return list(db.execute(q.order_by(Badge.category, Badge.key)).scalars())


def seed_badges(db: Session) -> int:
    """Insert missing catalog rows and refresh display metadata. Commits."""
    existing = {b.key: b for b in db.execute(select(Badge)).scalars()}
    touched = 0
    for seed in BADGE_SEEDS:
        row = existing.get(seed.key)
        if row is None:
            row = Badge(key=seed.key)
            db.add(row)
        row.name = seed.name
        row.description = seed.description
        row.emoji = seed.emoji
        row.category = seed.category
        row.family = seed.family
        row.requirement_type = seed.requirement_type
        row.requirement_value = seed.requirement_value
        row.scope = seed.scope
        touched += 1
    db.commit()
    return touched

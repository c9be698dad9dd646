"""
Badge: catalog of achievements.

Seeded once (migration 0001 / `app.services.catalog.seed_badges`) and
read-only at runtime. `family` says which evaluator measures the badge;
`category` is display grouping only.
"""
import enum
from datetime import datetime

from sqlalchemy import Integer, String, Text, DateTime, Enum, func
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


class RequirementType(str, enum.Enum):
    count_threshold = "count_threshold"
    percentage_threshold = "percentage_threshold"
    time_relative = "time_relative"
    compound_all_of = "compound_all_of"


class BadgeScope(str, enum.Enum):
    global_ = "global"
    per_trip = "per_trip"


class BadgeFamily(str, enum.Enum):
    dare = "dare"
    checklist = "checklist"
    invitation = "invitation"
    combo = "combo"


class Badge(Base):
    __tablename__ = "badges"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    key: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    emoji: Mapped[str | None] = mapped_column(String(16), nullable=True)
    category: Mapped[str] = mapped_column(String(64), nullable=False)
    family: Mapped[str] = mapped_column(
        Enum(BadgeFamily, name="badge_family_enum", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    requirement_type: Mapped[str] = mapped_column(
        Enum(RequirementType, name="requirement_type_enum", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    requirement_value: Mapped[int] = mapped_column(Integer, nullable=False)
    scope: Mapped[str] = mapped_column(
        Enum(BadgeScope, name="badge_scope_enum", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=BadgeScope.per_trip,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    @property
    def is_per_trip(self) -> bool:
        return BadgeScope(self.scope) is BadgeScope.per_trip

"""
UserBadge: the permanent record that a badge was earned.

Exactly one row per (user_id, badge_key, scope_key), enforced by the unique
constraint below. Rows are inserted once by app/services/awarding.py and
never updated or deleted by the engine, even if the evidence is retracted.
"""
from datetime import datetime

from sqlalchemy import Integer, String, Text, DateTime, ForeignKey, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base
from app.models.badge import Badge


class UserBadge(Base):
    __tablename__ = "user_badges"
    __table_args__ = (
        UniqueConstraint("user_id", "badge_key", "scope_key", name="uq_user_badges_user_badge_scope"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    badge_key: Mapped[str] = mapped_column(
        String(64), ForeignKey("badges.key", ondelete="CASCADE"), nullable=False
    )
    trip_id: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)
    scope_key: Mapped[str] = mapped_column(String(64), nullable=False)
    progress_snapshot: Mapped[str | None] = mapped_column(
        Text, nullable=True,
        comment="JSON-encoded evidence captured at the moment of the award",
    )
    earned_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    badge: Mapped[Badge] = relationship(Badge, lazy="joined")

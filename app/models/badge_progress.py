"""
BadgeProgress: latest recomputed evidence toward a badge.

One row per (user_id, badge_key, scope_key). `current_count` is overwritten
on every evaluation with a value derived fresh from the source tables; it
is never incremented. `evidence` is the JSON-encoded tagged snapshot the
evaluator produced (see app/services/evidence.py).
"""
from datetime import datetime

from sqlalchemy import Integer, String, Text, DateTime, ForeignKey, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


class BadgeProgress(Base):
    __tablename__ = "badge_progress"
    __table_args__ = (
        UniqueConstraint("user_id", "badge_key", "scope_key", name="uq_badge_progress_user_badge_scope"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    badge_key: Mapped[str] = mapped_column(
        String(64), ForeignKey("badges.key", ondelete="CASCADE"), nullable=False
    )
    trip_id: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)
    scope_key: Mapped[str] = mapped_column(String(64), nullable=False)
    current_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    target_count: Mapped[int] = mapped_column(Integer, nullable=False)
    evidence: Mapped[str | None] = mapped_column(
        Text, nullable=True,
        comment="JSON-encoded evidence snapshot tagged by family kind",
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

"""
Bucket-list ("dare") tables: owned by the bucket-list subsystem.

bucket_list_items     the dare catalog per destination
user_bucket_progress  one row per dare a user tracks on a trip;
                        completed when `completed_at` is set
"""
from datetime import datetime
from sqlalchemy import Integer, String, Text, DateTime, ForeignKey, func
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


class BucketListItem(Base):
    __tablename__ = "bucket_list_items"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    title: Mapped[str] = mapped_column(String(256), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    city: Mapped[str] = mapped_column(String(128), nullable=False, default="")
    category: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    # "Easy" | "Medium" | "Hard"
    difficulty_level: Mapped[str] = mapped_column(String(32), nullable=False, default="Easy")


class UserBucketProgress(Base):
    __tablename__ = "user_bucket_progress"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    trip_id: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)
    bucket_item_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("bucket_list_items.id"), nullable=False
    )
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    rating: Mapped[int | None] = mapped_column(Integer, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

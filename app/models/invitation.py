import enum
from datetime import datetime
from sqlalchemy import Integer, String, DateTime, Enum, func
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


class InvitationStatus(str, enum.Enum):
    pending = "pending"
    accepted = "accepted"
    declined = "declined"
    expired = "expired"


class TripInvitation(Base):
    """Invitation to join a trip. Owned by the invitation subsystem."""

    __tablename__ = "trip_invitations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    trip_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    inviter_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    invitee_email: Mapped[str] = mapped_column(String(256), nullable=False)
    status: Mapped[str] = mapped_column(
        Enum(InvitationStatus, name="invitation_status_enum"),
        nullable=False,
        default=InvitationStatus.pending,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    responded_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

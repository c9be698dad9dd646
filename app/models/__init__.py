from .badge import Badge, BadgeFamily, BadgeScope, RequirementType
from .badge_progress import BadgeProgress
from .user_badge import UserBadge
from .trip import Trip
from .bucket import BucketListItem, UserBucketProgress
from .checklist import ChecklistItem
from .invitation import TripInvitation, InvitationStatus

__all__ = [
    "Badge",
    "BadgeFamily",
    "BadgeScope",
    "RequirementType",
    "BadgeProgress",
    "UserBadge",
    "Trip",
    "BucketListItem",
    "UserBucketProgress",
    "ChecklistItem",
    "TripInvitation",
    "InvitationStatus",
]

"""
Scope key shared by `badge_progress` and `user_badges`.

Unique constraints treat NULLs as distinct, so a nullable trip_id cannot
back the (user, badge, trip-or-null) uniqueness on its own. Both tables
store a non-null `scope_key`: the trip id for per-trip badges, GLOBAL_SCOPE
otherwise.
"""
from typing import Optional

GLOBAL_SCOPE = "global"


def scope_key_for(trip_id: Optional[str]) -> str:
    return trip_id if trip_id else GLOBAL_SCOPE

"""
Checklist family.

Covered:
  - checklist_conqueror at 100 %, not at 99 %
  - empty checklist is zero progress, not a failure
  - detail_oriented at 15 items
  - prepared_pro: exactly 3 days before start awards, 2d23h does not,
    incomplete checklist never does, unknown start date never does
  - checklist_master is global (trip_id NULL) after 5 finished trips
"""
from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

from sqlalchemy import select

from app.models.badge_progress import BadgeProgress
from app.models.user_badge import UserBadge
from app.services.dispatcher import check_checklist_badges

TRIP_START = date(2031, 6, 10)
START_AT = datetime(2031, 6, 10, tzinfo=timezone.utc)
FAR_BEFORE = START_AT - timedelta(days=30)


def _earned(db, user_id: str, trip_id: str | None = None) -> set[str]:
    q = select(UserBadge.badge_key).where(UserBadge.user_id == user_id)
    if trip_id:
        q = q.where(UserBadge.trip_id == trip_id)
    return set(db.execute(q).scalars())


class TestCompletion:
    def test_full_checklist_conquers(self, db, seed, user_id):
        trip = seed.trip(user_id, TRIP_START)
        seed.checklist(user_id, trip, total=4, completed=4)
        check_checklist_badges(db, user_id, trip, now=FAR_BEFORE)
        assert "checklist_conqueror" in _earned(db, user_id)

    def test_almost_full_checklist_does_not(self, db, seed, user_id):
        trip = seed.trip(user_id, TRIP_START)
        seed.checklist(user_id, trip, total=100, completed=99)
        check_checklist_badges(db, user_id, trip, now=FAR_BEFORE)
        assert "checklist_conqueror" not in _earned(db, user_id)
        p = db.execute(
            select(BadgeProgress).where(
                BadgeProgress.user_id == user_id,
                BadgeProgress.badge_key == "checklist_conqueror",
            )
        ).scalar_one()
        assert p.current_count == 99

    def test_empty_checklist_is_zero_not_fault(self, db, seed, user_id):
        trip = seed.trip(user_id, TRIP_START)
        result = check_checklist_badges(db, user_id, trip, now=FAR_BEFORE)
        assert result.failed is False
        assert _earned(db, user_id) == set()

    def test_detail_oriented_counts_items(self, db, seed, user_id):
        trip = seed.trip(user_id, TRIP_START)
        seed.checklist(user_id, trip, total=14, completed=0)
        check_checklist_badges(db, user_id, trip, now=FAR_BEFORE)
        assert "detail_oriented" not in _earned(db, user_id)

        seed.checklist(user_id, trip, total=1, completed=0)
        check_checklist_badges(db, user_id, trip, now=FAR_BEFORE)
        assert "detail_oriented" in _earned(db, user_id)


class TestPreparedPro:
    def test_exactly_three_days_before_awards(self, db, seed, user_id):
        trip = seed.trip(user_id, TRIP_START)
        seed.checklist(user_id, trip, total=3, completed=3)
        check_checklist_badges(db, user_id, trip, now=START_AT - timedelta(days=3))
        assert "prepared_pro" in _earned(db, user_id, trip)

    def test_two_days_twenty_three_hours_does_not(self, db, seed, user_id):
        trip = seed.trip(user_id, TRIP_START)
        seed.checklist(user_id, trip, total=3, completed=3)
        check_checklist_badges(
            db, user_id, trip, now=START_AT - timedelta(days=2, hours=23)
        )
        earned = _earned(db, user_id, trip)
        assert "prepared_pro" not in earned
        assert "checklist_conqueror" in earned

    def test_window_missed_is_permanent(self, db, seed, user_id):
        trip = seed.trip(user_id, TRIP_START)
        items = seed.checklist(user_id, trip, total=2, completed=1)
        check_checklist_badges(db, user_id, trip, now=START_AT - timedelta(days=10))
        assert "prepared_pro" not in _earned(db, user_id, trip)

        seed.tick(items[1])
        check_checklist_badges(db, user_id, trip, now=START_AT - timedelta(days=1))
        assert "prepared_pro" not in _earned(db, user_id, trip)

    def test_lead_days_recorded_in_progress(self, db, seed, user_id):
        trip = seed.trip(user_id, TRIP_START)
        seed.checklist(user_id, trip, total=1, completed=1)
        check_checklist_badges(db, user_id, trip, now=START_AT - timedelta(days=5, hours=6))
        p = db.execute(
            select(BadgeProgress).where(
                BadgeProgress.user_id == user_id,
                BadgeProgress.badge_key == "prepared_pro",
            )
        ).scalar_one()
        assert p.current_count == 5
        assert p.target_count == 3

    def test_trip_without_start_date(self, db, seed, user_id):
        trip = seed.trip(user_id, None)
        seed.checklist(user_id, trip, total=1, completed=1)
        result = check_checklist_badges(db, user_id, trip, now=FAR_BEFORE)
        assert result.failed is False
        assert "prepared_pro" not in _earned(db, user_id, trip)


class TestChecklistMaster:
    def test_global_after_five_finished_trips(self, db, seed, user_id):
        trips = [seed.trip(user_id, TRIP_START) for _ in range(5)]
        for trip in trips[:4]:
            seed.checklist(user_id, trip, total=2, completed=2)
        last = seed.checklist(user_id, trips[4], total=2, completed=1)
        check_checklist_badges(db, user_id, trips[4], now=FAR_BEFORE)
        assert "checklist_master" not in _earned(db, user_id)

        seed.tick(last[1])
        check_checklist_badges(db, user_id, trips[4], now=FAR_BEFORE)

        award = db.execute(
            select(UserBadge).where(
                UserBadge.user_id == user_id, UserBadge.badge_key == "checklist_master"
            )
        ).scalar_one()
        assert award.trip_id is None
        assert award.scope_key == "global"

    def test_global_award_not_repeated_from_another_trip(self, db, seed, user_id):
        trips = [seed.trip(user_id, TRIP_START) for _ in range(6)]
        for trip in trips:
            seed.checklist(user_id, trip, total=1, completed=1)
        check_checklist_badges(db, user_id, trips[0], now=FAR_BEFORE)
        result = check_checklist_badges(db, user_id, trips[5], now=FAR_BEFORE)
        assert "checklist_master" in result.already_earned
        n = db.execute(
            select(UserBadge.id).where(
                UserBadge.user_id == user_id, UserBadge.badge_key == "checklist_master"
            )
        ).scalars().all()
        assert len(n) == 1

"""
Shared pytest fixtures.

Uses a file-backed SQLite database so no Postgres is required for tests.
Every test works on fresh uuid user/trip ids, so tests never see each
other's rows even though the database is shared for the whole session.
"""
import uuid
from datetime import date, datetime, timezone
from typing import Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.db.base import Base, get_db
from app.main import app
import app.models as _models  # noqa: F401
from app.models.bucket import BucketListItem, UserBucketProgress
from app.models.checklist import ChecklistItem
from app.models.invitation import InvitationStatus, TripInvitation
from app.models.trip import Trip
from app.services.catalog import seed_badges

SQLITE_URL = "sqlite:///./test_badges.db"

engine = create_engine(SQLITE_URL, connect_args={"check_same_thread": False, "timeout": 30})


TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(scope="session", autouse=True)
def create_tables():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    # Catalog is normally seeded by migration 0001
    db = TestingSessionLocal()
    try:
        seed_badges(db)
    finally:
        db.close()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def session_factory():
    return TestingSessionLocal


@pytest.fixture()
def client(db):
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def new_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


@pytest.fixture()
def user_id() -> str:
    return new_id("user")


# ---------------------------------------------------------------------------
# Collaborator data: what the dare / checklist / invitation subsystems
# would have written before calling a trigger.
# ---------------------------------------------------------------------------

class Seeder:
    def __init__(self, db):
        self.db = db

    def trip(self, owner_id: str, start_date: Optional[date] = None) -> str:
        trip_id = new_id("trip")
        self.db.add(Trip(
            id=trip_id, user_id=owner_id, destination="Lisbon", start_date=start_date,
        ))
        self.db.commit()
        return trip_id

    def dares(
        self, user_id: str, trip_id: str, n: int, difficulty: str = "Easy"
    ) -> list[UserBucketProgress]:
        rows = []
        for i in range(n):
            item = BucketListItem(
                id=new_id("dare"), title=f"Dare {i}", difficulty_level=difficulty,
            )
            self.db.add(item)
            rows.append(UserBucketProgress(
                user_id=user_id, trip_id=trip_id, bucket_item_id=item.id,
            ))
        self.db.add_all(rows)
        self.db.commit()
        return rows

    def complete(self, *rows: UserBucketProgress) -> None:
        for row in rows:
            row.completed_at = datetime.now(tz=timezone.utc)
        self.db.commit()

    def uncomplete(self, *rows: UserBucketProgress) -> None:
        for row in rows:
            row.completed_at = None
        self.db.commit()

    def checklist(
        self, user_id: str, trip_id: str, total: int, completed: int
    ) -> list[ChecklistItem]:
        rows = [
            ChecklistItem(
                user_id=user_id, trip_id=trip_id, category="Packing",
                description=f"Item {i}", is_completed=i < completed,
            )
            for i in range(total)
        ]
        self.db.add_all(rows)
        self.db.commit()
        return rows

    def tick(self, *rows: ChecklistItem) -> None:
        for row in rows:
            row.is_completed = True
        self.db.commit()

    def invitations(
        self, inviter_id: str, trip_id: str, sent: int, accepted: int = 0
    ) -> list[TripInvitation]:
        rows = [
            TripInvitation(
                trip_id=trip_id,
                inviter_id=inviter_id,
                invitee_email=f"{new_id('friend')}@example.com",
                status=InvitationStatus.accepted if i < accepted else InvitationStatus.pending,
            )
            for i in range(sent)
        ]
        self.db.add_all(rows)
        self.db.commit()
        return rows


@pytest.fixture()
def seed(db) -> Seeder:
    return Seeder(db)

"""Factories and a pinned calendar shared by the test modules."""
from dataclasses import dataclass
from datetime import date, datetime

from app.models.activity import Activity, Frequency
from app.models.user import User
from app.services.periods import Calendar

# Friday
FIXED_NOW = datetime(2024, 3, 15, 10, 30)


@dataclass(frozen=True)
class FixedCalendar(Calendar):
    """Calendar pinned to a known instant."""
    fixed: datetime = FIXED_NOW

    def now(self) -> datetime:
        return self.fixed

    def today(self) -> date:
        return self.fixed.date()


def register_and_login(client, email="ana@example.com", password="s3cret-pass") -> dict:
    """Create a user through the API and return bearer auth headers."""
    r = client.post("/auth/register", json={"email": email, "password": password})
    assert r.status_code == 201, r.text
    r = client.post("/auth/login", json={"email": email, "password": password})
    assert r.status_code == 200, r.text
    return {"Authorization": f"Bearer {r.json()['access_token']}"}


def make_user(db, email="user@example.com") -> User:
    user = User(email=email, password_hash="x")
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def make_activity(db, user, title="Activity", frequency=Frequency.DAILY, **fields) -> Activity:
    activity = Activity(user_id=user.id, title=title, frequency=frequency, **fields)
    db.add(activity)
    db.commit()
    db.refresh(activity)
    return activity

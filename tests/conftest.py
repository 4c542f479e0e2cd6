"""
Shared pytest fixtures for capsule tests.

Provides a recording notifier and a fixed clock so unlock cycles run
without SMTP or wall-clock waits.
"""

from datetime import datetime, timedelta, timezone as dt_timezone
from itertools import count

import pytest

from capsules.models import Capsule, CapsuleType, MemoryEntry
from capsules.scheduler import UnlockScheduler
from capsules.store import CapsuleStore
from userauth.models import User


NOW = datetime(2026, 3, 1, 12, 0, tzinfo=dt_timezone.utc)


class FakeNotifier:
    """Records every send; addresses in ``failing`` report failure."""

    def __init__(self, failing=(), raising=()):
        self.failing = set(failing)
        self.raising = set(raising)
        self.sent = []

    def send(self, recipient_address, subject, body):
        self.sent.append((recipient_address, subject, body))
        if recipient_address in self.raising:
            raise ConnectionError(f"smtp down for {recipient_address}")
        return recipient_address not in self.failing

    @property
    def addresses(self):
        return [address for address, _, _ in self.sent]


class FixedClock:
    def __init__(self, now=NOW):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture(autouse=True)
def local_cache(settings):
    """Tests run without a Redis server; the cycle lock lives in process memory."""
    settings.CACHES = {
        "default": {
            "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
            "LOCATION": "timecapsule-tests",
        }
    }


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def store():
    return CapsuleStore()


@pytest.fixture
def scheduler(store, notifier, clock):
    return UnlockScheduler(store=store, notifier=notifier, clock=clock, interval=1)


@pytest.fixture
def make_user(db):
    counter = count(1)

    def factory(name=None, email=None):
        n = next(counter)
        name = name or f"User {n}"
        email = email or f"user{n}@example.com"
        return User.objects.create_user(email=email, password="Passw0rd!x", name=name)

    return factory


@pytest.fixture
def make_personal(make_user):
    def factory(lock_date, creator=None, title="My capsule", notified=False):
        creator = creator or make_user()
        return Capsule.objects.create(
            title=title,
            type=CapsuleType.PERSONAL,
            created_by=creator,
            lock_date=lock_date,
            notified=notified,
        )

    return factory


@pytest.fixture
def make_collaborative(make_user):
    def factory(members=None, title="Our capsule", snapshot=True, creator=None):
        creator = creator or make_user()
        members = list(members) if members is not None else [creator]
        capsule = Capsule.objects.create(
            title=title,
            type=CapsuleType.COLLABORATIVE,
            created_by=creator,
        )
        capsule.members.set(members)
        if snapshot:
            capsule.member_details = [{"name": m.name, "email": m.email} for m in members]
            capsule.save()
        return capsule

    return factory


@pytest.fixture
def add_entry():
    def factory(capsule, lock_date, author=None, content="a memory", notified=False):
        author = author or capsule.created_by
        return MemoryEntry.objects.create(
            capsule=capsule,
            content=content,
            lock_date=lock_date,
            created_by=author,
            member_name=author.name,
            notified=notified,
        )

    return factory

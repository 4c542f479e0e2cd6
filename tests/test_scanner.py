"""Tests for the read-only unlock scan."""

from datetime import timedelta

import pytest

from capsules.models import Capsule, MemoryEntry
from capsules.scanner import UnlockScanner, eligible_entries, is_eligible


class TestIsEligible:

    def test_past_unnotified_is_eligible(self, now):
        item = MemoryEntry(lock_date=now - timedelta(minutes=1), notified=False)
        assert is_eligible(item, now)

    def test_exactly_now_is_eligible(self, now):
        assert is_eligible(Capsule(lock_date=now, notified=False), now)

    def test_future_is_not_eligible(self, now):
        assert not is_eligible(Capsule(lock_date=now + timedelta(seconds=1), notified=False), now)

    def test_notified_is_not_eligible(self, now):
        assert not is_eligible(Capsule(lock_date=now - timedelta(days=1), notified=True), now)

    def test_missing_lock_date_is_not_eligible(self, now):
        assert not is_eligible(Capsule(lock_date=None, notified=False), now)


@pytest.mark.django_db
class TestUnlockScanner:

    def test_personal_scan_filters_on_lock_date_and_flag(self, store, now, make_personal):
        due = make_personal(now - timedelta(minutes=1), title="due")
        make_personal(now + timedelta(hours=1), title="future")
        make_personal(now - timedelta(hours=1), title="done", notified=True)
        make_personal(None, title="no date")

        found = UnlockScanner(store).scan_personal(now)

        assert [c.pk for c in found] == [due.pk]

    def test_personal_scan_skips_deleted(self, store, now, make_personal):
        capsule = make_personal(now - timedelta(minutes=1))
        capsule.is_deleted = True
        capsule.save()

        assert UnlockScanner(store).scan_personal(now) == []

    def test_personal_scan_ignores_collaborative(self, store, now, make_collaborative):
        capsule = make_collaborative()
        capsule.lock_date = now - timedelta(days=1)
        capsule.save()

        assert UnlockScanner(store).scan_personal(now) == []

    def test_collaborative_scan_needs_entries(self, store, now, make_collaborative, add_entry):
        with_entries = make_collaborative(title="with")
        make_collaborative(title="empty")
        add_entry(with_entries, now + timedelta(days=3))
        add_entry(with_entries, now - timedelta(days=3))

        found = UnlockScanner(store).scan_collaborative(now)

        assert [c.pk for c in found] == [with_entries.pk]
        assert len(found[0].entries.all()) == 2

    def test_eligible_entries_filters_per_entry(self, store, now, make_collaborative, add_entry):
        capsule = make_collaborative()
        past = add_entry(capsule, now - timedelta(hours=1))
        add_entry(capsule, now + timedelta(hours=1))
        add_entry(capsule, now - timedelta(hours=2), notified=True)
        add_entry(capsule, None)

        scanned = UnlockScanner(store).scan_collaborative(now)[0]

        assert [e.pk for e in eligible_entries(scanned, now)] == [past.pk]

    def test_scan_does_not_mutate(self, store, now, make_personal):
        capsule = make_personal(now - timedelta(minutes=1))

        UnlockScanner(store).scan(now)

        capsule.refresh_from_db()
        assert capsule.notified is False

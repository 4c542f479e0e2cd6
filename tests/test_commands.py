"""Tests for the run_unlock_scheduler management command."""

from datetime import timedelta
from io import StringIO

import pytest
from django.core.management import call_command
from django.utils import timezone


@pytest.mark.django_db
def test_once_runs_a_single_cycle(mailoutbox, make_user, make_personal):
    ana = make_user(email="ana@x.com")
    capsule = make_personal(timezone.now() - timedelta(minutes=1), creator=ana)
    out = StringIO()

    call_command("run_unlock_scheduler", "--once", stdout=out)

    assert "1 capsules and 0 entries notified" in out.getvalue()
    assert [m.to for m in mailoutbox] == [["ana@x.com"]]
    capsule.refresh_from_db()
    assert capsule.notified is True

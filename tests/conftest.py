import itertools

import pytest
from django.contrib.auth.models import User
from rest_framework.test import APIClient

from matching.ledger import ledger
from matching.models import Profile

_counter = itertools.count(1)


@pytest.fixture
def make_profile(db):
    def _make(display_name=None, **fields):
        n = next(_counter)
        user = User.objects.create_user(username=f"user{n}@example.com", password="password123")
        Profile.objects.create(user=user, display_name=display_name or f"User {n}", **fields)
        return user
    return _make


@pytest.fixture
def matched_pair(make_profile):
    """Two users who liked each other, plus their match."""
    alice = make_profile("Alice")
    bob = make_profile("Bob")
    ledger.record_interest(alice.id, bob.id)
    result = ledger.record_interest(bob.id, alice.id)
    assert result.matched
    return alice, bob, result.match


@pytest.fixture
def api_client():
    return APIClient()

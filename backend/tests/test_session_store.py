import dataclasses
import pytest
from stockdesk.constants.roles import Role
from stockdesk.services.session import FetchTracker, SessionContext, SessionRegistry, SessionStore, SessionUser


def test_refresh_lifecycle_produces_new_contexts():
    store = SessionStore()
    before = store.context
    token = store.begin_refresh()
    loading = store.context
    assert loading is not before and loading.loading
    assert store.complete_refresh(token, SessionUser(id='7', role='manager'))
    assert store.context.role is Role.MANAGER
    assert not store.context.loading
    # earlier snapshots are untouched
    assert before.user is None and not before.loading


def test_stale_refresh_does_not_overwrite_newer_one():
    store = SessionStore()
    first = store.begin_refresh()
    second = store.begin_refresh()
    assert store.complete_refresh(second, SessionUser(id='1', role='CEO'))
    assert not store.complete_refresh(first, SessionUser(id='1', role='Sales'))
    assert store.context.role is Role.CEO


def test_clear_invalidates_in_flight_refresh():
    store = SessionStore()
    token = store.begin_refresh()
    store.clear()
    assert not store.complete_refresh(token, SessionUser(id='1', role='CEO'))
    assert store.context.user is None


def test_contexts_are_immutable():
    ctx = SessionContext(user=SessionUser(id='1', role='CEO'))
    with pytest.raises(dataclasses.FrozenInstanceError):
        ctx.loading = True
    with pytest.raises(dataclasses.FrozenInstanceError):
        ctx.user.role = 'Sales'


def test_fetch_tracker_keeps_latest_response_per_site():
    tracker = FetchTracker()
    old = tracker.begin('customers')
    new = tracker.begin('customers')
    other = tracker.begin('orders')
    assert tracker.is_current('customers', new)
    assert not tracker.is_current('customers', old)
    assert not tracker.is_current('never-fetched', 1)
    assert tracker.is_current('orders', other)


def test_session_user_claims_round_trip_drops_unknown_keys():
    claims = {'role': 'Owner', 'perms': ['VIEW_USERS', 'GONE'], 'email': 'a@b.c', 'name': 'A'}
    su = SessionUser.from_claims(5, claims)
    assert su.id == '5'
    assert su.permissions == frozenset({'VIEW_USERS'})
    assert su.normalized_role is Role.CEO
    assert su.to_claims()['perms'] == ['VIEW_USERS']


def test_registry_keeps_one_store_per_user():
    registry = SessionRegistry()
    assert registry.peek('9') is None
    store = registry.store_for('9')
    assert registry.store_for('9') is store
    store.begin_refresh()
    assert registry.peek('9').loading
    assert registry.peek('10') is None

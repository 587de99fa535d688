"""Immutable session values shared read-only by gates and mappers.

A role switch or permission refresh never edits a context in place; it produces a new
SessionContext. SessionStore and FetchTracker use a generation counter so a response from
a superseded request can't overwrite state written by a newer one.
"""
from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import Any, Dict, FrozenSet, Optional
import logging
import threading
from flask import current_app, g
from flask_jwt_extended import get_jwt, get_jwt_identity, verify_jwt_in_request
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import PyJWTError
from stockdesk.constants.permissions import sanitize_permissions
from stockdesk.constants.roles import Role, normalize_role

SESSIONS_EXTENSION = 'stockdesk.sessions'
FETCH_EXTENSION = 'stockdesk.fetches'

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    id: str
    email: str = ''
    name: str = ''
    role: str = ''
    permissions: FrozenSet[str] = frozenset()
    business_id: Optional[str] = None

    @property
    def normalized_role(self) -> Role:
        return normalize_role(self.role)

    @classmethod
    def from_claims(cls, identity, claims: Dict[str, Any]) -> 'SessionUser':
        return cls(
            id=str(identity),
            email=claims.get('email') or '',
            name=claims.get('name') or '',
            role=claims.get('role') or '',
            permissions=frozenset(sanitize_permissions(claims.get('perms'))),
            business_id=claims.get('business_id'),
        )

    def to_claims(self) -> Dict[str, Any]:
        return {
            'email': self.email,
            'name': self.name,
            'role': self.role,
            'perms': sorted(self.permissions),
            'business_id': self.business_id,
        }


@dataclass(frozen=True)
class SessionContext:
    user: Optional[SessionUser] = None
    loading: bool = False
    generation: int = 0

    @property
    def authenticated(self) -> bool:
        return self.user is not None

    @property
    def role(self) -> Optional[Role]:
        return self.user.normalized_role if self.user else None


ANONYMOUS = SessionContext()


class SessionStore:
    """Holds the current SessionContext for one console session."""

    def __init__(self, initial: SessionContext = ANONYMOUS):
        self._context = initial
        self._lock = threading.Lock()

    @property
    def context(self) -> SessionContext:
        return self._context

    def begin_refresh(self) -> int:
        with self._lock:
            token = self._context.generation + 1
            self._context = replace(self._context, loading=True, generation=token)
            return token

    def complete_refresh(self, token: int, user: Optional[SessionUser]) -> bool:
        """Apply a fetched user if the token is still current. Returns False for stale results."""
        with self._lock:
            if token != self._context.generation:
                logger.debug('Dropping stale session refresh %s (current %s)', token, self._context.generation)
                return False
            self._context = SessionContext(user=user, loading=False, generation=token)
            return True

    def clear(self) -> SessionContext:
        with self._lock:
            self._context = SessionContext(generation=self._context.generation + 1)
            return self._context


class SessionRegistry:
    """One SessionStore per user id, shared by every request of the app."""

    def __init__(self):
        self._stores: Dict[str, SessionStore] = {}
        self._lock = threading.Lock()

    def store_for(self, user_id: str) -> SessionStore:
        with self._lock:
            store = self._stores.get(user_id)
            if store is None:
                store = self._stores[user_id] = SessionStore()
            return store

    def peek(self, user_id: str) -> Optional[SessionContext]:
        store = self._stores.get(user_id)
        return store.context if store else None


@dataclass
class FetchTracker:
    """Per fetch-site generation counters (e.g. '7:customers')."""
    _generations: Dict[str, int] = field(default_factory=dict)
    _lock: Any = field(default_factory=threading.Lock, repr=False)

    def begin(self, site: str) -> int:
        with self._lock:
            token = self._generations.get(site, 0) + 1
            self._generations[site] = token
            return token

    def is_current(self, site: str, token: int) -> bool:
        return self._generations.get(site) == token


def load_session_context() -> SessionContext:
    """Build the request's SessionContext from the JWT (header or cookie), cached on flask.g.

    While a refresh for the same user is in flight the context is marked loading.
    """
    cached = getattr(g, 'session_context', None)
    if cached is not None:
        return cached
    ctx = ANONYMOUS
    try:
        if verify_jwt_in_request(optional=True):
            ctx = SessionContext(user=SessionUser.from_claims(get_jwt_identity(), get_jwt()))
    except (JWTExtendedException, PyJWTError) as e:
        logger.info('Treating request as unauthenticated: %s', e)
    if ctx.user is not None:
        live = current_app.extensions[SESSIONS_EXTENSION].peek(ctx.user.id)
        if live is not None and live.loading:
            ctx = replace(ctx, loading=True, generation=live.generation)
    g.session_context = ctx
    return ctx


def get_sessions() -> SessionRegistry:
    return current_app.extensions[SESSIONS_EXTENSION]


def get_fetch_tracker() -> FetchTracker:
    return current_app.extensions[FETCH_EXTENSION]

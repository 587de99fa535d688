from __future__ import annotations
from typing import FrozenSet, Iterable, Tuple
import logging
from stockdesk.constants.menus import ROLE_MENUS
from stockdesk.constants.permissions import ALL_PERMISSION_KEYS, WILDCARD
from stockdesk.constants.roles import Role, normalize_role, strict_role

logger = logging.getLogger(__name__)

# Soft-fail redirect targets (server-side checks in the backend stay authoritative)
LOGIN_ROUTE = '/'
DEFAULT_DASHBOARD_ROUTE = '/dashboard'


def resolve_allow_list(allowed_roles: Iterable) -> Tuple[Role, ...]:
    """Canonical roles for an allow-list; a misspelt entry raises UnknownRoleError."""
    return tuple(strict_role(r) for r in allowed_roles)


def is_role_allowed(role_value, allowed_roles: Iterable) -> bool:
    """Coarse gate: an empty allow-list admits every authenticated role."""
    allowed = resolve_allow_list(allowed_roles)
    if not allowed:
        return True
    return normalize_role(role_value) in allowed


def user_permissions(user) -> FrozenSet[str]:
    if user is None:
        return frozenset()
    perms = getattr(user, 'permissions', None)
    if perms is None and isinstance(user, dict):
        perms = user.get('permissions')
    if not perms:
        return frozenset()
    return frozenset(p for p in perms if isinstance(p, str))


def has_permission(user, key: str) -> bool:
    """Fine gate against the user's explicit permission set. Never raises."""
    perms = user_permissions(user)
    if not perms:
        return False
    if not isinstance(key, str) or key not in ALL_PERMISSION_KEYS:
        logger.debug('Permission check for key %r not present in catalog', key)
        return False
    if WILDCARD in perms:
        return True
    return key in perms


def has_any_permission(user, keys: Iterable[str]) -> bool:
    return any(has_permission(user, k) for k in keys)


def ordered_menu_items(role_value) -> Tuple[str, ...]:
    return ROLE_MENUS[normalize_role(role_value)]


def get_role_menu_items(role_value) -> FrozenSet[str]:
    return frozenset(ordered_menu_items(role_value))


def redirect_target(authenticated: bool) -> str:
    return DEFAULT_DASHBOARD_ROUTE if authenticated else LOGIN_ROUTE


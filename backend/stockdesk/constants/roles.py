"""Canonical console roles and the alias table that maps raw role strings onto them.
Only three roles exist; anything unrecognised collapses to the least privileged one (Sales).
"""
from __future__ import annotations
from enum import Enum
from typing import Dict, Optional
import logging

logger = logging.getLogger(__name__)


class Role(str, Enum):
    CEO = 'CEO'
    MANAGER = 'Manager'
    SALES = 'Sales'


ROLE_ALIASES: Dict[Role, frozenset] = {
    Role.CEO: frozenset({'ceo', 'owner', 'superadmin', 'super_admin', 'admin', 'administrator'}),
    Role.MANAGER: frozenset({'manager', 'management'}),
    Role.SALES: frozenset({'sales', 'salesperson', 'sales_person', 'sales rep', 'sales_rep'}),
}

LEAST_PRIVILEGED_ROLE = Role.SALES


class UnknownRoleError(ValueError):
    pass


def _lookup(raw: str) -> Optional[Role]:
    for role, aliases in ROLE_ALIASES.items():
        if raw in aliases:
            return role
    return None


def normalize_role(role_value) -> Role:
    """Resolve any role-ish value to one of the three canonical roles.

    Canonical Role members pass through untouched so the function is idempotent.
    """
    if isinstance(role_value, Role):
        return role_value
    raw = str(role_value or '').strip().lower()
    role = _lookup(raw)
    if role is None:
        if raw:
            logger.warning('Unknown role %r, falling back to %s', role_value, LEAST_PRIVILEGED_ROLE.value)
        return LEAST_PRIVILEGED_ROLE
    return role


def strict_role(role_value) -> Role:
    """Resolve a role named in code (allow-lists, presets). Unknown names raise UnknownRoleError."""
    if isinstance(role_value, Role):
        return role_value
    role = _lookup(str(role_value or '').strip().lower())
    if role is None:
        raise UnknownRoleError(f"Unknown role {role_value!r} in allow-list")
    return role


def can_manage_users(role_value) -> bool:
    return normalize_role(role_value) is Role.CEO


def can_manage_catalog(role_value) -> bool:
    return normalize_role(role_value) in (Role.CEO, Role.MANAGER)


def can_view_only_catalog(role_value) -> bool:
    return normalize_role(role_value) is Role.SALES


__all__ = [
    'Role',
    'ROLE_ALIASES',
    'LEAST_PRIVILEGED_ROLE',
    'normalize_role',
    'strict_role',
    'UnknownRoleError',
    'can_manage_users',
    'can_manage_catalog',
    'can_view_only_catalog',
]

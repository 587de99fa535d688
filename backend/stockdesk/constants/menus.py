"""Sidebar menu keys per role.

This table is intentionally independent of the permission catalog: roles decide the
navigation structure, permissions decide widget visibility inside a page.
"""
from __future__ import annotations
from typing import Dict, Tuple
from stockdesk.constants.roles import Role

FULL_MENU: Tuple[str, ...] = (
    'dashboard',
    'categories',
    'products',
    'purchases',
    'inventory',
    'suppliers',
    'sales',
    'customers',
    'expense-categories',
    'expenses',
    'reports',
    'users',
    'messaging',
    'settings',
    'profile',
    'notifications',
)

SALES_MENU: Tuple[str, ...] = (
    'dashboard',
    'categories',
    'products',
    'sales',
    'customers',
    'profile',
    'notifications',
)

ROLE_MENUS: Dict[Role, Tuple[str, ...]] = {
    Role.CEO: FULL_MENU,
    Role.MANAGER: FULL_MENU,
    Role.SALES: SALES_MENU,
}

"""Central permission catalog used for widget gating and the permission editor.
Extend cautiously; never rename keys silently - stored user permission lists reference them.
Keys no longer in the catalog are dropped when a user's permissions are loaded.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple
import logging

logger = logging.getLogger(__name__)

WILDCARD = '*'


class CatalogError(ValueError):
    """Raised at import time when the static catalog is inconsistent."""


@dataclass(frozen=True)
class PermissionDef:
    key: str
    label: str


@dataclass(frozen=True)
class PermissionGroup:
    category: str
    permissions: Tuple[PermissionDef, ...]

    @property
    def keys(self) -> Tuple[str, ...]:
        return tuple(p.key for p in self.permissions)


def _group(category: str, *pairs: Tuple[str, str]) -> PermissionGroup:
    return PermissionGroup(category, tuple(PermissionDef(k, label) for k, label in pairs))


PERMISSION_GROUPS: Tuple[PermissionGroup, ...] = (
    _group('Dashboard',
           ('VIEW_DASHBOARD', 'View Dashboard')),
    _group('Dashboard KPI Cards',
           ('VIEW_KPI_GROSS_REVENUE', 'Gross Revenue'),
           ('VIEW_KPI_TOTAL_EXPENSES', 'Total Expenses'),
           ('VIEW_KPI_NET_REVENUE', 'Net Revenue'),
           ('VIEW_KPI_TOTAL_ORDERS', 'Total Orders'),
           ('VIEW_KPI_LOW_STOCK', 'Low Stock Alert')),
    _group('Dashboard Charts',
           ('VIEW_CHART_SALES_TREND', 'Sales Trend'),
           ('VIEW_CHART_TOP_PRODUCTS', 'Top Products'),
           ('VIEW_TOP_CUSTOMERS', 'Top Customers'),
           ('VIEW_FINANCIAL_OVERVIEW', 'Financial Overview')),
    _group('Categories',
           ('VIEW_CATEGORIES', 'View Categories'),
           ('MANAGE_CATEGORIES', 'Manage Categories')),
    _group('Products',
           ('VIEW_PRODUCTS', 'View Products'),
           ('MANAGE_PRODUCTS', 'Manage Products')),
    _group('Orders',
           ('VIEW_ORDERS', 'View Orders'),
           ('MANAGE_ORDERS', 'Manage Orders')),
    _group('Inventory',
           ('VIEW_INVENTORY', 'View Inventory'),
           ('MANAGE_INVENTORY', 'Manage Inventory')),
    _group('Purchases',
           ('VIEW_PURCHASES', 'View Purchases'),
           ('MANAGE_PURCHASES', 'Manage Purchases')),
    _group('Suppliers',
           ('VIEW_SUPPLIERS', 'View Suppliers'),
           ('MANAGE_SUPPLIERS', 'Manage Suppliers')),
    _group('Customers',
           ('VIEW_CUSTOMERS', 'View Customers'),
           ('MANAGE_CUSTOMERS', 'Manage Customers')),
    _group('Expenses',
           ('VIEW_EXPENSES', 'View Expenses'),
           ('MANAGE_EXPENSES', 'Manage Expenses')),
    _group('Messaging',
           ('VIEW_MESSAGING', 'Access Messaging')),
    _group('Reports',
           ('VIEW_REPORTS', 'View Reports')),
    _group('User Management',
           ('VIEW_USERS', 'View Users'),
           ('MANAGE_USERS', 'Manage Users')),
    _group('System',
           ('VIEW_SETTINGS', 'Access Settings')),
)


def validate_catalog(groups: Iterable[PermissionGroup]) -> Dict[str, str]:
    """Return key -> category, raising CatalogError on duplicate keys or categories."""
    index: Dict[str, str] = {}
    seen_categories = set()
    for group in groups:
        if group.category in seen_categories:
            raise CatalogError(f"Duplicate permission category '{group.category}'")
        seen_categories.add(group.category)
        for perm in group.permissions:
            if perm.key == WILDCARD:
                raise CatalogError(f"'{WILDCARD}' is reserved and cannot be a catalog key")
            if perm.key in index:
                raise CatalogError(
                    f"Permission key '{perm.key}' declared in both '{index[perm.key]}' and '{group.category}'"
                )
            index[perm.key] = group.category
    return index


_KEY_TO_CATEGORY = validate_catalog(PERMISSION_GROUPS)
_GROUPS_BY_CATEGORY = {g.category: g for g in PERMISSION_GROUPS}

ALL_PERMISSION_KEYS = frozenset(_KEY_TO_CATEGORY)

# Used only to pre-fill new users; has_permission never consults these.
PERMISSION_PRESETS: Dict[str, List[str]] = {
    'CEO': [WILDCARD],
    'Manager': [
        'VIEW_DASHBOARD',
        'VIEW_KPI_GROSS_REVENUE', 'VIEW_KPI_TOTAL_EXPENSES', 'VIEW_KPI_NET_REVENUE',
        'VIEW_KPI_TOTAL_ORDERS', 'VIEW_KPI_LOW_STOCK',
        'VIEW_CHART_SALES_TREND', 'VIEW_CHART_TOP_PRODUCTS', 'VIEW_TOP_CUSTOMERS',
        'VIEW_CATEGORIES', 'MANAGE_CATEGORIES',
        'VIEW_PRODUCTS', 'MANAGE_PRODUCTS',
        'VIEW_ORDERS', 'MANAGE_ORDERS',
        'VIEW_INVENTORY', 'MANAGE_INVENTORY',
        'VIEW_PURCHASES', 'MANAGE_PURCHASES',
        'VIEW_SUPPLIERS',
        'VIEW_CUSTOMERS', 'MANAGE_CUSTOMERS',
        'VIEW_EXPENSES',
        'VIEW_MESSAGING',
        'VIEW_REPORTS',
        'VIEW_USERS',
    ],
    'Sales': [
        'VIEW_DASHBOARD',
        'VIEW_KPI_TOTAL_ORDERS',
        'VIEW_PRODUCTS',
        'VIEW_ORDERS', 'MANAGE_ORDERS',
        'VIEW_CUSTOMERS', 'MANAGE_CUSTOMERS',
    ],
}


def all_permission_keys() -> frozenset:
    return ALL_PERMISSION_KEYS


def group_for(key: str) -> Optional[str]:
    return _KEY_TO_CATEGORY.get(key)


def category_keys(category: str) -> Tuple[str, ...]:
    group = _GROUPS_BY_CATEGORY.get(category)
    return group.keys if group else ()


def sanitize_permissions(raw) -> List[str]:
    """Keep catalog keys (and the wildcard) in first-seen order; drop everything else."""
    if not isinstance(raw, (list, tuple, set, frozenset)):
        if raw is not None:
            logger.debug('Ignoring non-list permission payload of type %s', type(raw).__name__)
        return []
    out: List[str] = []
    for key in raw:
        if not isinstance(key, str):
            continue
        if key != WILDCARD and key not in ALL_PERMISSION_KEYS:
            logger.debug('Dropping unknown permission key %r', key)
            continue
        if key not in out:
            out.append(key)
    return out


def toggle_permission(selection: Iterable[str], key: str) -> List[str]:
    current = list(selection)
    if key in current:
        return [k for k in current if k != key]
    return current + [key]


def toggle_category(selection: Iterable[str], category: str) -> List[str]:
    """All-or-none toggle: deselect the whole category when fully selected, else select the rest."""
    current = list(selection)
    keys = category_keys(category)
    if not keys:
        return current
    if all(k in current for k in keys):
        return [k for k in current if k not in keys]
    return current + [k for k in keys if k not in current]


def category_state(selection: Iterable[str]) -> List[dict]:
    """Checkbox model for the permission editor."""
    chosen = set(selection)
    rows = []
    for group in PERMISSION_GROUPS:
        perms = [{'key': p.key, 'label': p.label, 'checked': p.key in chosen} for p in group.permissions]
        selected = sum(1 for p in perms if p['checked'])
        rows.append({
            'category': group.category,
            'permissions': perms,
            'selected_count': selected,
            'all_selected': selected == len(perms),
        })
    return rows


__all__ = [
    'WILDCARD',
    'CatalogError',
    'PermissionDef',
    'PermissionGroup',
    'PERMISSION_GROUPS',
    'PERMISSION_PRESETS',
    'ALL_PERMISSION_KEYS',
    'validate_catalog',
    'all_permission_keys',
    'group_for',
    'category_keys',
    'sanitize_permissions',
    'toggle_permission',
    'toggle_category',
    'category_state',
]

"""Normalization of heterogeneous backend envelopes into canonical lists/objects.

The backend has shipped every one of these shapes at some point:
    [..]                      bare array
    {"orders": [..]}          keyed collection
    {"items": [..]}           paginated wrapper
    {"results": [..]}         search wrapper
    {"data": [..]}            data envelope
    {"data": {"orders": [..]}} nested keyed collection

Each shape is an EnvelopeStrategy; strategies are tried in order and the first match wins.
Every entity family goes through the same chain so payload drift can't break one screen only.
Nothing here raises: unmatched payloads become [] or {}.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple


def _get(obj: Any, key: Optional[str]) -> Any:
    if key is None or not isinstance(obj, dict):
        return None
    return obj.get(key)


@dataclass(frozen=True)
class EnvelopeStrategy:
    name: str
    lookup: Callable[[Any, Optional[str]], Any]

    def match(self, response: Any, key: Optional[str]) -> Optional[list]:
        found = self.lookup(response, key)
        return found if isinstance(found, list) else None


LIST_STRATEGIES: Tuple[EnvelopeStrategy, ...] = (
    EnvelopeStrategy('bare_array', lambda r, k: r),
    EnvelopeStrategy('keyed', lambda r, k: _get(r, k)),
    EnvelopeStrategy('items', lambda r, k: _get(r, 'items')),
    EnvelopeStrategy('results', lambda r, k: _get(r, 'results')),
    EnvelopeStrategy('data', lambda r, k: _get(r, 'data')),
    EnvelopeStrategy('data_keyed', lambda r, k: _get(_get(r, 'data'), k)),
)


def match_list_strategy(response: Any, preferred_key: Optional[str] = None) -> Tuple[Optional[str], list]:
    """Return (strategy name, list); name is None when no strategy matched."""
    for strategy in LIST_STRATEGIES:
        found = strategy.match(response, preferred_key)
        if found is not None:
            return strategy.name, found
    return None, []


def extract_list(response: Any, preferred_key: Optional[str] = None) -> list:
    return match_list_strategy(response, preferred_key)[1]


def extract_single(response: Any, *preferred_keys: str) -> Dict[str, Any]:
    """Singular-object counterpart of extract_list; falls back to the raw payload itself."""
    data = _get(response, 'data')
    for key in preferred_keys:
        for candidate in (_get(response, key), _get(data, key)):
            if isinstance(candidate, dict):
                return candidate
    if isinstance(data, dict):
        return data
    if isinstance(response, dict):
        return response
    return {}


def extract_records(response: Any, preferred_key: str) -> List[Dict[str, Any]]:
    """extract_list restricted to dict entries (stray scalars/nulls in a list are dropped)."""
    return [row for row in extract_list(response, preferred_key) if isinstance(row, dict)]


def extract_customers(response: Any) -> List[Dict[str, Any]]:
    return extract_records(response, 'customers')


def extract_orders(response: Any) -> List[Dict[str, Any]]:
    return extract_records(response, 'orders')


def extract_products(response: Any) -> List[Dict[str, Any]]:
    return extract_records(response, 'products')


def extract_messages(response: Any) -> List[Dict[str, Any]]:
    return extract_records(response, 'messages')


def extract_kpis(response: Any) -> List[Dict[str, Any]]:
    return extract_records(response, 'kpis')


__all__ = [
    'EnvelopeStrategy',
    'LIST_STRATEGIES',
    'match_list_strategy',
    'extract_list',
    'extract_single',
    'extract_records',
    'extract_customers',
    'extract_orders',
    'extract_products',
    'extract_messages',
    'extract_kpis',
]

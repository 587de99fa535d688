from __future__ import annotations
from typing import Any, Callable, Dict, List, Optional, Sequence


def apply_search(rows: List[Dict[str, Any]], term: Optional[str], fields: Sequence[str]) -> List[Dict[str, Any]]:
    """Case-insensitive substring match of `term` against any of `fields`."""
    needle = (term or '').strip().lower()
    if not needle or not fields:
        return rows
    return [r for r in rows if any(needle in str(r.get(f) or '').lower() for f in fields)]


def apply_filters(rows: List[Dict[str, Any]], specs: Dict[str, Dict[str, Any]], params: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Generic equality/predicate filters over view-model dicts.

    specs: { param_name: { 'field': key in row (defaults to param_name), 'coerce': callable, 'match': callable(row_value, value)->bool } }
    Params that fail coercion are ignored rather than rejected.
    """
    for name, meta in specs.items():
        raw = params.get(name)
        if raw in (None, ''):
            continue
        value = raw
        if 'coerce' in meta:
            try:
                value = meta['coerce'](raw)
            except (TypeError, ValueError):
                continue
        field = meta.get('field', name)
        match: Callable[[Any, Any], bool] = meta.get('match', lambda a, b: a == b)
        rows = [r for r in rows if match(r.get(field), value)]
    return rows

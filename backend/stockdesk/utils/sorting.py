from __future__ import annotations
from typing import Any, Dict, List, Sequence
import re
from flask import abort


_NUMERIC = re.compile(r'^-?\d+(\.\d+)?$')


def _key(value: Any):
    # None first, then numbers (numeric-looking strings such as ids too), then text
    if value is None:
        return (0, 0, '')
    if isinstance(value, str):
        text = value.strip()
        if _NUMERIC.match(text):
            return (1, float(text), '')
        return (2, 0, text.lower())
    return (1, value, '')


def apply_multi_sort(rows: List[Dict[str, Any]], sort_expr: str | None, allowed: Sequence[str], tie_breaker: str):
    """Apply multi-field sort to a list of view-model dicts.
    sort_expr: comma-separated tokens, each optionally prefixed with '-'.
    allowed: field names that may be sorted on.
    tie_breaker: field appended for deterministic ordering.
    """
    tokens = []
    for raw in (sort_expr or '').split(','):
        token = raw.strip()
        if not token:
            continue
        desc = token.startswith('-')
        key = token[1:] if desc else token
        if key not in allowed:
            abort(400, description=f'Invalid sort field {key}')
        tokens.append((key, desc))
    out = sorted(rows, key=lambda r: _key(r.get(tie_breaker)))
    # stable sorts applied last-to-first give multi-key ordering
    for key, desc in reversed(tokens):
        out.sort(key=lambda r: _key(r.get(key)), reverse=desc)
    return out

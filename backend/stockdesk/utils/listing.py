from __future__ import annotations
from dataclasses import asdict, is_dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple
from flask import request, abort
from stockdesk.config.pagination import normalize_pagination
from stockdesk.utils.filters import apply_search
from stockdesk.utils.sorting import apply_multi_sort


def to_json(row: Any) -> Dict[str, Any]:
    return asdict(row) if is_dataclass(row) else dict(row)


def apply_pagination(rows: Sequence[Any]) -> Tuple[List[Any], int, int, int]:
    try:
        limit, offset = normalize_pagination(request.args.get('limit'), request.args.get('offset'), request.args.get('page'))
    except ValueError as e:
        abort(400, description=str(e))
    total = len(rows)
    return list(rows[offset:offset + limit]), total, limit, offset


def build_list_payload(rows: list, total: int, limit: int, offset: int, extra: Optional[Dict[str, Any]] = None):
    payload = {
        'data': rows,
        'pagination': {
            'total': total,
            'limit': limit,
            'offset': offset,
            'returned': len(rows)
        }
    }
    if extra:
        payload.update(extra)
    return payload


def list_response(rows: Sequence[Any], search_fields: Sequence[str] = (), sortable: Sequence[str] = (), tie_breaker: str = 'id', extra: Optional[Dict[str, Any]] = None):
    """Search, sort and paginate view models according to the request's query string."""
    items = [to_json(r) for r in rows]
    items = apply_search(items, request.args.get('q'), search_fields)
    items = apply_multi_sort(items, request.args.get('sort'), sortable, tie_breaker)
    page, total, limit, offset = apply_pagination(items)
    return build_list_payload(page, total, limit, offset, extra)

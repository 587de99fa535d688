"""Single table of default substitutions applied by every view-model mapper.

Money and counts default to 0, free text to '', required display names to 'Unknown'.
"""
from __future__ import annotations
from typing import Any, Dict, Iterable, Optional
import math

UNKNOWN_NAME = 'Unknown'

FIELD_DEFAULTS: Dict[str, Any] = {
    'money': 0.0,
    'count': 0,
    'percent': 0.0,
    'text': '',
    'display_name': UNKNOWN_NAME,
}


def coerce_money(value: Any) -> float:
    """Number(value ?? 0) with NaN/inf/garbage mapped to 0."""
    if value is None or isinstance(value, bool):
        return FIELD_DEFAULTS['money']
    if isinstance(value, str):
        value = value.replace(',', '').strip()
    try:
        number = float(value)
    except (TypeError, ValueError):
        return FIELD_DEFAULTS['money']
    if math.isnan(number) or math.isinf(number):
        return FIELD_DEFAULTS['money']
    return number


def coerce_percent(value: Any) -> float:
    if isinstance(value, str):
        value = value.strip().rstrip('%')
    number = coerce_money(value)
    return number if number else FIELD_DEFAULTS['percent']


def coerce_count(value: Any) -> int:
    return int(coerce_money(value))


def coerce_text(value: Any) -> str:
    if value is None:
        return FIELD_DEFAULTS['text']
    return str(value).strip()


def first_text(record: Dict[str, Any], keys: Iterable[str], default: Optional[str] = None) -> str:
    """First non-empty text among `keys` in `record`."""
    for key in keys:
        text = coerce_text(record.get(key))
        if text:
            return text
    return FIELD_DEFAULTS['text'] if default is None else default


def first_present(record: Dict[str, Any], keys: Iterable[str]) -> Any:
    for key in keys:
        if record.get(key) is not None:
            return record[key]
    return None

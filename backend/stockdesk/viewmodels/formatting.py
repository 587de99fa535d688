from __future__ import annotations
from typing import Any, Dict, Optional
from stockdesk.viewmodels.defaults import coerce_money

CURRENCY_SYMBOLS: Dict[str, str] = {
    'GHS': 'GH₵',
    'USD': '$',
    'GBP': '£',
    'EUR': '€',
}
DEFAULT_CURRENCY = 'GHS'

AVATAR_PALETTE = (
    'from-blue-400 to-cyan-500',
    'from-emerald-400 to-pink-500',
    'from-emerald-400 to-teal-500',
    'from-orange-400 to-red-500',
    'from-indigo-400 to-emerald-500',
    'from-rose-400 to-pink-500',
)

TREND_UP = 'up'
TREND_DOWN = 'down'
TREND_NEUTRAL = 'neutral'


def format_money(amount: Any, currency: Optional[str] = None) -> str:
    """Symbol + thousands separators, at most two decimals, trailing zeros trimmed."""
    value = coerce_money(amount)
    code = (currency or DEFAULT_CURRENCY).upper()
    sym = CURRENCY_SYMBOLS.get(code, f'{code} ')
    body = f"{abs(value):,.2f}".rstrip('0').rstrip('.')
    sign = '-' if value < 0 and body != '0' else ''
    return f"{sign}{sym}{body}"


def initials(name: str) -> str:
    parts = [p for p in (name or '').split() if p]
    if not parts:
        return '?'
    return ''.join(p[0] for p in parts[:2]).upper()


def avatar_color(name: str) -> str:
    if not name:
        return AVATAR_PALETTE[0]
    return AVATAR_PALETTE[ord(name[0]) % len(AVATAR_PALETTE)]


def derive_trend(change: Any, explicit: Any = None) -> str:
    """Explicit backend trend wins; otherwise the sign of `change` decides."""
    if isinstance(explicit, str) and explicit.strip():
        return explicit.strip().lower()
    delta = coerce_money(change)
    if delta > 0:
        return TREND_UP
    if delta < 0:
        return TREND_DOWN
    return TREND_NEUTRAL


def format_change(change: Any) -> str:
    delta = coerce_money(change)
    body = f"{delta:.1f}".rstrip('0').rstrip('.')
    if body == '-0':
        body = '0'
    return f"+{body}%" if delta > 0 else f"{body}%"

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Optional
from stockdesk.viewmodels.defaults import UNKNOWN_NAME, coerce_count, coerce_money, coerce_text, first_present, first_text
from stockdesk.viewmodels.formatting import avatar_color, format_money, initials


@dataclass(frozen=True)
class CustomerVM:
    id: str
    name: str
    email: str
    phone: str
    address: str
    status: str
    total_orders: int
    total_spent: float
    total_spent_display: str
    initials: str
    avatar_color: str


def customer_display_name(raw: Dict[str, Any]) -> str:
    """name, else 'firstName lastName', else email, else 'Unknown'."""
    name = first_text(raw, ('name', 'customerName'))
    if name:
        return name
    full = f"{coerce_text(raw.get('firstName'))} {coerce_text(raw.get('lastName'))}".strip()
    if full:
        return full
    return first_text(raw, ('email',), default=UNKNOWN_NAME)


def customer_view(raw: Dict[str, Any], currency: Optional[str] = None) -> CustomerVM:
    raw = raw if isinstance(raw, dict) else {}
    name = customer_display_name(raw)
    spent = coerce_money(first_present(raw, ('totalSpent', 'total_spent')))
    return CustomerVM(
        id=coerce_text(first_present(raw, ('id', '_id'))),
        name=name,
        email=coerce_text(raw.get('email')),
        phone=coerce_text(raw.get('phone')),
        address=coerce_text(raw.get('address')),
        status=first_text(raw, ('status',), default='active').lower(),
        total_orders=coerce_count(first_present(raw, ('totalOrders', 'total_orders', 'ordersCount'))),
        total_spent=spent,
        total_spent_display=format_money(spent, currency),
        initials=initials(name),
        avatar_color=avatar_color(name),
    )

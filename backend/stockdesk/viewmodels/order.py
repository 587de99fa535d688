from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Optional
from stockdesk.viewmodels.customer import customer_display_name
from stockdesk.viewmodels.defaults import UNKNOWN_NAME, coerce_count, coerce_money, coerce_text, first_present, first_text
from stockdesk.viewmodels.formatting import format_money


@dataclass(frozen=True)
class OrderVM:
    id: str
    order_number: str
    customer_name: str
    status: str
    payment_method: str
    date: str
    item_count: int
    total: float
    total_display: str


def _customer_name(raw: Dict[str, Any]) -> str:
    name = first_text(raw, ('customerName',))
    if name:
        return name
    customer = raw.get('customer')
    if isinstance(customer, dict):
        return customer_display_name(customer)
    return first_text(raw, ('customer',), default=UNKNOWN_NAME)


def order_view(raw: Dict[str, Any], currency: Optional[str] = None) -> OrderVM:
    raw = raw if isinstance(raw, dict) else {}
    total = coerce_money(first_present(raw, ('total', 'totalAmount', 'amount')))
    items = raw.get('items')
    order_id = coerce_text(first_present(raw, ('id', '_id')))
    return OrderVM(
        id=order_id,
        order_number=first_text(raw, ('orderNumber', 'reference'), default=order_id),
        customer_name=_customer_name(raw),
        status=first_text(raw, ('status',), default='pending').lower(),
        payment_method=first_text(raw, ('paymentMethod', 'method')),
        date=first_text(raw, ('orderDate', 'date', 'createdAt')),
        item_count=len(items) if isinstance(items, list) else coerce_count(raw.get('itemCount')),
        total=total,
        total_display=format_money(total, currency),
    )

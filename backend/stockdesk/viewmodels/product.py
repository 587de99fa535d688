from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Optional
from stockdesk.viewmodels.defaults import UNKNOWN_NAME, coerce_count, coerce_money, coerce_text, first_present, first_text
from stockdesk.viewmodels.formatting import format_money

STOCK_INACTIVE = 'inactive'
STOCK_OUT = 'out_of_stock'
STOCK_LOW = 'low_stock'
STOCK_OK = 'in_stock'


@dataclass(frozen=True)
class ProductVM:
    id: str
    name: str
    sku: str
    category: str
    supplier: str
    cost_price: float
    selling_price: float
    cost_price_display: str
    selling_price_display: str
    current_stock: int
    reorder_threshold: int
    stock_status: str


def _label(value: Any) -> str:
    # category/supplier arrive either as plain strings or as {id, name} objects
    if isinstance(value, dict):
        return coerce_text(value.get('name'))
    return coerce_text(value)


def stock_status(status: str, current_stock: int, reorder_threshold: int) -> str:
    if status == 'inactive':
        return STOCK_INACTIVE
    if current_stock <= 0:
        return STOCK_OUT
    if current_stock <= reorder_threshold:
        return STOCK_LOW
    return STOCK_OK


def product_view(raw: Dict[str, Any], currency: Optional[str] = None) -> ProductVM:
    raw = raw if isinstance(raw, dict) else {}
    cost = coerce_money(first_present(raw, ('costPrice', 'cost_price')))
    price = coerce_money(first_present(raw, ('sellingPrice', 'selling_price', 'price')))
    stock = coerce_count(first_present(raw, ('currentStock', 'stock', 'quantity')))
    threshold = coerce_count(first_present(raw, ('reorderThreshold', 'reorderLevel')))
    return ProductVM(
        id=coerce_text(first_present(raw, ('id', '_id'))),
        name=first_text(raw, ('name',), default=UNKNOWN_NAME),
        sku=first_text(raw, ('sku', 'code')),
        category=_label(first_present(raw, ('category', 'categoryName'))),
        supplier=_label(first_present(raw, ('supplier', 'supplierName'))),
        cost_price=cost,
        selling_price=price,
        cost_price_display=format_money(cost, currency),
        selling_price_display=format_money(price, currency),
        current_stock=stock,
        reorder_threshold=threshold,
        stock_status=stock_status(coerce_text(raw.get('status')).lower(), stock, threshold),
    )

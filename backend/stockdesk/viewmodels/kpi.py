from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Optional
import re
from stockdesk.viewmodels.defaults import coerce_money, coerce_percent, coerce_text, first_present, first_text
from stockdesk.viewmodels.formatting import derive_trend, format_change, format_money

# KPI card title -> permission key gating the card
KPI_PERMISSIONS: Dict[str, str] = {
    'Gross Revenue': 'VIEW_KPI_GROSS_REVENUE',
    'Total Expenses': 'VIEW_KPI_TOTAL_EXPENSES',
    'Net Revenue': 'VIEW_KPI_NET_REVENUE',
    'Total Orders': 'VIEW_KPI_TOTAL_ORDERS',
    'Low Stock Alert': 'VIEW_KPI_LOW_STOCK',
}

MONEY_KPIS = frozenset({'Gross Revenue', 'Total Expenses', 'Net Revenue'})

_NUMBER = re.compile(r'-?\d[\d,]*(?:\.\d+)?')


@dataclass(frozen=True)
class KpiVM:
    id: str
    title: str
    value: float
    value_display: str
    change: float
    change_display: str
    trend: str
    permission: Optional[str]


def _numeric(value: Any) -> float:
    # preformatted strings such as 'GH₵ 12,400' still carry a usable number
    if isinstance(value, str):
        match = _NUMBER.search(value)
        return coerce_money(match.group(0)) if match else 0.0
    return coerce_money(value)


def kpi_view(raw: Dict[str, Any], currency: Optional[str] = None) -> KpiVM:
    raw = raw if isinstance(raw, dict) else {}
    title = first_text(raw, ('title', 'label', 'name'))
    value = _numeric(raw.get('value'))
    change = coerce_percent(raw.get('change'))
    if title in MONEY_KPIS or raw.get('unit') == 'currency':
        display = format_money(value, currency)
    else:
        display = f"{value:,.0f}" if value == int(value) else f"{value:,.2f}"
    return KpiVM(
        id=coerce_text(first_present(raw, ('id', 'key'))) or title.lower().replace(' ', '-'),
        title=title,
        value=value,
        value_display=display,
        change=change,
        change_display=format_change(change),
        trend=derive_trend(change, raw.get('trend')),
        permission=KPI_PERMISSIONS.get(title),
    )

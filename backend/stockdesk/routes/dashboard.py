from flask import Blueprint, current_app
from stockdesk.decorators.auth import protected_route
from stockdesk.services.fetching import fetch
from stockdesk.services.gates import gate_fragment, visible_widgets
from stockdesk.constants.permissions import category_keys
from stockdesk.services.policy import has_any_permission, ordered_menu_items
from stockdesk.services.session import load_session_context
from stockdesk.utils.listing import to_json
from stockdesk.utils.normalize import extract_kpis
from stockdesk.viewmodels.kpi import kpi_view

dash_bp = Blueprint('dashboard', __name__)

# (permission, widget id) in render order; None means always shown once authenticated
DASHBOARD_WIDGETS = (
    ('VIEW_KPI_GROSS_REVENUE', 'kpi-gross-revenue'),
    ('VIEW_KPI_TOTAL_EXPENSES', 'kpi-total-expenses'),
    ('VIEW_KPI_NET_REVENUE', 'kpi-net-revenue'),
    ('VIEW_KPI_TOTAL_ORDERS', 'kpi-total-orders'),
    ('VIEW_KPI_LOW_STOCK', 'kpi-low-stock'),
    ('VIEW_CHART_SALES_TREND', 'sales-trend'),
    ('VIEW_CHART_TOP_PRODUCTS', 'top-products'),
    ('VIEW_TOP_CUSTOMERS', 'top-customers'),
    ('VIEW_FINANCIAL_OVERVIEW', 'financial-overview'),
    (None, 'recent-activity'),
)


@dash_bp.get('')
@protected_route()
def dashboard_home():
    ctx = load_session_context()
    return {
        'user': {'id': ctx.user.id, 'name': ctx.user.name, 'role': ctx.role.value},
        'menu': list(ordered_menu_items(ctx.role)),
        'widgets': visible_widgets(ctx, DASHBOARD_WIDGETS),
        # whole rows collapse when none of their cards may render
        'sections': {
            'kpis': has_any_permission(ctx.user, category_keys('Dashboard KPI Cards')),
            'charts': has_any_permission(ctx.user, category_keys('Dashboard Charts')),
        },
    }


@dash_bp.get('/kpis')
@protected_route()
def dashboard_kpis():
    ctx = load_session_context()
    currency = current_app.config['CONSOLE_CURRENCY']
    result = fetch('kpis', 'dashboard_kpis')
    cards = [kpi_view(raw, currency) for raw in extract_kpis(result.payload)]
    visible = [c for c in cards if c.permission is None or gate_fragment(ctx, c.permission)]
    return dict(result.meta, data=[to_json(c) for c in visible])

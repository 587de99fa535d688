from __future__ import annotations
from flask import Blueprint, current_app, request
from stockdesk.constants.roles import Role, can_manage_catalog, can_view_only_catalog
from stockdesk.decorators.auth import role_route
from stockdesk.services.fetching import fetch
from stockdesk.services.session import load_session_context
from stockdesk.utils.filters import apply_filters
from stockdesk.utils.listing import list_response, to_json
from stockdesk.utils.normalize import extract_customers, extract_orders, extract_products, extract_records, extract_single
from stockdesk.viewmodels.customer import customer_view
from stockdesk.viewmodels.order import order_view
from stockdesk.viewmodels.product import product_view

catalog_bp = Blueprint('catalog', __name__)

ALL_ROLES = (Role.CEO, Role.MANAGER, Role.SALES)


def _currency():
    return current_app.config['CONSOLE_CURRENCY']


def _catalog_access():
    # drives edit controls on catalog tables; the backend still enforces writes
    role = load_session_context().role
    return {'access': {'can_manage': can_manage_catalog(role), 'read_only': can_view_only_catalog(role)}}


@catalog_bp.get('/customers')
@role_route(*ALL_ROLES)
def list_customers():
    result = fetch('customers', 'list_customers')
    rows = [customer_view(r, _currency()) for r in extract_customers(result.payload)]
    return list_response(
        rows,
        search_fields=('name', 'email', 'phone'),
        sortable=('name', 'total_spent', 'total_orders', 'status'),
        extra=result.meta,
    )


@catalog_bp.get('/customers/<customer_id>')
@role_route(*ALL_ROLES)
def get_customer(customer_id):
    raw = extract_single(fetch('customer', 'get_customer', customer_id).payload, 'customer')
    return to_json(customer_view(raw, _currency()))


@catalog_bp.get('/orders')
@role_route(*ALL_ROLES)
def list_orders():
    result = fetch('orders', 'list_orders')
    rows = [to_json(order_view(r, _currency())) for r in extract_orders(result.payload)]
    rows = apply_filters(rows, {'status': {'coerce': lambda v: v.lower()}}, request.args)
    return list_response(
        rows,
        search_fields=('customer_name', 'order_number'),
        sortable=('date', 'total', 'customer_name', 'status'),
        extra=result.meta,
    )


@catalog_bp.get('/products')
@role_route(*ALL_ROLES)
def list_products():
    result = fetch('products', 'list_products')
    rows = [to_json(product_view(r, _currency())) for r in extract_products(result.payload)]
    rows = apply_filters(rows, {'stock_status': {}, 'category': {'match': lambda a, b: (a or '').lower() == b.lower()}}, request.args)
    return list_response(
        rows,
        search_fields=('name', 'sku', 'category'),
        sortable=('name', 'selling_price', 'current_stock', 'category'),
        extra=dict(result.meta, **_catalog_access()),
    )


@catalog_bp.get('/inventory')
@role_route(Role.CEO, Role.MANAGER)
def list_inventory():
    result = fetch('inventory', 'list_inventory')
    rows = [to_json(product_view(r, _currency())) for r in extract_records(result.payload, 'inventory')]
    low = sum(1 for r in rows if r['stock_status'] in ('low_stock', 'out_of_stock'))
    return list_response(
        rows,
        search_fields=('name', 'sku'),
        sortable=('name', 'current_stock'),
        extra=dict(result.meta, **_catalog_access(), summary={'low_or_out_of_stock': low}),
    )

from stockdesk.services.session import FETCH_EXTENSION, SESSIONS_EXTENSION
from tests.test_utils_seed import jwt_headers


def _headers(app_instance, role, perms=(), **kwargs):
    with app_instance.app_context():
        return jwt_headers(role, perms, **kwargs)


def test_unauthenticated_users_page_redirects_to_login(client):
    resp = client.get('/dashboard/users')
    assert resp.status_code == 302
    assert resp.headers['Location'] == '/'


def test_sales_role_cannot_open_ceo_only_page(client, app_instance):
    resp = client.get('/dashboard/users/new', headers=_headers(app_instance, 'Sales'))
    assert resp.status_code == 302
    assert resp.headers['Location'] == '/dashboard'


def test_manager_blocked_from_new_user_but_sees_user_list(client, app_instance):
    headers = _headers(app_instance, 'Manager')
    assert client.get('/dashboard/users/new', headers=headers).status_code == 302
    assert client.get('/dashboard/users', headers=headers).status_code == 200


def test_invalid_token_counts_as_unauthenticated(client):
    resp = client.get('/dashboard', headers={'Authorization': 'Bearer not-a-jwt'})
    assert resp.status_code == 302
    assert resp.headers['Location'] == '/'


def test_refresh_in_flight_renders_loading_placeholder(client, app_instance):
    headers = _headers(app_instance, 'CEO', user_id='501')
    store = app_instance.extensions[SESSIONS_EXTENSION].store_for('501')
    generation = store.begin_refresh()
    try:
        resp = client.get('/dashboard/users', headers=headers)
        assert resp.status_code == 202
        assert resp.get_json()['state'] == 'loading'
    finally:
        store.complete_refresh(generation, None)
    assert client.get('/dashboard/users', headers=headers).status_code == 200


def test_dashboard_widgets_follow_permissions(client, app_instance):
    resp = client.get('/dashboard', headers=_headers(app_instance, 'Sales'))
    body = resp.get_json()
    assert resp.status_code == 200
    assert body['widgets'] == ['recent-activity']
    assert 'users' not in body['menu']

    resp = client.get('/dashboard', headers=_headers(app_instance, 'Sales', ['VIEW_KPI_GROSS_REVENUE']))
    assert 'kpi-gross-revenue' in resp.get_json()['widgets']
    # permission grants never widen the role menu
    assert 'reports' not in resp.get_json()['menu']


def test_kpi_cards_gated_individually(client, app_instance, backend):
    backend.respond('dashboard_kpis', {'data': [
        {'title': 'Gross Revenue', 'value': 1000, 'change': 4},
        {'title': 'Total Orders', 'value': 12, 'change': -1},
    ]})
    resp = client.get('/dashboard/kpis', headers=_headers(app_instance, 'Sales'))
    assert resp.get_json()['data'] == []

    resp = client.get('/dashboard/kpis', headers=_headers(app_instance, 'Sales', ['VIEW_KPI_TOTAL_ORDERS']))
    cards = resp.get_json()['data']
    assert [c['title'] for c in cards] == ['Total Orders']
    assert cards[0]['trend'] == 'down'


def test_customers_list_normalizes_any_envelope(client, app_instance, backend):
    headers = _headers(app_instance, 'Sales')
    for envelope in (
        [{'id': 1, 'firstName': 'Jane', 'lastName': 'Doe', 'totalSpent': 250}],
        {'items': [{'id': 1, 'firstName': 'Jane', 'lastName': 'Doe', 'totalSpent': 250}]},
        {'data': {'customers': [{'id': 1, 'firstName': 'Jane', 'lastName': 'Doe', 'totalSpent': 250}]}},
    ):
        backend.respond('list_customers', envelope)
        body = client.get('/dashboard/customers', headers=headers).get_json()
        assert body['pagination']['total'] == 1
        row = body['data'][0]
        assert row['name'] == 'Jane Doe'
        assert row['total_spent_display'] == 'GH₵250'


def test_customers_list_unexpected_shape_is_empty(client, app_instance, backend):
    backend.respond('list_customers', {'unexpected': True})
    body = client.get('/dashboard/customers', headers=_headers(app_instance, 'CEO')).get_json()
    assert body['data'] == []
    assert body['pagination']['total'] == 0


def test_customer_detail_uses_single_extraction(client, app_instance, backend):
    backend.respond('get_customer', {'data': {'customer': {'id': 'c9', 'email': 'x@example.com'}}})
    body = client.get('/dashboard/customers/c9', headers=_headers(app_instance, 'Sales')).get_json()
    assert body['id'] == 'c9'
    assert body['name'] == 'x@example.com'
    assert backend.calls == [('get_customer', ('c9',), None)]


def test_orders_search_sort_and_status_filter(client, app_instance, backend):
    backend.respond('list_orders', {'orders': [
        {'id': 1, 'customerName': 'Charlie', 'total': 50, 'status': 'Completed'},
        {'id': 2, 'customerName': 'Alpha', 'total': 75, 'status': 'pending'},
        {'id': 3, 'customerName': 'Bravo', 'total': 20, 'status': 'completed'},
    ]})
    headers = _headers(app_instance, 'Sales')
    body = client.get('/dashboard/orders?sort=-total', headers=headers).get_json()
    assert [o['id'] for o in body['data']] == ['2', '1', '3']
    body = client.get('/dashboard/orders?status=COMPLETED&sort=customer_name', headers=headers).get_json()
    assert [o['customer_name'] for o in body['data']] == ['Bravo', 'Charlie']
    body = client.get('/dashboard/orders?q=alp', headers=headers).get_json()
    assert [o['customer_name'] for o in body['data']] == ['Alpha']
    assert client.get('/dashboard/orders?sort=secret', headers=headers).status_code == 400


def test_products_pagination(client, app_instance, backend):
    backend.respond('list_products', {'results': [{'id': i, 'name': f'P{i:02d}', 'currentStock': i} for i in range(20)]})
    headers = _headers(app_instance, 'Manager')
    body = client.get('/dashboard/products?limit=5&page=2&sort=name', headers=headers).get_json()
    assert [p['name'] for p in body['data']] == ['P05', 'P06', 'P07', 'P08', 'P09']
    assert body['pagination'] == {'total': 20, 'limit': 5, 'offset': 5, 'returned': 5}
    body = client.get('/dashboard/products?stock_status=out_of_stock', headers=headers).get_json()
    assert [p['name'] for p in body['data']] == ['P00']
    assert client.get('/dashboard/products?limit=abc', headers=headers).status_code == 400


def test_inventory_is_manager_and_ceo_only(client, app_instance, backend):
    backend.respond('list_inventory', {'data': {'inventory': [
        {'id': 1, 'name': 'Rice', 'currentStock': 2, 'reorderThreshold': 5},
        {'id': 2, 'name': 'Oil', 'currentStock': 40, 'reorderThreshold': 5},
    ]}})
    resp = client.get('/dashboard/inventory', headers=_headers(app_instance, 'Sales'))
    assert resp.status_code == 302 and resp.headers['Location'] == '/dashboard'
    body = client.get('/dashboard/inventory', headers=_headers(app_instance, 'Manager')).get_json()
    assert body['summary'] == {'low_or_out_of_stock': 1}


def test_message_detail_with_recipients(client, app_instance, backend):
    backend.respond('get_message', {'data': {
        'message': {'id': 'm1', 'subject': 'Promo', 'type': 'sms', 'recipientCount': 2},
        'recipients': [{'customerName': 'Ama', 'status': 'Delivered'}, {'email': 'k@example.com'}],
    }})
    body = client.get('/dashboard/messaging/m1', headers=_headers(app_instance, 'CEO')).get_json()
    assert body['subject'] == 'Promo'
    assert [(r['name'], r['delivery_status']) for r in body['recipients']] == [
        ('Ama', 'delivered'), ('k@example.com', 'pending'),
    ]
    resp = client.get('/dashboard/messaging', headers=_headers(app_instance, 'Sales'))
    assert resp.status_code == 302


def test_backend_calls_carry_the_session_business(client, app_instance, backend):
    backend.respond('list_orders', [])
    backend.respond('get_message', {'id': 'm2'})
    client.get('/dashboard/orders', headers=_headers(app_instance, 'Sales', business_id='biz-7'))
    client.get('/dashboard/messaging/m2', headers=_headers(app_instance, 'CEO', business_id='biz-9'))
    assert backend.calls == [('list_orders', (), 'biz-7'), ('get_message', ('m2',), 'biz-9')]


def test_overtaken_fetch_is_flagged_superseded(client, app_instance, backend):
    tracker = app_instance.extensions[FETCH_EXTENSION]

    def newer_request_starts():
        tracker.begin('602:customers')
        return [{'id': 1, 'name': 'Old Snapshot'}]

    headers = _headers(app_instance, 'Sales', user_id='602')
    backend.respond('list_customers', newer_request_starts)
    body = client.get('/dashboard/customers', headers=headers).get_json()
    assert body['fetch']['superseded'] is True
    assert body['data'][0]['name'] == 'Old Snapshot'

    backend.respond('list_customers', [])
    body = client.get('/dashboard/customers', headers=headers).get_json()
    assert body['fetch']['superseded'] is False
    assert body['fetch']['generation'] == 3


def test_catalog_lists_report_edit_access_by_role(client, app_instance, backend):
    backend.respond('list_products', [])
    sales = client.get('/dashboard/products', headers=_headers(app_instance, 'Sales')).get_json()
    assert sales['access'] == {'can_manage': False, 'read_only': True}
    manager = client.get('/dashboard/products', headers=_headers(app_instance, 'Manager')).get_json()
    assert manager['access'] == {'can_manage': True, 'read_only': False}


def test_dashboard_sections_collapse_without_any_card_permission(client, app_instance):
    body = client.get('/dashboard', headers=_headers(app_instance, 'CEO')).get_json()
    assert body['sections'] == {'kpis': False, 'charts': False}
    body = client.get('/dashboard', headers=_headers(app_instance, 'Sales', ['VIEW_TOP_CUSTOMERS'])).get_json()
    assert body['sections'] == {'kpis': False, 'charts': True}


def test_user_list_reports_management_rights(client, app_instance):
    manager = client.get('/dashboard/users', headers=_headers(app_instance, 'Manager')).get_json()
    assert manager['can_manage'] is False
    ceo = client.get('/dashboard/users', headers=_headers(app_instance, 'CEO')).get_json()
    assert ceo['can_manage'] is True

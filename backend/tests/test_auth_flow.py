from stockdesk import get_db
from stockdesk.routes import auth as auth_routes
from stockdesk.services.session import SESSIONS_EXTENSION
from tests.test_utils_seed import ensure_user, login


def test_login_and_me(client):
    ensure_user('t@example.com', role='Sales Rep', permissions=['VIEW_ORDERS', 'RETIRED_KEY'],
                first_name='Tess', last_name='Tester')

    body = login(client, 't@example.com')
    assert body['normalized_role'] == 'Sales'
    assert body['permissions'] == ['VIEW_ORDERS']
    assert 'inventory' not in body['menu']
    token = body['access_token']

    me = client.get('/auth/me', headers={'Authorization': f'Bearer {token}'})
    assert me.status_code == 200
    data = me.get_json()
    assert data['email'] == 't@example.com'
    assert data['name'] == 'Tess Tester'
    assert data['role'] == 'Sales Rep'


def test_login_rejects_bad_credentials(client):
    ensure_user('bad@example.com')
    resp = client.post('/auth/login', json={'email': 'bad@example.com', 'password': 'nope'})
    assert resp.status_code == 401
    assert resp.get_json()['error']['status'] == 401
    resp = client.post('/auth/login', json={'email': 'bad@example.com'})
    assert resp.status_code == 400


def test_login_sets_cookie_session_used_by_gates(client):
    ensure_user('cookie@example.com', role='CEO')
    login(client, 'cookie@example.com')
    # no Authorization header: the access cookie carries the session
    resp = client.get('/dashboard')
    assert resp.status_code == 200
    assert resp.get_json()['user']['role'] == 'CEO'
    client.post('/auth/logout')
    resp = client.get('/dashboard')
    assert resp.status_code == 302
    assert resp.headers['Location'].endswith('/')


def test_refresh_picks_up_permission_changes(client):
    user = ensure_user('refresh@example.com', role='Manager')
    token = login(client, 'refresh@example.com')['access_token']
    session = get_db()
    user = session.merge(user)
    user.permissions = ['VIEW_REPORTS']
    session.commit()
    resp = client.post('/auth/refresh', headers={'Authorization': f'Bearer {token}'})
    assert resp.status_code == 200
    assert resp.get_json()['permissions'] == ['VIEW_REPORTS']


def test_overtaken_refresh_is_rejected(client, app_instance, monkeypatch):
    user = ensure_user('race@example.com', role='Manager')
    token = login(client, 'race@example.com')['access_token']
    registry = app_instance.extensions[SESSIONS_EXTENSION]
    real = get_db()

    class NewerRefreshStartsMidway:
        def get(self, model, ident):
            registry.store_for(str(ident)).begin_refresh()
            return real.get(model, ident)

    monkeypatch.setattr(auth_routes, 'get_db', lambda: NewerRefreshStartsMidway())
    resp = client.post('/auth/refresh', headers={'Authorization': f'Bearer {token}'})
    assert resp.status_code == 409
    # the newer refresh is still pending, so gates hold this user in loading
    assert registry.peek(str(user.id)).loading
    assert client.get('/dashboard', headers={'Authorization': f'Bearer {token}'}).status_code == 202

    client.post('/auth/logout', headers={'Authorization': f'Bearer {token}'})
    assert not registry.peek(str(user.id)).loading
    assert client.get('/dashboard', headers={'Authorization': f'Bearer {token}'}).status_code == 200

import os, sys, pytest
# Ensure backend directory is on path so 'stockdesk' and 'tests' can be imported
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)
from stockdesk import create_app, get_db, BACKEND_EXTENSION
from stockdesk.models.user import Base
from stockdesk.utils.errors import BackendError


class FakeBackend:
    """Stands in for BackendClient; payloads are set per test via `respond`."""

    def __init__(self):
        self.reset()

    def reset(self):
        self.payloads = {}
        self.calls = []

    def respond(self, name, payload):
        self.payloads[name] = payload

    def _answer(self, name, *args, business_id=None):
        self.calls.append((name, args, business_id))
        payload = self.payloads.get(name)
        if callable(payload):
            # lets a test act while the request is "in flight"
            payload = payload()
        if isinstance(payload, BackendError):
            raise payload
        return payload

    def list_customers(self, business_id=None, **params):
        return self._answer('list_customers', business_id=business_id)

    def get_customer(self, customer_id, business_id=None):
        return self._answer('get_customer', customer_id, business_id=business_id)

    def list_orders(self, business_id=None, **params):
        return self._answer('list_orders', business_id=business_id)

    def list_products(self, business_id=None, **params):
        return self._answer('list_products', business_id=business_id)

    def list_inventory(self, business_id=None, **params):
        return self._answer('list_inventory', business_id=business_id)

    def list_messages(self, business_id=None, **params):
        return self._answer('list_messages', business_id=business_id)

    def get_message(self, message_id, business_id=None):
        return self._answer('get_message', message_id, business_id=business_id)

    def dashboard_kpis(self, business_id=None, **params):
        return self._answer('dashboard_kpis', business_id=business_id)


@pytest.fixture(scope='session', autouse=True)
def app_instance():
    app = create_app({
        'DATABASE_URL': 'sqlite+pysqlite:///:memory:',
        'JWT_SECRET_KEY': 'test-secret',
        'BACKEND_CLIENT': FakeBackend(),
        'TESTING': True,
    })
    with app.app_context():
        engine = get_db().get_bind()
        Base.metadata.create_all(engine)
    yield app


@pytest.fixture()
def client(app_instance):
    return app_instance.test_client()


@pytest.fixture()
def backend(app_instance):
    fake = app_instance.extensions[BACKEND_EXTENSION]
    fake.reset()
    return fake

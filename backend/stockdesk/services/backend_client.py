from __future__ import annotations
from typing import Any, Dict, Optional
import logging
import requests
from stockdesk.utils.errors import BackendError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0
BUSINESS_HEADER = 'X-Business-Id'


class BackendClient:
    """Thin JSON client for the inventory REST backend.

    Responses are returned exactly as decoded; shaping is left to utils.normalize.
    Calls authenticate with the configured service token and carry the tenant in
    the X-Business-Id header.
    """

    def __init__(self, base_url: str, timeout: float = DEFAULT_TIMEOUT, session: Optional[requests.Session] = None,
                 token: Optional[str] = None):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.token = token
        self.session = session or requests.Session()

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def _headers(self, business_id: Optional[str]) -> Dict[str, str]:
        headers = {'Accept': 'application/json'}
        if self.token:
            headers['Authorization'] = f'Bearer {self.token}'
        if business_id:
            headers[BUSINESS_HEADER] = str(business_id)
        return headers

    def get(self, path: str, params: Optional[Dict[str, Any]] = None, business_id: Optional[str] = None) -> Any:
        headers = self._headers(business_id)
        url = self._url(path)
        try:
            resp = self.session.get(url, params=params, headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error('Backend request to %s failed: %s', url, e)
            raise BackendError('Backend unavailable', status=502, code='BACKEND_UNAVAILABLE') from e
        try:
            payload = resp.json() if resp.content else None
        except ValueError:
            payload = None
        if not resp.ok:
            logger.warning('Backend %s returned %s', url, resp.status_code)
            raise BackendError.from_payload(resp.status_code, payload, fallback=resp.reason or 'Backend error')
        return payload

    def list_customers(self, business_id: Optional[str] = None, **params) -> Any:
        return self.get('/customers', params=params or None, business_id=business_id)

    def get_customer(self, customer_id: str, business_id: Optional[str] = None) -> Any:
        return self.get(f'/customers/{customer_id}', business_id=business_id)

    def list_orders(self, business_id: Optional[str] = None, **params) -> Any:
        return self.get('/orders', params=params or None, business_id=business_id)

    def list_products(self, business_id: Optional[str] = None, **params) -> Any:
        return self.get('/products', params=params or None, business_id=business_id)

    def list_inventory(self, business_id: Optional[str] = None, **params) -> Any:
        return self.get('/inventory', params=params or None, business_id=business_id)

    def list_messages(self, business_id: Optional[str] = None, **params) -> Any:
        return self.get('/messages', params=params or None, business_id=business_id)

    def get_message(self, message_id: str, business_id: Optional[str] = None) -> Any:
        return self.get(f'/messages/{message_id}', business_id=business_id)

    def dashboard_kpis(self, business_id: Optional[str] = None, **params) -> Any:
        return self.get('/analytics/kpis', params=params or None, business_id=business_id)

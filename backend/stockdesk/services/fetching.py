"""Backend fetches made on behalf of the requesting console session.

Every fetch is scoped to the session's business and numbered per (user, site). When a
newer fetch for the same site starts before an older one returns, the older result is
flagged as superseded so the console can drop it instead of overwriting fresher data.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict
import logging
from stockdesk import get_backend
from stockdesk.services.session import get_fetch_tracker, load_session_context

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FetchResult:
    payload: Any
    site: str
    generation: int
    superseded: bool = False

    @property
    def meta(self) -> Dict[str, Any]:
        return {'fetch': {'site': self.site, 'generation': self.generation, 'superseded': self.superseded}}


def fetch(site: str, method: str, *args, **params) -> FetchResult:
    """Call BackendClient.<method> for the current (authenticated) session."""
    user = load_session_context().user
    tracker = get_fetch_tracker()
    key = f'{user.id}:{site}'
    token = tracker.begin(key)
    payload = getattr(get_backend(), method)(*args, business_id=user.business_id, **params)
    superseded = not tracker.is_current(key, token)
    if superseded:
        logger.debug('Fetch %s #%s superseded by a newer request', key, token)
    return FetchResult(payload, site, token, superseded)

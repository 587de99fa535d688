from functools import wraps
from flask import redirect
from stockdesk.services import session as session_service
from stockdesk.services.gates import GateState, evaluate_gate
from stockdesk.constants.permissions import CatalogError, group_for
from stockdesk.services.policy import resolve_allow_list

LOADING_PLACEHOLDER = {'state': GateState.LOADING.value, 'detail': 'Loading...'}


def _gate(allowed_roles=(), required_permission=None):
    def outer(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            decision = evaluate_gate(session_service.load_session_context(), allowed_roles, required_permission)
            if decision.state is GateState.LOADING:
                return LOADING_PLACEHOLDER, 202
            if decision.redirect_to:
                return redirect(decision.redirect_to)
            return fn(*args, **kwargs)
        return wrapper
    return outer


def role_route(*roles):
    """Allow the view only for sessions whose normalized role is in `roles`.

    Roles are resolved when the route is declared, so a misspelt name fails at import.
    """
    return _gate(allowed_roles=resolve_allow_list(roles))


def protected_route(permission=None):
    """Require an authenticated session and, optionally, one explicit permission key."""
    if permission is not None and group_for(permission) is None:
        raise CatalogError(f"Unknown permission key {permission!r}")
    return _gate(required_permission=permission)

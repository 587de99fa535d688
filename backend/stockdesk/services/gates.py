"""Gate evaluation shared by route decorators and in-page widget filters.

States: LOADING -> {AUTHENTICATED, UNAUTHENTICATED}; AUTHENTICATED -> {AUTHORIZED, UNAUTHORIZED}.
AUTHORIZED, UNAUTHORIZED and UNAUTHENTICATED are terminal.
"""
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Tuple
from stockdesk.services.policy import (
    has_permission,
    is_role_allowed,
    redirect_target,
)
from stockdesk.services.session import SessionContext
from stockdesk.utils.fsm import TransitionValidator


class GateState(str, Enum):
    LOADING = 'loading'
    AUTHENTICATED = 'authenticated'
    UNAUTHENTICATED = 'unauthenticated'
    AUTHORIZED = 'authorized'
    UNAUTHORIZED = 'unauthorized'


GATE_FSM = TransitionValidator({
    GateState.LOADING: {GateState.AUTHENTICATED, GateState.UNAUTHENTICATED},
    GateState.AUTHENTICATED: {GateState.AUTHORIZED, GateState.UNAUTHORIZED},
    GateState.AUTHORIZED: set(),
    GateState.UNAUTHORIZED: set(),
    GateState.UNAUTHENTICATED: set(),
}, field_name='gate state')


@dataclass(frozen=True)
class GateDecision:
    state: GateState
    redirect_to: Optional[str] = None
    path: Tuple[GateState, ...] = ()

    @property
    def allowed(self) -> bool:
        return self.state is GateState.AUTHORIZED


def evaluate_gate(
    context: SessionContext,
    allowed_roles: Sequence = (),
    required_permission: Optional[str] = None,
) -> GateDecision:
    if context.loading:
        return GateDecision(GateState.LOADING, path=(GateState.LOADING,))
    if not context.authenticated:
        path = GATE_FSM.assert_path((GateState.LOADING, GateState.UNAUTHENTICATED))
        return GateDecision(GateState.UNAUTHENTICATED, redirect_target(False), tuple(path))
    authorized = is_role_allowed(context.user.role, allowed_roles)
    if authorized and required_permission:
        authorized = has_permission(context.user, required_permission)
    final = GateState.AUTHORIZED if authorized else GateState.UNAUTHORIZED
    path = GATE_FSM.assert_path((GateState.LOADING, GateState.AUTHENTICATED, final))
    return GateDecision(final, None if authorized else redirect_target(True), tuple(path))


def gate_fragment(context: SessionContext, permission: str) -> bool:
    """Component-level gate: True when the fragment guarded by `permission` may render."""
    if context.loading or not context.authenticated:
        return False
    return has_permission(context.user, permission)


def visible_widgets(context: SessionContext, widgets: Iterable) -> List:
    """Filter (permission, payload) pairs down to the payloads the session may see."""
    return [payload for permission, payload in widgets if permission is None or gate_fragment(context, permission)]

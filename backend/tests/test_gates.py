import pytest
from stockdesk.constants.roles import Role
from stockdesk.services.gates import GATE_FSM, GateState, evaluate_gate, gate_fragment, visible_widgets
from stockdesk.services.session import SessionContext, SessionUser
from stockdesk.utils.fsm import InvalidTransition, TransitionValidator


def _ctx(role='Sales', perms=()):
    return SessionContext(user=SessionUser(id='1', role=role, permissions=frozenset(perms)))


def test_loading_renders_placeholder_without_redirect():
    decision = evaluate_gate(SessionContext(loading=True), [Role.CEO])
    assert decision.state is GateState.LOADING
    assert decision.redirect_to is None
    assert not decision.allowed


def test_unauthenticated_redirects_to_login():
    decision = evaluate_gate(SessionContext(), [Role.CEO, Role.MANAGER])
    assert decision.state is GateState.UNAUTHENTICATED
    assert decision.redirect_to == '/'


def test_unauthorized_role_redirects_to_dashboard():
    decision = evaluate_gate(_ctx('Sales'), [Role.CEO])
    assert decision.state is GateState.UNAUTHORIZED
    assert decision.redirect_to == '/dashboard'
    assert decision.path == (GateState.LOADING, GateState.AUTHENTICATED, GateState.UNAUTHORIZED)


def test_missing_permission_redirects_to_dashboard():
    decision = evaluate_gate(_ctx('CEO'), required_permission='VIEW_REPORTS')
    assert decision.redirect_to == '/dashboard'


def test_authorized_is_terminal():
    decision = evaluate_gate(_ctx('owner', ['VIEW_REPORTS']), [Role.CEO], 'VIEW_REPORTS')
    assert decision.allowed
    assert decision.redirect_to is None
    assert GATE_FSM.is_terminal(decision.state)


def test_gate_fsm_rejects_skipping_authentication():
    with pytest.raises(InvalidTransition):
        GATE_FSM.assert_can_transition(GateState.LOADING, GateState.AUTHORIZED)
    with pytest.raises(InvalidTransition):
        GATE_FSM.assert_can_transition(GateState.UNAUTHORIZED, GateState.AUTHORIZED)


def test_transition_validator_path():
    fsm = TransitionValidator({'A': {'B'}, 'B': {'C'}})
    assert fsm.assert_path(['A', 'B', 'C']) == ['A', 'B', 'C']
    with pytest.raises(InvalidTransition):
        fsm.assert_path(['A', 'C'])


def test_fragment_gates_follow_permissions_only():
    assert not gate_fragment(_ctx('CEO'), 'VIEW_KPI_GROSS_REVENUE')
    assert gate_fragment(_ctx('Sales', ['VIEW_KPI_GROSS_REVENUE']), 'VIEW_KPI_GROSS_REVENUE')
    assert not gate_fragment(SessionContext(loading=True), 'VIEW_KPI_GROSS_REVENUE')


def test_visible_widgets_filters_by_permission():
    widgets = [('VIEW_KPI_GROSS_REVENUE', 'gross'), ('VIEW_KPI_TOTAL_ORDERS', 'orders'), (None, 'activity')]
    assert visible_widgets(_ctx('Sales', ['VIEW_KPI_TOTAL_ORDERS']), widgets) == ['orders', 'activity']

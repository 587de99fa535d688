"""Simple finite state machine utility for enforcing allowed state transitions.

Used by the route gates:
    from stockdesk.utils.fsm import TransitionValidator
    GATE_FSM = TransitionValidator({
        'LOADING': {'AUTHENTICATED', 'UNAUTHENTICATED'},
        'AUTHENTICATED': {'AUTHORIZED', 'UNAUTHORIZED'},
    }, field_name='gate state')
    GATE_FSM.assert_can_transition(current, target)

Raises InvalidTransition if the edge is not in the graph.
"""
from __future__ import annotations
from typing import Dict, Hashable, Iterable, List, Set


class InvalidTransition(ValueError):
    pass


class TransitionValidator:
    def __init__(self, graph: Dict[Hashable, Set[Hashable]], field_name: str = 'status'):
        self.graph = graph
        self.field_name = field_name

    def can_transition(self, current, target) -> bool:
        return target in self.graph.get(current, set())

    def assert_can_transition(self, current, target):
        if not self.can_transition(current, target):
            raise InvalidTransition(f"Invalid {self.field_name} transition {current} -> {target}")
        return True

    def assert_path(self, states: Iterable) -> List:
        """Validate every consecutive edge of a path and return it as a list."""
        path = list(states)
        for current, target in zip(path, path[1:]):
            self.assert_can_transition(current, target)
        return path

    def is_terminal(self, state) -> bool:
        return not self.graph.get(state)

__all__ = ['TransitionValidator', 'InvalidTransition']

"""Turn-based session services: registry, turn rules and fan-out.

Everything here is transport-agnostic. Socket handlers talk to the
SessionCoordinator only; it hands outbound envelopes to whatever sender
the application factory wires in.
"""

from .coordinator import SessionCoordinator
from .state import GameState, PostRejected, SessionPhase, TurnController
from .registry import ConnectionRegistry, Participant

__all__ = [
    'SessionCoordinator',
    'GameState',
    'PostRejected',
    'SessionPhase',
    'TurnController',
    'ConnectionRegistry',
    'Participant',
]

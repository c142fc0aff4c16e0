"""Shared game state and the turn-advancement rules that mutate it."""

import logging
from enum import Enum
from typing import List, Optional

from .registry import ConnectionRegistry, Participant


NOT_YOUR_TURN = 'not_your_turn'
QUOTA_EXHAUSTED = 'quota_exhausted'


class SessionPhase(str, Enum):
    EMPTY = 'empty'
    SINGLE = 'single_participant'
    MULTI = 'multi_participant'


class PostRejected(Exception):
    """A post attempt that breaks the turn or quota rules.

    Recoverable and reported to the sender only.
    """

    def __init__(self, reason: str, message: str):
        super().__init__(message)
        self.reason = reason
        self.message = message


class GameState:
    """The single source of truth for the session. Mutate via TurnController only."""

    def __init__(self):
        self.turn_order: List[str] = []
        self.current_turn = 0
        self.messages: List[str] = []
        self.is_active = False

    @property
    def current_player(self) -> Optional[str]:
        if not self.turn_order:
            return None
        return self.turn_order[self.current_turn]

    @property
    def phase(self) -> SessionPhase:
        if not self.turn_order:
            return SessionPhase.EMPTY
        if len(self.turn_order) == 1:
            return SessionPhase.SINGLE
        return SessionPhase.MULTI

    def to_dict(self):
        return {
            'currentTurn': self.current_turn,
            'turnOrder': list(self.turn_order),
            'messages': list(self.messages),
            'isGameActive': self.is_active,
            'currentPlayer': self.current_player,
        }


class TurnController:
    def __init__(self, state: GameState, registry: ConnectionRegistry,
                 messages_per_turn: int = 3, logger: Optional[logging.Logger] = None):
        self.state = state
        self.registry = registry
        self.messages_per_turn = messages_per_turn
        self.logger = logger or logging.getLogger(__name__)

    def join(self, name: str) -> bool:
        """Seat ``name`` at the end of the turn order. Returns False if already seated."""
        state = self.state
        if name in state.turn_order:
            return False
        before = state.phase
        state.turn_order.append(name)
        if len(state.turn_order) == 1:
            state.current_turn = 0
        state.is_active = True
        self.logger.info(f"[join] {name} turn_order={', '.join(state.turn_order)} current={state.current_player}")
        self._log_phase(before)
        return True

    def post(self, participant: Participant, content: str) -> str:
        """Append a message for ``participant`` and apply the quota rules.

        Returns the rendered log entry. Raises PostRejected without touching
        any state when the sender does not hold the turn or has no posts left.
        """
        state = self.state
        current = state.current_player
        name = participant.name
        if name is None or name != current:
            if current is None:
                raise PostRejected(NOT_YOUR_TURN, 'No one holds the turn right now!')
            raise PostRejected(NOT_YOUR_TURN, f"It's {current}'s turn!")
        # The earliest live connection bound to a name is the only one that posts for it
        if self.registry.owner_of(name) != participant.handle:
            raise PostRejected(NOT_YOUR_TURN, f"{name} is already playing from another connection!")
        if participant.messages_this_turn >= self.messages_per_turn:
            raise PostRejected(QUOTA_EXHAUSTED, 'You have used all your messages for this turn!')

        entry = f"{name}: {content}"
        state.messages.append(entry)
        participant.messages_this_turn += 1
        self.logger.info(f"[post] {name} sent message {participant.messages_this_turn}/{self.messages_per_turn}")

        if participant.messages_this_turn >= self.messages_per_turn:
            if len(state.turn_order) > 1:
                self.advance()
            else:
                participant.messages_this_turn = 0
                self.logger.info(f"[turn] single participant, message count reset for {name}")
        return entry

    def advance(self) -> None:
        state = self.state
        if not state.turn_order:
            return
        state.current_turn = (state.current_turn + 1) % len(state.turn_order)
        self.reset_quotas()
        self.logger.info(f"[turn] turn changed to {state.current_player}")

    def leave(self, name: str) -> bool:
        """Remove ``name`` from the turn order and repair the turn pointer.

        Returns False when the name was not seated.
        """
        state = self.state
        if name not in state.turn_order:
            return False
        before = state.phase
        holder = state.current_player
        index = state.turn_order.index(name)
        del state.turn_order[index]

        if not state.turn_order:
            state.current_turn = 0
            state.is_active = False
        else:
            # Later slots shift down by one, so follow the holder down with them
            if index <= state.current_turn:
                state.current_turn = max(0, state.current_turn - 1)
            if state.current_player != holder:
                self.reset_quotas()

        self.logger.info(
            f"[leave] {name} turn_order={', '.join(state.turn_order) or '-'} current={state.current_player or 'none'}"
        )
        self._log_phase(before)
        return True

    def hand_over(self, name: str, used: int) -> None:
        """Carry posts already made this turn over to the next connection for ``name``."""
        handle = self.registry.owner_of(name)
        if handle is None or name != self.state.current_player:
            return
        successor = self.registry.get(handle)
        successor.messages_this_turn = max(successor.messages_this_turn, used)
        self.logger.info(f"[handover] {name} now posts from handle={handle} used={successor.messages_this_turn}")

    def reset_quotas(self) -> None:
        for participant in self.registry:
            participant.messages_this_turn = 0

    def _log_phase(self, before: SessionPhase) -> None:
        after = self.state.phase
        if after != before:
            self.logger.info(f"[phase] {before.value} -> {after.value}")

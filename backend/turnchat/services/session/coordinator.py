import logging
import threading
from typing import Any, Dict, Optional

from .broadcast import Broadcaster, Outbox, Sender
from .registry import ConnectionRegistry
from .state import GameState, PostRejected, TurnController


class SessionCoordinator:
    """Owns the shared session and serializes every change to it.

    Each operation takes the lock, mutates state, queues its outbound
    envelopes, releases the lock and only then sends. Recipients whose send
    fails are disconnected through the same path as an explicit close.
    """

    def __init__(self, send: Sender, messages_per_turn: int = 3, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)
        self._lock = threading.RLock()
        self.registry = ConnectionRegistry(self.logger)
        self.state = GameState()
        self.turns = TurnController(self.state, self.registry, messages_per_turn, self.logger)
        self.broadcaster = Broadcaster(send, self.logger)

    def connect(self, handle: str) -> None:
        outbox = Outbox()
        with self._lock:
            self.registry.register(handle)
            self.broadcaster.sync(outbox, handle, self.state)
        self._flush(outbox)

    def join(self, handle: str, name: str) -> str:
        """Bind ``name`` to the connection and seat it. Returns the seated name.

        A connection keeps the first name it joined with; later join frames on
        it re-seat that name instead of claiming a new one.
        """
        outbox = Outbox()
        with self._lock:
            self.registry.register(handle)
            self.registry.bind_identity(handle, name)
            seated = self.registry.name_of(handle)
            self.turns.join(seated)
            self.broadcaster.broadcast_state(outbox, self.registry, self.state)
        self._flush(outbox)
        return seated

    def post(self, handle: str, content: str) -> Optional[str]:
        """Attempt a post. Returns the rendered log entry, or None if rejected."""
        outbox = Outbox()
        entry = None
        with self._lock:
            participant = self.registry.get(handle)
            if participant is None or not participant.is_bound:
                self.logger.info(f"[post-reject] handle={handle} has not joined")
                self.broadcaster.reject(outbox, handle, 'Join the game before sending messages!')
            else:
                try:
                    entry = self.turns.post(participant, content)
                except PostRejected as exc:
                    self.logger.info(f"[post-reject] {participant.name} reason={exc.reason}: {exc.message}")
                    self.broadcaster.reject(outbox, handle, exc.message)
                else:
                    self.broadcaster.broadcast_message(outbox, self.registry, entry)
                    self.broadcaster.broadcast_state(outbox, self.registry, self.state)
        self._flush(outbox)
        return entry

    def disconnect(self, handle: str) -> None:
        outbox = Outbox()
        with self._lock:
            if handle not in self.registry:
                return
            used = self.registry.get(handle).messages_this_turn
            name = self.registry.unregister(handle)
            # Another live connection may still hold this name after a reconnect
            if name is not None and self.registry.is_claimed(name):
                self.turns.hand_over(name, used)
            elif name is not None:
                self.turns.leave(name)
            self.broadcaster.broadcast_state(outbox, self.registry, self.state)
        self._flush(outbox)

    def snapshot(self) -> Dict[str, Any]:
        with self._lock:
            return self.state.to_dict()

    def health(self) -> Dict[str, Any]:
        with self._lock:
            return {
                'status': 'ok',
                'connections': len(self.registry),
                'phase': self.state.phase.value,
            }

    def _flush(self, outbox: Outbox) -> None:
        for handle in self.broadcaster.deliver(outbox):
            self.disconnect(handle)

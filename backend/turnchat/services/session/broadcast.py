import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

from .registry import ConnectionRegistry
from .state import GameState


Envelope = Dict[str, Any]
Sender = Callable[[str, Envelope], None]


def state_envelope(state: GameState) -> Envelope:
    return {'type': 'gameState', 'data': state.to_dict()}


def message_envelope(entry: str) -> Envelope:
    return {'type': 'newMessage', 'data': entry}


def error_envelope(message: str) -> Envelope:
    return {'type': 'error', 'data': message}


class Outbox:
    """Envelopes queued under the session lock, delivered after it is released."""

    def __init__(self):
        self.deliveries: List[Tuple[str, Envelope]] = []

    def to(self, handle: str, envelope: Envelope) -> None:
        self.deliveries.append((handle, envelope))

    def to_all(self, registry: ConnectionRegistry, envelope: Envelope) -> None:
        registry.for_each(lambda participant: self.to(participant.handle, envelope))

    def __len__(self) -> int:
        return len(self.deliveries)


class Broadcaster:
    def __init__(self, send: Sender, logger: Optional[logging.Logger] = None):
        self.send = send
        self.logger = logger or logging.getLogger(__name__)

    def sync(self, outbox: Outbox, handle: str, state: GameState) -> None:
        outbox.to(handle, state_envelope(state))

    def broadcast_state(self, outbox: Outbox, registry: ConnectionRegistry, state: GameState) -> None:
        outbox.to_all(registry, state_envelope(state))

    def broadcast_message(self, outbox: Outbox, registry: ConnectionRegistry, entry: str) -> None:
        outbox.to_all(registry, message_envelope(entry))

    def reject(self, outbox: Outbox, handle: str, message: str) -> None:
        outbox.to(handle, error_envelope(message))

    def deliver(self, outbox: Outbox) -> List[str]:
        """Send every queued envelope. Returns the handles whose send failed.

        A failing recipient is skipped for the rest of the outbox; the others
        still receive everything.
        """
        failed: List[str] = []
        for handle, envelope in outbox.deliveries:
            if handle in failed:
                continue
            try:
                self.send(handle, envelope)
            except Exception as exc:
                self.logger.warning(f"[send-fail] handle={handle} type={envelope.get('type')} error={exc}")
                failed.append(handle)
        return failed

import logging
from typing import Callable, Dict, Iterator, Optional


class Participant:
    """One live connection and the name it has claimed, if any."""

    def __init__(self, handle: str):
        # Routing key for outbound frames only (the Socket.IO sid)
        self.handle = handle
        self.name: Optional[str] = None
        self.messages_this_turn = 0

    @property
    def is_bound(self) -> bool:
        return self.name is not None


class ConnectionRegistry:
    """Maps live connection handles to their Participant records.

    The registry only tracks connection -> name bindings. Whether a name may
    take a seat in the turn order is decided by the TurnController.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self._participants: Dict[str, Participant] = {}
        self.logger = logger or logging.getLogger(__name__)

    def register(self, handle: str) -> str:
        if handle not in self._participants:
            self._participants[handle] = Participant(handle)
            self.logger.info(f"[connect] handle={handle} connections={len(self._participants)}")
        return handle

    def bind_identity(self, handle: str, name: str) -> bool:
        """Bind ``name`` to the connection. Returns False if it was already bound."""
        participant = self._participants.get(handle)
        if participant is None or participant.is_bound:
            return False
        participant.name = name
        return True

    def unregister(self, handle: str) -> Optional[str]:
        participant = self._participants.pop(handle, None)
        if participant is None:
            return None
        self.logger.info(f"[disconnect] handle={handle} name={participant.name} connections={len(self._participants)}")
        return participant.name

    def get(self, handle: str) -> Optional[Participant]:
        return self._participants.get(handle)

    def name_of(self, handle: str) -> Optional[str]:
        participant = self._participants.get(handle)
        return participant.name if participant else None

    def is_claimed(self, name: str) -> bool:
        return any(p.name == name for p in self._participants.values())

    def owner_of(self, name: str) -> Optional[str]:
        """Handle of the earliest live connection still bound to ``name``."""
        for participant in self._participants.values():
            if participant.name == name:
                return participant.handle
        return None

    def for_each(self, fn: Callable[[Participant], None]) -> None:
        # Copy first so fn may unregister connections while we iterate
        for participant in list(self._participants.values()):
            fn(participant)

    def __contains__(self, handle) -> bool:
        return handle in self._participants

    def __iter__(self) -> Iterator[Participant]:
        return iter(list(self._participants.values()))

    def __len__(self) -> int:
        return len(self._participants)

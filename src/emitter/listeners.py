from __future__ import annotations

import logging
from enum import Enum
from threading import RLock
from typing import Any, List, Optional, Tuple

from .registry import Listener, ListenerRegistry

logger = logging.getLogger(__name__)


class OnceListener:
    """Wrapper registered in place of a listener that must fire at most once.

    The wrapper removes itself from the registry before delegating, so a
    nested emit of the same event cannot reach it again.
    """

    def __init__(self, registry: ListenerRegistry, name: str, listener: Listener) -> None:
        self._registry = registry
        self.name = name
        self.listener = listener
        self.fired = False

    def __call__(self, payload: Any) -> None:
        if not self._registry.remove(self.name, self):
            return
        self.fired = True
        logger.debug("One-shot listener for '%s' fired", self.name)
        self.listener(payload)

    def cancel(self) -> None:
        self._registry.remove(self.name, self)

    def __repr__(self) -> str:
        return f"OnceListener(name={self.name!r}, listener={self.listener!r})"


class RaceState(Enum):
    PENDING = "pending"
    SETTLED = "settled"
    CANCELLED = "cancelled"


class RaceGroup:
    """The registrations created by one ``race`` call.

    The first member to fire settles the group, which removes every member
    from the registry. Settling and cancelling are both terminal.
    """

    def __init__(self, registry: ListenerRegistry) -> None:
        self._registry = registry
        self._lock = RLock()
        self.members: List[RaceListener] = []
        self.state = RaceState.PENDING
        self.winner: Optional[str] = None

    def add(self, name: str, listener: Listener) -> "RaceListener":
        member = RaceListener(self, name, listener)
        self.members.append(member)
        return member

    def _unregister_all(self) -> None:
        for member in self.members:
            self._registry.remove(member.name, member)

    def settle(self, name: str) -> bool:
        """Claim the win for ``name``. Returns False if the group already finished."""
        with self._lock:
            if self.state is not RaceState.PENDING:
                return False
            self.state = RaceState.SETTLED
            self.winner = name
            self._unregister_all()
        logger.debug("Race settled by '%s' (%d members removed)", name, len(self.members))
        return True

    def cancel(self) -> None:
        with self._lock:
            if self.state is RaceState.PENDING:
                self.state = RaceState.CANCELLED
                logger.debug("Race cancelled before any of %s fired", self.event_names)
            self._unregister_all()

    @property
    def event_names(self) -> Tuple[str, ...]:
        return tuple(member.name for member in self.members)


class RaceListener:
    """One (event name, listener) member of a :class:`RaceGroup`."""

    def __init__(self, group: RaceGroup, name: str, listener: Listener) -> None:
        self.group = group
        self.name = name
        self.listener = listener

    def __call__(self, payload: Any) -> None:
        if self.group.settle(self.name):
            self.listener(payload)

    def __repr__(self) -> str:
        return f"RaceListener(name={self.name!r}, listener={self.listener!r})"

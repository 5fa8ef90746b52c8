from __future__ import annotations

import logging
from dataclasses import dataclass
from threading import RLock
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

Listener = Callable[[Any], Any]


def describe_listener(listener: Listener) -> str:
    return getattr(listener, "__name__", None) or repr(listener)


def _index_of(entries: List["Registration"], listener: Listener) -> int:
    for i, entry in enumerate(entries):
        if entry.listener is listener:
            return i
    return -1


@dataclass(eq=False)
class Registration:
    """One listener's place in a name's list.

    A listener that is removed and registered again gets a new Registration,
    which lets dispatch tell it apart from the entry it snapshotted.
    """

    listener: Listener


class ListenerRegistry:
    """Thread-safe mapping of event name to an ordered list of listeners.

    Listeners are compared by identity, never by equality, so two distinct
    callables that happen to compare equal are still kept apart. A name whose
    last listener is removed is dropped from the mapping.
    """

    def __init__(self) -> None:
        self._entries: Dict[str, List[Registration]] = {}
        self._lock = RLock()

    def add(self, name: str, listener: Listener) -> bool:
        """Append ``listener`` to ``name``. Returns False if it was already there."""
        with self._lock:
            entries = self._entries.setdefault(name, [])
            if _index_of(entries, listener) != -1:
                logger.debug("Listener %s already registered for '%s'", describe_listener(listener), name)
                return False
            entries.append(Registration(listener))
            logger.debug("Registered listener %s for '%s'", describe_listener(listener), name)
            return True

    def remove(self, name: str, listener: Listener) -> bool:
        """Remove ``listener`` from ``name``. Silently ignores if not present."""
        with self._lock:
            entries = self._entries.get(name)
            if not entries:
                return False
            i = _index_of(entries, listener)
            if i == -1:
                return False
            del entries[i]
            if not entries:
                del self._entries[name]
            logger.debug("Removed listener %s from '%s'", describe_listener(listener), name)
            return True

    def find(self, name: str, predicate: Callable[[Listener], bool]) -> Optional[Listener]:
        """Return the earliest listener on ``name`` matching ``predicate``."""
        with self._lock:
            for entry in self._entries.get(name, []):
                if predicate(entry.listener):
                    return entry.listener
        return None

    def contains(self, name: str, listener: Listener) -> bool:
        """True if ``listener`` is currently registered for ``name``."""
        with self._lock:
            return _index_of(self._entries.get(name, []), listener) != -1

    def is_live(self, name: str, registration: Registration) -> bool:
        """True if this exact registration has not been removed since it was snapshotted."""
        with self._lock:
            return any(entry is registration for entry in self._entries.get(name, []))

    def registrations(self, name: str) -> List[Registration]:
        """Copy of the registrations for ``name``, used by dispatch."""
        with self._lock:
            return list(self._entries.get(name, []))

    def snapshot(self, name: str) -> List[Listener]:
        """Copy of the listeners currently registered for ``name``."""
        with self._lock:
            return [entry.listener for entry in self._entries.get(name, [])]

    def as_dict(self) -> Dict[str, List[Listener]]:
        """Copy of the whole mapping, name -> listeners in registration order."""
        with self._lock:
            return {name: [entry.listener for entry in entries] for name, entries in self._entries.items()}

    def count(self, name: str) -> int:
        """Number of listeners registered for ``name``."""
        with self._lock:
            return len(self._entries.get(name, []))

    def clear(self) -> None:
        """Remove all listeners for all names."""
        with self._lock:
            self._entries.clear()
            logger.debug("Cleared listener registry")

    def __len__(self) -> int:
        """Number of names with at least one listener."""
        with self._lock:
            return len(self._entries)

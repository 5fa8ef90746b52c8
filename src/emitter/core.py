from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from .config import EmitterConfig, load_emitter_config
from .errors import InvalidArgument
from .listeners import OnceListener, RaceGroup
from .registry import Listener, ListenerRegistry, describe_listener

logger = logging.getLogger(__name__)

Unlisten = Callable[[], None]

# Distinguishes "no data passed" from an explicit None payload.
_MISSING: Any = object()


def _require_callable(listener: Any) -> None:
    if listener is None or not callable(listener):
        raise InvalidArgument("no callback passed")


class Emitter:
    """Synchronous in-process publish/subscribe registry.

    Listeners are registered against event names and invoked in registration
    order by :meth:`emit` with a single payload argument. Every registration
    method returns a zero-argument handle that undoes it; handles may be
    called any number of times.
    """

    def __init__(self, config: Optional[EmitterConfig] = None) -> None:
        self.config = config or EmitterConfig()
        self._registry = ListenerRegistry()

    def on(self, name: str, listener: Optional[Listener] = None) -> Unlisten:
        """Register ``listener`` for ``name``.

        Registering the same callable twice for one name keeps a single entry,
        but both calls return a working unlisten handle.

        Raises:
            InvalidArgument: if ``listener`` is missing or not callable.
        """
        _require_callable(listener)
        self._registry.add(name, listener)

        def unlisten() -> None:
            self._registry.remove(name, listener)

        return unlisten

    def off(self, name: str, listener: Optional[Listener] = None) -> None:
        """Unregister ``listener`` from ``name``. Never raises.

        A callable that was registered with :meth:`once` can be passed here
        directly; the pending one-shot registration is cancelled.
        """
        if listener is None:
            return
        if self._registry.remove(name, listener):
            return
        wrapper = self._registry.find(
            name, lambda h: isinstance(h, OnceListener) and h.listener is listener
        )
        if wrapper is not None:
            self._registry.remove(name, wrapper)

    def emit(self, name: str, data: Any = _MISSING) -> None:
        """Invoke every listener of ``name`` with ``data``.

        When no data is given, listeners receive ``{"type": name}``. The
        listeners called are those registered when the emission starts, minus
        any removed by an earlier listener before their turn. A listener removed
        and registered again mid-emission waits for the next emission.
        """
        entries = self._registry.registrations(name)
        if not entries:
            logger.debug("Emitting '%s' with no listeners", name)
            return
        payload = {"type": name} if data is _MISSING else data
        logger.debug("Emitting '%s' to %d listeners with payload: %r", name, len(entries), payload)
        for entry in entries:
            if not self._registry.is_live(name, entry):
                continue
            handler = entry.listener
            try:
                handler(payload)
            except Exception:
                if not self.config.isolate_listener_errors:
                    raise
                logger.exception("Error in listener %s for '%s'", describe_listener(handler), name)

    def once(self, name: str, listener: Optional[Listener] = None) -> Unlisten:
        """Register ``listener`` for the next emission of ``name`` only."""
        _require_callable(listener)
        wrapper = OnceListener(self._registry, name, listener)
        self.on(name, wrapper)
        return wrapper.cancel

    def race(self, pairs: Iterable[Tuple[str, Listener]]) -> Unlisten:
        """Listen to several events, keeping only the first one to fire.

        ``pairs`` is a sequence of ``(name, listener)``. When any of the names
        is emitted, its listener runs and every registration made by this call
        is removed. The returned handle cancels all of them.

        Raises:
            InvalidArgument: if a pair is malformed; nothing is registered then.
        """
        checked: List[Tuple[str, Listener]] = []
        for index, pair in enumerate(pairs):
            try:
                name, listener = pair
            except (TypeError, ValueError):
                raise InvalidArgument(f"race pair {index} must be an (event, listener) pair") from None
            if not isinstance(name, str):
                raise InvalidArgument(f"race pair {index} has a non-string event name: {name!r}")
            _require_callable(listener)
            checked.append((name, listener))

        group = RaceGroup(self._registry)
        for name, listener in checked:
            self.on(name, group.add(name, listener))
        logger.debug("Racing %d listeners on %s", len(checked), group.event_names)
        return group.cancel

    @property
    def events(self) -> Dict[str, List[Listener]]:
        """Snapshot of the registry: event name -> listeners in order."""
        return self._registry.as_dict()

    def listeners(self, name: str) -> List[Listener]:
        """Listeners registered for ``name``, in order; empty if there are none."""
        return self._registry.snapshot(name)

    def listener_count(self, name: str) -> int:
        """Number of listeners registered for ``name``."""
        return self._registry.count(name)

    def clear(self) -> None:
        """Remove all listeners for all events (useful in tests)."""
        self._registry.clear()


def create(config: Optional[EmitterConfig] = None, config_path: Optional[str] = None) -> Emitter:
    """Return a new emitter with an empty registry.

    ``config`` wins over ``config_path``; with neither, defaults are used.
    """
    if config is None and config_path is not None:
        config = load_emitter_config(config_path)
    return Emitter(config)

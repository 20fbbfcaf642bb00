"""Event log — bounded record of what the pipeline did to each route.

The build task appends as it goes; in dev mode the log outlives a single
build, so ``history`` shows every rebuild and removal of one route.

Thread Safety:
    All methods take the log's ``threading.Lock``.

"""

import threading
from collections import Counter, deque

from astound.observability.events import BuildEvent


def _subject(event: BuildEvent) -> str:
    """Route file for route events, plugin reference for plugin events."""
    return getattr(event, "path", None) or getattr(event, "source", "")


class EventLog:
    """Ring buffer of build events.

    Args:
        max_events: Oldest events are dropped past this many.

    """

    __slots__ = ("_events", "_lock")

    def __init__(self, max_events: int = 10_000) -> None:
        self._events: deque[BuildEvent] = deque(maxlen=max_events)
        self._lock = threading.Lock()

    @property
    def max_events(self) -> int:
        return self._events.maxlen or 0

    def append(self, event: BuildEvent) -> None:
        with self._lock:
            self._events.append(event)

    def _snapshot(self) -> list[BuildEvent]:
        with self._lock:
            return list(self._events)

    def query(
        self,
        *,
        event_type: type | None = None,
        route: str | None = None,
        limit: int = 100,
    ) -> list[BuildEvent]:
        """Matching events, newest first.

        ``route`` is a prefix: ``"blog/"`` selects every route under
        ``app/blog``.  Plugin events match on their reference instead.
        """
        matches = [
            event
            for event in reversed(self._snapshot())
            if (event_type is None or isinstance(event, event_type))
            and (route is None or _subject(event).startswith(route))
        ]
        return matches[:limit]

    def history(self, route: str) -> list[BuildEvent]:
        """Every event recorded for exactly ``route``, oldest first."""
        return [e for e in self._snapshot() if _subject(e) == route]

    def recent(self, n: int = 20) -> list[BuildEvent]:
        return self._snapshot()[-n:]

    def clear(self) -> int:
        """Drop all events; return how many there were."""
        with self._lock:
            count = len(self._events)
            self._events.clear()
        return count

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)

    def counts(self) -> dict[str, int]:
        """Number of stored events per event class name."""
        return dict(Counter(type(e).__name__ for e in self._snapshot()))

"""App watcher — rebuild routes as their source files change.

A file created under ``app/`` becomes ``new_page``, an edit becomes
``update_page`` and a deletion becomes ``remove_page``.  Each watchfiles
batch is reduced to one event per route first: editors that save by
deleting and re-creating a file would otherwise drop the route from the
page cache and mint it a new hash.
"""

from __future__ import annotations

import asyncio
import threading
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Literal

from watchfiles import Change

from astound.routes.configure import RouteDescriptor, is_route_file

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from astound.config import AstoundConfig
    from astound.pipeline.builder import PageBuilder

type ChangeKind = Literal["created", "modified", "deleted"]


@dataclass(frozen=True, slots=True)
class ChangeEvent:
    """One route whose source file changed.

    Attributes:
        route: Descriptor of the changed route.
        kind: Lifecycle operation the change calls for.

    """

    route: RouteDescriptor
    kind: ChangeKind


_CHANGE_KIND_MAP: dict[Change, ChangeKind] = {
    Change.added: "created",
    Change.modified: "modified",
    Change.deleted: "deleted",
}


def to_change_event(change: Change, path: Path, config: AstoundConfig) -> ChangeEvent | None:
    """Translate a single watchfiles change; None if *path* is not a route file."""
    if not is_route_file(path, config.app_path):
        return None
    route = RouteDescriptor.from_path(path, config.app_path)
    return ChangeEvent(route=route, kind=_CHANGE_KIND_MAP.get(change, "modified"))


def coalesce_changes(
    raw_changes: Iterable[tuple[Change, str]], config: AstoundConfig
) -> list[ChangeEvent]:
    """Reduce one watchfiles batch to at most one event per route.

    The batch is an unordered set, so a route that shows up more than once
    is judged by whether its file exists now: present means it was edited
    (or created, if the batch only ever added it), absent means deleted.
    """
    seen: dict[RouteDescriptor, set[ChangeKind]] = {}
    paths: dict[RouteDescriptor, Path] = {}
    for change, path_str in raw_changes:
        event = to_change_event(change, Path(path_str), config)
        if event is None:
            continue
        seen.setdefault(event.route, set()).add(event.kind)
        paths[event.route] = Path(path_str)

    events: list[ChangeEvent] = []
    for route in sorted(seen, key=lambda r: r.file):
        kinds = seen[route]
        if len(kinds) == 1:
            (kind,) = kinds
        elif not paths[route].exists():
            kind = "deleted"
        elif kinds == {"created", "modified"}:
            kind = "created"
        else:
            kind = "modified"
        events.append(ChangeEvent(route=route, kind=kind))
    return events


async def handle_change(event: ChangeEvent, page_builder: PageBuilder) -> None:
    """Dispatch *event* to the matching lifecycle operation."""
    if event.kind == "created":
        await page_builder.new_page(event.route)
    elif event.kind == "modified":
        await page_builder.update_page(event.route)
    elif event.kind == "deleted":
        await page_builder.remove_page(event.route)


class AppWatcher:
    """Watches the app directory for route changes.

    watchfiles blocks, so it runs in a daemon thread that hands coalesced
    events to the loop ``start()`` was called from.  The thread posts
    ``None`` when it exits, which ends ``changes()``.
    """

    def __init__(self, config: AstoundConfig) -> None:
        self._config = config
        self._queue: asyncio.Queue[ChangeEvent | None] = asyncio.Queue()
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self._loop: asyncio.AbstractEventLoop | None = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.is_running:
            return
        self._loop = asyncio.get_running_loop()
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._watch_loop, name="astound-watcher", daemon=True
        )
        self._thread.start()

    def stop(self) -> None:
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout=5.0)
            self._thread = None

    async def changes(self) -> AsyncIterator[ChangeEvent]:
        """Yield events until the watcher thread exits."""
        if self._thread is None and self._queue.empty():
            return
        while (event := await self._queue.get()) is not None:
            yield event

    def _post(self, event: ChangeEvent | None) -> None:
        if self._loop is not None:
            self._loop.call_soon_threadsafe(self._queue.put_nowait, event)

    def _watch_loop(self) -> None:
        from watchfiles import watch

        app_path = self._config.app_path
        app_path.mkdir(parents=True, exist_ok=True)
        try:
            for raw_changes in watch(
                app_path,
                stop_event=self._stop_event,
                debounce=self._config.debounce_ms,
                step=100,
            ):
                for event in coalesce_changes(raw_changes, self._config):
                    self._post(event)
        finally:
            self._post(None)

"""Page cache — route identity to output hash, persisted as ``client.json``.

The in-memory cache holds, per route, either the hash naming its
``<hash>.js`` / ``<hash>.client.js`` outputs or the :class:`LoadedModule` of
an already-compiled route.  Persisting is a full overwrite of the JSON file:
entries removed from memory disappear from disk on the next write.

Hash stability is what keeps incremental rebuilds cheap: a route that is
already in the persisted cache keeps its hash, so its output filename (and
any browser cache keyed on it) survives rebuilds of other routes.
"""

from __future__ import annotations

import json
import uuid
from typing import TYPE_CHECKING

from astound._errors import BuildError
from astound.routes.loader import MODULE_TAG_PREFIX, LoadedModule

if TYPE_CHECKING:
    from collections.abc import Collection, Iterator, Mapping
    from pathlib import Path

    from astound._types import PageHash, RouteId

PAGE_HASH_LENGTH = 8
WORKER_HASH_LENGTH = 12


def generate_random(length: int = WORKER_HASH_LENGTH) -> str:
    """Return a random lowercase hex id of *length* characters."""
    out = ""
    while len(out) < length:
        out += uuid.uuid4().hex
    return out[:length]


def is_page_hash(value: object) -> bool:
    """Whether a persisted cache value names pipeline output (not a module)."""
    return isinstance(value, str) and bool(value) and not value.startswith(MODULE_TAG_PREFIX)


def read_persisted(path: Path) -> dict[str, str]:
    """Read the persisted cache file, or an empty mapping if it does not exist.

    Raises:
        BuildError: If the file exists but is not a JSON object.

    """
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8") or "{}")
    except json.JSONDecodeError as exc:
        msg = f"Corrupt page cache {path}: {exc}"
        raise BuildError(msg) from exc
    if not isinstance(data, dict):
        msg = f"Corrupt page cache {path}: expected a JSON object"
        raise BuildError(msg)
    return {str(k): str(v) for k, v in data.items()}


def resolve_hash(
    route_id: RouteId,
    persisted: Mapping[str, str],
    taken: Collection[object] = (),
) -> tuple[PageHash, bool]:
    """Hash for *route_id*: the persisted one if present, else a fresh one.

    A fresh hash never equals a value in *persisted* or *taken*, so it
    cannot overwrite another route's output files.

    Returns ``(hash, reused)``.

    """
    previous = persisted.get(route_id)
    if is_page_hash(previous):
        return previous, True  # type: ignore[return-value]
    in_use = {*persisted.values(), *taken}
    page_hash = generate_random(PAGE_HASH_LENGTH)
    while page_hash in in_use:
        page_hash = generate_random(PAGE_HASH_LENGTH)
    return page_hash, False


class PageCache:
    """In-memory route cache for one build session.

    Not thread-safe; the build task is the only writer.

    """

    __slots__ = ("_entries",)

    def __init__(self, entries: Mapping[str, str | LoadedModule] | None = None) -> None:
        self._entries: dict[str, str | LoadedModule] = dict(entries or {})

    def __contains__(self, route_id: object) -> bool:
        return route_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def get(self, route_id: RouteId) -> str | LoadedModule | None:
        return self._entries.get(route_id)

    def set(self, route_id: RouteId, value: str | LoadedModule) -> None:
        self._entries[route_id] = value

    def remove(self, route_id: RouteId) -> str | LoadedModule | None:
        """Drop *route_id*, returning its previous value (or None)."""
        return self._entries.pop(route_id, None)

    def clear(self) -> None:
        self._entries.clear()

    def merge(self, persisted: Mapping[str, str]) -> None:
        """Add persisted entries this session does not know about yet.

        In-memory values win: they are at least as fresh as the file.

        """
        for route_id, value in persisted.items():
            self._entries.setdefault(route_id, value)

    def hashes(self) -> set[str]:
        """Page hashes currently assigned, excluding loaded modules."""
        return {v for v in self._entries.values() if is_page_hash(v)}

    def to_json(self) -> dict[str, str]:
        """JSON-safe view: loaded modules become ``module:<route>`` tags."""
        return {
            route_id: value.tag if isinstance(value, LoadedModule) else value
            for route_id, value in self._entries.items()
        }

    def persist(self, path: Path) -> None:
        """Overwrite *path* with the current entries."""
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(self.to_json()), encoding="utf-8")

"""Build event model.

All events are frozen dataclasses with:
- ``timestamp_ns``: Monotonic nanosecond timestamp
- Descriptive fields for the specific event type

Thread Safety:
    All events are frozen (immutable) and safe to share across threads.

"""

import time
from dataclasses import dataclass
from typing import Literal


# ---------------------------------------------------------------------------
# Route events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class PageBuilt:
    """A route went through the transform pipeline.

    Attributes:
        path: Route identifier (relative to the app directory).
        page_hash: Output name used for ``<hash>.js`` / ``<hash>.client.js``.
        reused_hash: True if the hash came from the persisted cache.
        plugins_applied: Number of plugins whose transform ran.
        duration_ms: Time spent building the route.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    path: str
    page_hash: str
    reused_hash: bool
    plugins_applied: int
    duration_ms: float
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class ModuleLoaded:
    """An already-compiled route was loaded instead of transformed."""

    path: str
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class PageRemoved:
    """A route was dropped from the page cache.

    Attributes:
        path: Route identifier.
        files_deleted: Number of output files removed alongside the entry.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    path: str
    files_deleted: int
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Plugin events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class WorkerScriptWritten:
    """A plugin's ``add_script`` output was written as a worker script."""

    plugin: str
    source: str
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class PluginSkipped:
    """A plugin reference could not be resolved and was skipped."""

    source: str
    reason: str
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class LifecycleRejected:
    """An update/remove targeted a route missing from the persisted cache."""

    path: str
    operation: Literal["update", "remove"]
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Union type
# ---------------------------------------------------------------------------

type BuildEvent = (
    PageBuilt
    | ModuleLoaded
    | PageRemoved
    | WorkerScriptWritten
    | PluginSkipped
    | LifecycleRejected
)


def now_ns() -> int:
    """Return the current monotonic clock value in nanoseconds."""
    return time.monotonic_ns()

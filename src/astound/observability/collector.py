"""Build collector — records pipeline events into an EventLog.

The orchestrator, transform pipeline and lifecycle operations call the
``record_*`` methods; nothing else writes to the log.

"""

from __future__ import annotations

from astound.observability.events import (
    LifecycleRejected,
    ModuleLoaded,
    PageBuilt,
    PageRemoved,
    PluginSkipped,
    WorkerScriptWritten,
    now_ns,
)
from astound.observability.log import EventLog


class BuildCollector:
    """Event collector for the build pipeline.

    Args:
        log: The EventLog to store events in.

    """

    __slots__ = ("_log",)

    def __init__(self, log: EventLog | None = None) -> None:
        self._log = log if log is not None else EventLog()

    @property
    def log(self) -> EventLog:
        """The underlying event log."""
        return self._log

    # ----- Route events -----

    def record_page(
        self,
        path: str,
        page_hash: str,
        *,
        reused_hash: bool = False,
        plugins_applied: int = 0,
        duration_ms: float = 0.0,
    ) -> None:
        """Record a route built through the transform pipeline."""
        self._log.append(
            PageBuilt(
                path=path,
                page_hash=page_hash,
                reused_hash=reused_hash,
                plugins_applied=plugins_applied,
                duration_ms=duration_ms,
                timestamp_ns=now_ns(),
            )
        )

    def record_module(self, path: str) -> None:
        """Record an already-compiled route being loaded."""
        self._log.append(ModuleLoaded(path=path, timestamp_ns=now_ns()))

    def record_removal(self, path: str, *, files_deleted: int = 0) -> None:
        """Record a route dropped from the cache."""
        self._log.append(
            PageRemoved(path=path, files_deleted=files_deleted, timestamp_ns=now_ns())
        )

    def record_rejected(self, path: str, operation: str) -> None:
        """Record an update/remove refused for an uncached route."""
        self._log.append(
            LifecycleRejected(
                path=path,
                operation=operation,  # type: ignore[arg-type]
                timestamp_ns=now_ns(),
            )
        )

    # ----- Plugin events -----

    def record_worker(self, plugin: str, source: str) -> None:
        """Record a worker script written for a plugin."""
        self._log.append(
            WorkerScriptWritten(plugin=plugin, source=source, timestamp_ns=now_ns())
        )

    def record_plugin_skipped(self, source: str, reason: str) -> None:
        """Record a plugin reference that failed to resolve."""
        self._log.append(
            PluginSkipped(source=source, reason=reason, timestamp_ns=now_ns())
        )

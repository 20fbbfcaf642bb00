"""Build observability — structured events for the page build pipeline.

Quick Start:
    >>> from astound.observability import BuildCollector, EventLog
    >>> log = EventLog()
    >>> collector = BuildCollector(log)
    >>> # Pass collector to build() / new_page() / update_page() / remove_page()

"""

from astound.observability.collector import BuildCollector
from astound.observability.events import (
    BuildEvent,
    LifecycleRejected,
    ModuleLoaded,
    PageBuilt,
    PageRemoved,
    PluginSkipped,
    WorkerScriptWritten,
    now_ns,
)
from astound.observability.log import EventLog

__all__ = [
    "BuildCollector",
    "BuildEvent",
    "EventLog",
    "LifecycleRejected",
    "ModuleLoaded",
    "PageBuilt",
    "PageRemoved",
    "PluginSkipped",
    "WorkerScriptWritten",
    "now_ns",
]

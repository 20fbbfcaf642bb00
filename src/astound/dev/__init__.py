"""Dev mode — watch the app directory and rebuild changed routes."""

from astound.dev.watcher import (
    AppWatcher,
    ChangeEvent,
    coalesce_changes,
    handle_change,
    to_change_event,
)

__all__ = ["AppWatcher", "ChangeEvent", "coalesce_changes", "handle_change", "to_change_event"]

"""Build session state shared by the orchestrator and the pipeline."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

from astound._errors import PluginResolutionError
from astound.config import ASTOUND_URL_PREFIX
from astound.pipeline.cache import PageCache
from astound.pipeline.client import WorkerScript
from astound.plugins import builtin_plugins

if TYPE_CHECKING:
    from astound.config import AstoundConfig
    from astound.observability.collector import BuildCollector
    from astound.plugins.registry import PluginRegistry


@dataclass(slots=True)
class BuildState:
    """Mutable state for one build session.

    Attributes:
        pages: In-memory page cache written to ``client.json``.
        previous: Persisted cache as read at the start of the operation;
            hashes are reused from here.
        workers: Worker scripts injected into every client loader.
        plugins: Resolved plugins, user plugins first, built-ins last.
        collector: Optional event collector.

    """

    pages: PageCache = field(default_factory=PageCache)
    previous: dict[str, str] = field(default_factory=dict)
    workers: list[WorkerScript] = field(default_factory=list)
    plugins: list[Any] = field(default_factory=list)
    collector: BuildCollector | None = None


def worker_url(filename: str) -> str:
    """Public URL of a worker script file in ``.astound/js``."""
    return f"{ASTOUND_URL_PREFIX}/js/{filename}"


def resolve_plugins(
    config: AstoundConfig,
    registry: PluginRegistry,
    collector: BuildCollector | None = None,
) -> list[Any]:
    """Resolve configured plugins followed by the built-ins.

    References that fail to resolve are reported and left out; the
    configuration itself is never modified.

    """
    resolved: list[Any] = []
    for ref in (*config.plugins, *builtin_plugins()):
        try:
            resolved.append(registry.resolve(ref))
        except PluginResolutionError as exc:
            print(f"  Plugin error: {exc}", file=sys.stderr)
            if collector is not None:
                collector.record_plugin_skipped(str(ref), str(exc))
    return resolved


def discover_workers(output_dir: Path) -> list[WorkerScript]:
    """Worker scripts already written by a previous build, by filename."""
    if not output_dir.is_dir():
        return []
    return [
        WorkerScript(name=path.stem, script=worker_url(path.name))
        for path in sorted(output_dir.glob("w.*.js"))
    ]

"""Build orchestrator and route lifecycle operations.

PageBuilder owns one build session: the page cache, the resolved plugins and
the worker scripts of the last full build.  The dev watcher keeps a single
PageBuilder alive and feeds it ``new_page`` / ``update_page`` /
``remove_page`` calls; ``astound build`` uses it once.
"""

from __future__ import annotations

import shutil
import sys
import time
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from astound._errors import CacheConsistencyError
from astound.pipeline.cache import PageCache, generate_random, is_page_hash, read_persisted
from astound.pipeline.client import WorkerScript
from astound.pipeline.state import BuildState, discover_workers, resolve_plugins, worker_url
from astound.pipeline.transform import builder
from astound.plugins.base import plugin_name
from astound.plugins.registry import default_registry
from astound.routes.configure import configure_routes

if TYPE_CHECKING:
    from astound.config import AstoundConfig
    from astound.observability.collector import BuildCollector
    from astound.plugins.registry import PluginRegistry
    from astound.routes.configure import RouteDescriptor


@dataclass(frozen=True, slots=True)
class BuildResult:
    """Aggregate result of a full build.

    Attributes:
        pages: Routes built through the transform pipeline.
        modules: Routes loaded as compiled modules.
        workers: Worker scripts written for this build.
        duration_ms: Total wall-clock time for the build.
        output_dir: Absolute path to ``.astound/js``.

    """

    pages: tuple[str, ...]
    modules: tuple[str, ...]
    workers: tuple[WorkerScript, ...]
    duration_ms: float
    output_dir: Path


class PageBuilder:
    """Builds an Astound app into ``<public>/.astound``.

    Args:
        config: Frozen Astound configuration.
        registry: Plugin registry for string references (defaults to one
            holding the built-ins).
        collector: Optional event collector.

    """

    def __init__(
        self,
        config: AstoundConfig,
        *,
        registry: PluginRegistry | None = None,
        collector: BuildCollector | None = None,
    ) -> None:
        self._config = config
        self._registry = registry if registry is not None else default_registry()
        self._collector = collector
        self._state: BuildState | None = None

    @property
    def state(self) -> BuildState | None:
        """Session state, or None before the first operation."""
        return self._state

    async def build(self) -> BuildResult:
        """Rebuild every route from scratch.

        Pipeline order:
            1. Snapshot the persisted cache (hashes are reused from it)
            2. Delete and recreate ``.astound/`` and ``.astound/js/``
            3. Resolve plugins, write one worker script per ``add_script``
            4. Build every discovered route
            5. Persist the cache (exactly the routes of this run)

        If any step after the reset fails, the snapshot is written back
        (merged under whatever this run already built) before the error
        propagates, so the next build still reuses the old hashes.

        """
        start = time.perf_counter()
        config = self._config

        previous = read_persisted(config.cache_path)
        self._reset_output()
        pages = PageCache()

        try:
            state = BuildState(
                pages=pages,
                previous=previous,
                plugins=resolve_plugins(config, self._registry, self._collector),
                collector=self._collector,
            )
            self._state = state
            state.workers.extend(self._write_workers(state.plugins))

            for route in configure_routes(config):
                await builder(route, config, state)
        except BaseException:
            pages.merge(previous)
            pages.persist(config.cache_path)
            raise

        pages.persist(config.cache_path)

        cached = pages.to_json()
        return BuildResult(
            pages=tuple(k for k, v in cached.items() if is_page_hash(v)),
            modules=tuple(k for k, v in cached.items() if not is_page_hash(v)),
            workers=tuple(state.workers),
            duration_ms=(time.perf_counter() - start) * 1000,
            output_dir=config.output_path,
        )

    async def new_page(self, route: RouteDescriptor) -> None:
        """Build a route that was just created.  No existence check."""
        state = self._refresh()
        await builder(route, self._config, state)

    async def update_page(self, route: RouteDescriptor) -> bool:
        """Rebuild a route that is already in the persisted cache.

        Returns False (and touches nothing) if the route was never built.

        """
        state = self._refresh()
        if route.file not in state.previous:
            self._reject(route, "update")
            return False
        await builder(route, self._config, state)
        return True

    async def remove_page(self, route: RouteDescriptor) -> bool:
        """Drop a route from the cache and delete its output files.

        Returns False (and touches nothing) if the route is not cached.

        """
        state = self._refresh()
        if route.file not in state.previous:
            self._reject(route, "remove")
            return False

        value = state.previous.pop(route.file)
        state.pages.remove(route.file)
        state.pages.persist(self._config.cache_path)

        deleted = 0
        if is_page_hash(value):
            for name in (f"{value}.js", f"{value}.client.js"):
                path = self._config.output_path / name
                if path.exists():
                    path.unlink()
                    deleted += 1

        if self._collector is not None:
            self._collector.record_removal(route.file, files_deleted=deleted)
        return True

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _refresh(self) -> BuildState:
        """Re-read the persisted cache into the session state.

        Creates the session on first use (e.g. ``astound`` restarted without
        a rebuild): plugins are resolved and existing worker scripts reused.

        """
        persisted = read_persisted(self._config.cache_path)
        if self._state is None:
            self._state = BuildState(
                previous=persisted,
                workers=discover_workers(self._config.output_path),
                plugins=resolve_plugins(self._config, self._registry, self._collector),
                collector=self._collector,
            )
        else:
            self._state.previous = persisted
        self._state.pages.merge(persisted)
        return self._state

    def _reject(self, route: RouteDescriptor, operation: str) -> None:
        exc = CacheConsistencyError(
            f"Cannot {operation} {route.file!r}: it is not in {self._config.cache_path}. "
            "Restart the build to resync the page cache."
        )
        print(f"  Cache error: {exc}", file=sys.stderr)
        if self._collector is not None:
            self._collector.record_rejected(route.file, operation)

    def _reset_output(self) -> None:
        """Remove and recreate ``.astound`` and ``.astound/js``."""
        root = self._config.astound_path
        if root.exists():
            shutil.rmtree(root)
        self._config.output_path.mkdir(parents=True, exist_ok=True)

    def _write_workers(self, plugins: list[object]) -> list[WorkerScript]:
        """Call each ``add_script`` once and write the result as ``w.<hash>.js``."""
        workers: list[WorkerScript] = []
        for plugin in plugins:
            add_script = getattr(plugin, "add_script", None)
            if not callable(add_script):
                continue
            filename = f"w.{generate_random()}.js"
            (self._config.output_path / filename).write_text(
                add_script(), encoding="utf-8",
            )
            worker = WorkerScript(name=plugin_name(plugin), script=worker_url(filename))
            workers.append(worker)
            if self._collector is not None:
                self._collector.record_worker(worker.name, worker.script)
        return workers


# ---------------------------------------------------------------------------
# Functional API
# ---------------------------------------------------------------------------


async def build(
    config: AstoundConfig,
    *,
    registry: PluginRegistry | None = None,
    collector: BuildCollector | None = None,
) -> BuildResult:
    """Full build with a throwaway PageBuilder."""
    return await PageBuilder(config, registry=registry, collector=collector).build()


async def new_page(
    route: RouteDescriptor,
    config: AstoundConfig,
    *,
    registry: PluginRegistry | None = None,
    collector: BuildCollector | None = None,
) -> None:
    """Build a newly created route."""
    await PageBuilder(config, registry=registry, collector=collector).new_page(route)


async def update_page(
    route: RouteDescriptor,
    config: AstoundConfig,
    *,
    registry: PluginRegistry | None = None,
    collector: BuildCollector | None = None,
) -> bool:
    """Rebuild a cached route; False if it was never built."""
    return await PageBuilder(config, registry=registry, collector=collector).update_page(route)


async def remove_page(
    route: RouteDescriptor,
    config: AstoundConfig,
    *,
    registry: PluginRegistry | None = None,
    collector: BuildCollector | None = None,
) -> bool:
    """Remove a cached route; False if it is not cached."""
    return await PageBuilder(config, registry=registry, collector=collector).remove_page(route)

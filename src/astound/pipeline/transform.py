"""Transform pipeline — run one route through the ordered plugin list.

Plugins run strictly one after another.  A transform may be a plain
function or a coroutine function; either way it completes before the next
plugin starts, because later plugins read what earlier ones wrote.
"""

from __future__ import annotations

import inspect
import sys
import time
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from astound.pipeline.cache import resolve_hash
from astound.pipeline.client import generate_html
from astound.plugins.base import Accumulator, TransformOutput, plugin_name
from astound.routes.loader import COMPILED_EXTENSIONS, generate_module

if TYPE_CHECKING:
    from astound.config import AstoundConfig
    from astound.pipeline.state import BuildState
    from astound.routes.configure import RouteDescriptor


async def run_transforms(
    plugins: Sequence[Any],
    route_id: str,
    source: str,
    accumulator: Accumulator,
) -> int:
    """Apply every plugin's ``transform`` to *accumulator*, in order.

    Returns the number of plugins whose transform ran.

    Raises:
        BuildError: If a transform returns something that is not an output.

    """
    applied = 0
    for plugin in plugins:
        transform = getattr(plugin, "transform", None)
        if not callable(transform):
            continue
        result = transform(route_id, source, accumulator)
        if inspect.isawaitable(result):
            result = await result
        output = TransformOutput.coerce(result, plugin_name(plugin))
        if output is not None:
            accumulator.apply(output)
        applied += 1
    return applied


async def builder(route: RouteDescriptor, config: AstoundConfig, state: BuildState) -> None:
    """Build a single route and persist the page cache.

    Compiled routes (``ts``, ``js``, ``py``) are loaded as modules and stored
    in the cache as-is.  Everything else gets a stable hash, goes through
    the plugins, and is written as ``<hash>.js`` and ``<hash>.client.js``.

    Read failures are reported and the route is skipped.  Write failures
    propagate.

    """
    if route.ext in COMPILED_EXTENSIONS:
        module = generate_module(
            config.app_path / route.file, config=config, alias=route.file,
        )
        state.pages.set(route.file, module)
        if state.collector is not None:
            state.collector.record_module(route.file)
    else:
        await _build_page(route, config, state)

    state.pages.persist(config.cache_path)


async def _build_page(route: RouteDescriptor, config: AstoundConfig, state: BuildState) -> None:
    t0 = time.perf_counter()
    page_hash, reused = resolve_hash(route.file, state.previous, state.pages.hashes())

    try:
        source = (config.app_path / route.file).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        print(f"  Read error: {route.file}: {exc}", file=sys.stderr)
        return

    # Visible to lookups while transforms are still running.
    state.pages.set(route.file, page_hash)

    accumulator = Accumulator()
    applied = await run_transforms(state.plugins, route.file, source, accumulator)

    output_dir = config.output_path
    output_dir.mkdir(parents=True, exist_ok=True)
    (output_dir / f"{page_hash}.js").write_text(accumulator.js, encoding="utf-8")
    (output_dir / f"{page_hash}.client.js").write_text(
        generate_html(accumulator.html, state.workers), encoding="utf-8",
    )

    if state.collector is not None:
        state.collector.record_page(
            route.file,
            page_hash,
            reused_hash=reused,
            plugins_applied=applied,
            duration_ms=(time.perf_counter() - t0) * 1000,
        )

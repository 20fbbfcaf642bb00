"""Astound application entry points.

The two public functions (build, dev) load configuration, drive a
PageBuilder, and report to stderr.
"""

import asyncio
import sys
from pathlib import Path

from astound.config import AstoundConfig
from astound.config_loader import load_config
from astound.observability import BuildCollector, EventLog
from astound.pipeline.builder import BuildResult, PageBuilder


def build(root: str | Path = ".", **kwargs: object) -> BuildResult:
    """Build every route of the app into ``<public>/.astound``.

    Args:
        root: Path to the project root.
        **kwargs: Override AstoundConfig fields.

    """
    config = load_config(Path(root), **kwargs)
    result = asyncio.run(PageBuilder(config).build())
    _print_build_summary(result)
    return result


def dev(root: str | Path = ".", **kwargs: object) -> None:
    """Build once, then rebuild routes as files under ``app/`` change.

    Runs until interrupted.

    Args:
        root: Path to the project root.
        **kwargs: Override AstoundConfig fields.

    """
    config = load_config(Path(root), **kwargs)
    collector = BuildCollector(EventLog())
    try:
        asyncio.run(_run_dev(config, collector))
    except KeyboardInterrupt:
        print("\n  Stopped.", file=sys.stderr)


async def _run_dev(config: AstoundConfig, collector: BuildCollector) -> None:
    """Initial build followed by the watch loop."""
    from astound.dev.watcher import AppWatcher, handle_change

    page_builder = PageBuilder(config, collector=collector)
    _print_build_summary(await page_builder.build())

    watcher = AppWatcher(config)
    watcher.start()
    print(f"  Watching {config.app_path}", file=sys.stderr)
    try:
        async for event in watcher.changes():
            try:
                await handle_change(event, page_builder)
            except Exception as exc:
                print(f"  Pipeline error: {event.route.file}: {exc}", file=sys.stderr)
            else:
                print(f"  {event.kind}: {event.route.file}", file=sys.stderr)
    finally:
        watcher.stop()


def _print_build_summary(result: BuildResult) -> None:
    """Print build completion summary to stderr."""
    lines = [
        "",
        "─" * 41,
        f"  Built {len(result.pages)} page{'s' if len(result.pages) != 1 else ''}",
    ]
    if result.modules:
        lines.append(
            f"  Loaded {len(result.modules)} module{'s' if len(result.modules) != 1 else ''}"
        )
    if result.workers:
        lines.append(
            f"  Wrote {len(result.workers)} worker script{'s' if len(result.workers) != 1 else ''}"
        )
    lines.append(f"  Output: {result.output_dir}")
    lines.append(f"  Done in {result.duration_ms:.0f}ms")

    print("\n".join(lines), file=sys.stderr)

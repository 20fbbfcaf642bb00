"""Page pipeline — plugin transforms, page cache, and client loaders.

Public API::

    from astound.pipeline import PageBuilder

    page_builder = PageBuilder(config)
    result = await page_builder.build()
    await page_builder.update_page(route)
"""

from astound.pipeline.builder import (
    BuildResult,
    PageBuilder,
    build,
    new_page,
    remove_page,
    update_page,
)
from astound.pipeline.cache import PageCache, generate_random, read_persisted
from astound.pipeline.client import WorkerScript, generate_html
from astound.pipeline.state import BuildState
from astound.pipeline.transform import builder, run_transforms

__all__ = [
    "BuildResult",
    "BuildState",
    "PageBuilder",
    "PageCache",
    "WorkerScript",
    "build",
    "builder",
    "generate_html",
    "generate_random",
    "new_page",
    "read_persisted",
    "remove_page",
    "run_transforms",
    "update_page",
]

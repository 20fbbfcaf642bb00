"""Astound — page build pipeline for file-based web apps.

Compiles every route under ``app/`` into browser-loadable artifacts in
``public/.astound/js``: a ``<hash>.js`` bundle and a ``<hash>.client.js``
loader per page.  Route hashes are persisted in ``public/.astound/client.json``
so rebuilding one route never renames another's output.

Quick start::

    import astound

    astound.build("my-app/")     # Full build
    astound.dev("my-app/")       # Build, then rebuild on change

"""

__version__ = "0.1.0-dev"
__all__ = [
    "AstoundConfig",
    "PageBuilder",
    "__version__",
    "build",
    "dev",
    "generate_html",
]


def __getattr__(name: str) -> object:
    """Lazy imports for the public API.

    Keeps ``import astound`` fast.
    """
    if name == "AstoundConfig":
        from astound.config import AstoundConfig

        return AstoundConfig

    if name == "PageBuilder":
        from astound.pipeline.builder import PageBuilder

        return PageBuilder

    if name == "generate_html":
        from astound.pipeline.client import generate_html

        return generate_html

    if name == "dev":
        from astound.app import dev

        return dev

    if name == "build":
        from astound.app import build

        return build

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)

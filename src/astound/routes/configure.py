"""Route discovery — map files under ``app/`` to route descriptors.

Every regular file under the app directory is a route:

    app/index.html        -> RouteDescriptor(file="index.html", ext="html")
    app/blog/post.md      -> RouteDescriptor(file="blog/post.md", ext="md")
    app/api/users.py      -> RouteDescriptor(file="api/users.py", ext="py")

Files and directories starting with ``_`` or ``.`` are private and skipped,
as is anything inside ``__pycache__``.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from astound.config import AstoundConfig

# Prefixes marking private files/directories under app/
_PRIVATE_PREFIXES = ("_", ".")


@dataclass(frozen=True, slots=True)
class RouteDescriptor:
    """One source file to build.

    Attributes:
        file: Path relative to the app directory, ``/``-separated.  Used as
            the page cache key.
        ext: File extension without the leading dot (``"html"``, ``"tsx"``).

    """

    file: str
    ext: str

    @classmethod
    def from_path(cls, path: Path, app_path: Path) -> RouteDescriptor:
        """Build a descriptor for *path*, which must live under *app_path*."""
        relative = path.relative_to(app_path)
        return cls(file=relative.as_posix(), ext=path.suffix.lstrip("."))


def is_route_file(path: Path, app_path: Path) -> bool:
    """Whether *path* is a buildable route under *app_path*."""
    try:
        relative = path.relative_to(app_path)
    except ValueError:
        return False
    if not relative.parts or not path.suffix:
        return False
    if "__pycache__" in relative.parts:
        return False
    return not any(part.startswith(_PRIVATE_PREFIXES) for part in relative.parts)


def configure_routes(config: AstoundConfig) -> tuple[RouteDescriptor, ...]:
    """Scan the app directory and return one descriptor per route file.

    Returns an empty tuple when the app directory does not exist.  Order is
    sorted by path so builds are deterministic.

    """
    app_path = config.app_path
    if not app_path.is_dir():
        return ()

    return tuple(
        RouteDescriptor.from_path(path, app_path)
        for path in sorted(app_path.rglob("*"))
        if path.is_file() and is_route_file(path, app_path)
    )

"""Astound configuration.

AstoundConfig is the central configuration object, frozen after creation.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

# Directory (under the public dir) holding everything astound generates
ASTOUND_DIR = ".astound"

# Public URL prefix for generated scripts
ASTOUND_URL_PREFIX = "/" + ASTOUND_DIR


@dataclass(frozen=True, slots=True)
class AstoundConfig:
    """Configuration for an Astound application.

    Attributes:
        root: Path to the project root (contains app/ and public/).
              Always resolved to an absolute path on construction.
        public_dir: Directory served to browsers; ``.astound/`` lives inside it.
        app_dir: Directory containing route source files.
        plugins: User plugins, in application order.  Each entry is either a
            plugin object or a string reference (registry key or
            ``module:attr``).  Built-in plugins run after these.
        debounce_ms: Debounce window for the dev watcher.

    """

    root: Path = field(default_factory=Path.cwd)
    public_dir: str = "public"
    app_dir: str = "app"
    plugins: tuple[Any, ...] = ()
    debounce_ms: int = 300

    def __post_init__(self) -> None:
        # watchfiles reports absolute paths; relative_to() needs an absolute root.
        if not self.root.is_absolute():
            object.__setattr__(self, "root", self.root.resolve())
        if not isinstance(self.plugins, tuple):
            object.__setattr__(self, "plugins", tuple(self.plugins))

    @property
    def public_path(self) -> Path:
        """Absolute path to the public directory."""
        return self.root / self.public_dir

    @property
    def app_path(self) -> Path:
        """Absolute path to the app (route source) directory."""
        return self.root / self.app_dir

    @property
    def astound_path(self) -> Path:
        """Absolute path to ``<public>/.astound``."""
        return self.public_path / ASTOUND_DIR

    @property
    def output_path(self) -> Path:
        """Absolute path to ``<public>/.astound/js``."""
        return self.astound_path / "js"

    @property
    def cache_path(self) -> Path:
        """Absolute path to the persisted page cache."""
        return self.astound_path / "client.json"

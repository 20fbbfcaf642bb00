"""Module loader for already-compiled routes.

Routes whose extension marks them as compiled (``py``, ``js``, ``ts``) skip
the plugin pipeline.  Python routes are imported without touching
``sys.path``; script routes are read and handed to the page cache as-is for
the serving runtime to execute.
"""

import importlib.util
import sys
from dataclasses import dataclass
from pathlib import Path
from types import ModuleType

from astound._errors import ConfigError
from astound.config import AstoundConfig

# Extensions loaded as modules instead of transformed
COMPILED_EXTENSIONS: frozenset[str] = frozenset({"ts", "js", "py"})

# Prefix for loaded modules in the persisted page cache
MODULE_TAG_PREFIX = "module:"


@dataclass(frozen=True, slots=True)
class LoadedModule:
    """A route loaded as an executable module.

    Attributes:
        alias: Route identifier the module is registered under.
        path: Absolute path to the source file.
        module: Imported Python module, or *None* for script routes.
        source: Script text for ``js``/``ts`` routes, *None* for Python.

    """

    alias: str
    path: Path
    module: ModuleType | None = None
    source: str | None = None

    @property
    def tag(self) -> str:
        """JSON-safe marker stored in the persisted page cache."""
        return MODULE_TAG_PREFIX + self.alias


def generate_module(path: Path, *, config: AstoundConfig, alias: str) -> LoadedModule:
    """Load an already-compiled route.

    Raises:
        ConfigError: If a Python route fails to import.

    """
    if path.suffix != ".py":
        return LoadedModule(alias=alias, path=path, source=path.read_text(encoding="utf-8"))

    # app/api/users.py -> astound_app.api.users
    relative = path.relative_to(config.app_path).with_suffix("")
    module_name = "astound_app." + ".".join(relative.parts)

    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        msg = f"Cannot load route module {path}"
        raise ConfigError(msg)

    try:
        module = importlib.util.module_from_spec(spec)
        sys.modules[module_name] = module
        spec.loader.exec_module(module)
    except Exception as exc:
        sys.modules.pop(module_name, None)
        msg = f"Failed to load route module {path}: {exc}"
        raise ConfigError(msg) from exc

    return LoadedModule(alias=alias, path=path, module=module)

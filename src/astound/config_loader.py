"""Load AstoundConfig from astound.yaml if present.

Merges file config with CLI kwargs. CLI overrides file.
"""

from __future__ import annotations

from pathlib import Path

from astound.config import AstoundConfig

_CONFIG_KEYS = frozenset({"public_dir", "app_dir", "plugins", "debounce_ms"})

# Short aliases accepted in config files
_KEY_ALIASES = {"public": "public_dir", "app": "app_dir"}


def load_config(root: Path, **overrides: object) -> AstoundConfig:
    """Load AstoundConfig from root, optionally merging astound.yaml.

    Looks for astound.yaml, astound.yml, or astound.toml in root. If found,
    loads and merges with overrides. Overrides take precedence; ``None``
    overrides (unset CLI flags) are ignored.
    """
    file_config = _read_astound_config(root)
    merged = {**file_config, **{k: v for k, v in overrides.items() if v is not None}}
    if "plugins" in merged:
        plugins = merged["plugins"]
        if isinstance(plugins, str):
            plugins = [plugins]
        merged["plugins"] = tuple(plugins)  # type: ignore[arg-type]
    return AstoundConfig(root=root, **merged)  # type: ignore[arg-type]


def _read_astound_config(root: Path) -> dict[str, object]:
    """Read astound config from yaml/toml if present. Returns empty dict otherwise."""
    for name in ("astound.yaml", "astound.yml"):
        path = root / name
        if path.is_file():
            return _parse_yaml(path)
    toml_path = root / "astound.toml"
    if toml_path.is_file():
        return _parse_toml(toml_path)
    return {}


def _parse_yaml(path: Path) -> dict[str, object]:
    """Parse YAML config. Returns empty dict on error."""
    import yaml

    try:
        data = yaml.safe_load(path.read_text()) or {}
    except (OSError, yaml.YAMLError):
        return {}
    if not isinstance(data, dict):
        return {}
    return _flatten_astound_section(data)


def _parse_toml(path: Path) -> dict[str, object]:
    """Parse TOML config. Returns empty dict on error."""
    import tomllib

    try:
        data = tomllib.loads(path.read_text())
    except (OSError, tomllib.TOMLDecodeError):
        return {}
    return _flatten_astound_section(data)


def _flatten_astound_section(data: dict[str, object]) -> dict[str, object]:
    """Extract astound.* keys into top-level config, normalizing aliases."""
    result: dict[str, object] = {}
    for k, v in data.items():
        if k == "astound":
            continue
        key = _KEY_ALIASES.get(k, k)
        if key in _CONFIG_KEYS:
            result[key] = v
    section = data.get("astound")
    if isinstance(section, dict):
        for k, v in section.items():
            key = _KEY_ALIASES.get(k, k)
            if key in _CONFIG_KEYS:
                result[key] = v
    return result

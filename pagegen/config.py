from __future__ import annotations

import json
from pathlib import Path

import yaml

from .errors import ConfigError

try:
    import tomllib as toml
except ImportError:
    import tomli as toml

DEFAULTS = {
    "content": "content",
    "output": "docs",
    "layouts": "layouts",
}


def load_config(path: Path) -> dict:
    if not path.exists():
        return {}
    suffix = path.suffix.lower()
    text = path.read_text(encoding="utf-8")
    if suffix == ".toml":
        try:
            data = toml.loads(text)
        except toml.TOMLDecodeError as exc:
            raise ConfigError(f"Invalid TOML in config file {path}: {exc}") from exc
    elif suffix in {".yml", ".yaml"}:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in config file {path}: {exc}") from exc
        if data is None:
            return {}
    else:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ConfigError(f"Invalid JSON in config file {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Config must be a mapping: {path}")
    return data


def resolve_path(root: Path, value: str) -> Path:
    """Resolve a configured directory against the repository root."""
    path = Path(value)
    if not path.is_absolute():
        path = root / path
    return path.resolve()

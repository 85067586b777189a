from __future__ import annotations

from pathlib import Path


class BuildError(Exception):
    """Fatal error that aborts the whole build."""


class ConfigError(BuildError):
    pass


class UnsupportedFormatError(BuildError):
    def __init__(self, format_name: str) -> None:
        super().__init__(f"unsupported format: {format_name}")
        self.format = format_name


class LayoutNotFoundError(BuildError):
    def __init__(self, path: Path) -> None:
        super().__init__(f"layout file is not found: {path}")
        self.path = path

from __future__ import annotations

import re
import shutil
from pathlib import Path

from .errors import LayoutNotFoundError

DEFAULT_LAYOUT = "default"
TEMPLATE_KEYS = ("title", "description", "text", "update_at", "pubdate", "author", "tags")
PLACEHOLDER_RE = re.compile(r"\{\{(\w+)\}\}")


def render_template(template: str, **context: str) -> str:
    # One pass over the template: values are inserted as-is and never re-expanded.
    def repl(match: re.Match) -> str:
        return context.get(match.group(1), match.group(0))

    return PLACEHOLDER_RE.sub(repl, template)


def layout_file(layouts_dir: Path, layout: str = "") -> Path:
    name = layout or DEFAULT_LAYOUT
    path = layouts_dir / f"{name}.html"
    if not path.is_file():
        raise LayoutNotFoundError(path)
    return path


def read_template(path: Path) -> str:
    return path.read_text(encoding="utf-8")


def render_entry(entry: dict, layouts_dir: Path) -> str:
    template = read_template(layout_file(layouts_dir, entry.get("layout", "")))
    return render_template(template, **{key: entry.get(key, "") for key in TEMPLATE_KEYS})


def write_text(path: Path, text: str) -> None:
    path.write_text(text, encoding="utf-8")


def copy_asset(src: Path, dest_dir: Path) -> Path:
    dest = dest_dir / src.name
    shutil.copy2(src, dest)
    return dest

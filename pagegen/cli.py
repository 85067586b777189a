from __future__ import annotations

import argparse
import os
import sys
import time
from pathlib import Path
from typing import Iterator, Optional

from .config import DEFAULTS, load_config, resolve_path
from .content import is_text, parse_entry
from .errors import BuildError
from .formats import Formatter
from .render import copy_asset, render_entry, write_text

CONFIG_FILE = "site.toml"


def iter_files(root: Path) -> Iterator[Path]:
    """Yield every file under root, depth first."""
    with os.scandir(root) as it:
        entries = sorted(it, key=lambda e: e.name)
    for entry in entries:
        path = Path(entry.path)
        if entry.is_dir():
            yield from iter_files(path)
        elif entry.is_file():
            yield path


def build_site(content_dir: Path, output_dir: Path, layouts_dir: Path, quiet: bool = False) -> int:
    if not content_dir.is_dir():
        raise BuildError(f"Content directory not found: {content_dir}")

    formatter = Formatter()
    count = 0
    for src in iter_files(content_dir):
        dest_dir = output_dir / src.parent.relative_to(content_dir)
        dest_dir.mkdir(parents=True, exist_ok=True)

        if is_text(src):
            entry = parse_entry(src, formatter)
            html_doc = render_entry(entry, layouts_dir)
            dest = dest_dir / f"{src.stem}.html"
            write_text(dest, html_doc)
            action = "convert"
        else:
            dest = copy_asset(src, dest_dir)
            action = "copy"
        count += 1
        if not quiet:
            print(f"{action} {src.relative_to(content_dir)} -> {dest}")
    return count


def main(argv: Optional[list[str]] = None, root: Optional[Path] = None) -> None:
    root = root or Path.cwd()

    pre_parser = argparse.ArgumentParser(add_help=False)
    pre_parser.add_argument(
        "--config",
        default=str(root / CONFIG_FILE),
        help="Path to site config file (TOML/YAML/JSON).",
    )
    pre_args, _ = pre_parser.parse_known_args(argv)
    try:
        config = load_config(resolve_path(root, pre_args.config))
    except BuildError as exc:
        print(exc, file=sys.stderr)
        sys.exit(1)

    def cfg_str(key: str) -> str:
        value = config.get(key)
        return DEFAULTS[key] if value is None else str(value)

    parser = argparse.ArgumentParser(description="Build the static site from the content directory.")
    parser.add_argument("--config", default=pre_args.config, help="Path to site config file (TOML/YAML/JSON).")
    parser.add_argument("--content", default=cfg_str("content"), help="Directory containing content files.")
    parser.add_argument("--output", default=cfg_str("output"), help="Output directory for the site.")
    parser.add_argument("--layouts", default=cfg_str("layouts"), help="Directory containing layout templates.")
    parser.add_argument("--quiet", action="store_true", help="Do not list converted and copied files.")
    args = parser.parse_args(argv)

    content_dir = resolve_path(root, args.content)
    output_dir = resolve_path(root, args.output)
    layouts_dir = resolve_path(root, args.layouts)

    start = time.perf_counter()
    try:
        count = build_site(content_dir, output_dir, layouts_dir, quiet=args.quiet)
    except (BuildError, OSError) as exc:
        print(exc, file=sys.stderr)
        sys.exit(1)
    elapsed = time.perf_counter() - start
    print(f"Build completed in {elapsed:.2f}s ({count} files).")
    print(f"Site generated in: {output_dir}")

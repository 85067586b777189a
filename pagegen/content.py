from __future__ import annotations

import re
from pathlib import Path

from .utils import display_date, file_mtime, rfc822_date

META_RE = re.compile(r"^meta-(?P<key>\w+):\s*(?P<value>.+?)\s*$")
ENTRY_KEYS = ("title", "description", "author", "tags", "layout", "format")
FORMATS = {
    "md": "markdown",
    "markdown": "markdown",
    "txt": "hatena",
    "html": "html",
}


def detect_format(path: Path | str) -> str | None:
    name = Path(path).name
    if "." not in name:
        return None
    ext = name.rsplit(".", 1)[1]
    return FORMATS.get(ext)


def is_text(path: Path | str) -> bool:
    return detect_format(path) is not None


def split_entry(text: str) -> tuple[str, str]:
    """Split raw file contents into the metadata block and the body.

    The first blank line separates the two. A file without a blank line is
    all metadata and has an empty body.
    """
    clean_text = text.lstrip("\ufeff").replace("\r\n", "\n")
    if "\n\n" not in clean_text:
        return clean_text, ""
    raw_meta, body = clean_text.split("\n\n", 1)
    return raw_meta, body


def parse_meta(raw_meta: str) -> dict:
    title = ""
    meta = {}
    for line in raw_meta.splitlines():
        if not line:
            continue
        match = META_RE.match(line)
        if match:
            meta[match.group("key")] = match.group("value")
        else:
            title = line
    return {"title": title, **meta}


def parse_entry(path: Path, formatter) -> dict:
    raw_text = path.read_text(encoding="utf-8")
    raw_meta, body = split_entry(raw_text)
    meta = parse_meta(raw_meta)

    format_name = meta.get("format") or detect_format(path)
    text = formatter.format(body, format_name)

    mtime = file_mtime(path)
    entry = {key: meta.get(key) or "" for key in ENTRY_KEYS}
    entry.update(
        {
            "text": text,
            "update_at": display_date(mtime),
            "pubdate": rfc822_date(mtime),
            "meta": meta,
        }
    )
    return entry

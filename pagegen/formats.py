from __future__ import annotations

import markdown

from .errors import UnsupportedFormatError
from .hatena import HatenaFormatter, InlineFormatter

MARKDOWN_EXTENSIONS = ["fenced_code", "tables"]


def markdown_to_html(text: str) -> str:
    md = markdown.Markdown(extensions=MARKDOWN_EXTENSIONS)
    return md.convert(text)


def html_passthrough(text: str) -> str:
    return text


class Formatter:
    """Body converters for every supported format, built once per run."""

    def __init__(self) -> None:
        self.hatena = HatenaFormatter()

    def format(self, text: str, format_name: str | None) -> str:
        if format_name == "markdown":
            return markdown_to_html(text)
        if format_name == "html":
            return html_passthrough(text)
        if format_name == "hatena":
            return self.format_hatena(text)
        raise UnsupportedFormatError(str(format_name))

    def format_hatena(self, text: str) -> str:
        inline = InlineFormatter()
        body = self.hatena.format(text, inline=inline)
        return "\n".join([body, *inline.footnotes])

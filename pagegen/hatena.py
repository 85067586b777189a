from __future__ import annotations

import html
import re

from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

HEADING_RE = re.compile(r"^(?P<marks>\*{1,3})(?:(?P<name>[\w-]+)\*)?(?P<title>.*)$")
LIST_RE = re.compile(r"^(?P<marks>[-+]+)(?P<text>.*)$")
DL_RE = re.compile(r"^:(?P<term>[^:]+):(?P<desc>.*)$")
TABLE_RE = re.compile(r"^\|.*\|$")
BLOCKQUOTE_RE = re.compile(r"^>(?P<cite>https?://[^>]*)?>$")
SUPER_PRE_RE = re.compile(r"^>\|(?P<lang>[\w+#.-]*)\|$")
SECTION_BREAK = "===="

INLINE_RE = re.compile(
    r"(?P<anchor><a\b[^>]*>.*?</a>)"
    r"|(?P<tag><[^>]+>)"
    r"|\[\](?P<raw>.*?)\[\]"
    r"|(?P<paren>\)\(\()"
    r"|\(\((?P<note>.+?)\)\)"
    r"|\[(?P<url>https?://[^\s\]]+?)(?::title=(?P<label>[^\]]+))?\]"
    r"|(?P<bare>https?://[^\s<>\"'\]]+)",
    re.IGNORECASE,
)
TAG_RE = re.compile(r"<[^>]+>")


class InlineFormatter:
    """Inline markup pass (links, autolinks, footnotes) for one document.

    It collects that document's footnotes, so a new one is needed per file.
    """

    def __init__(self) -> None:
        self.footnotes: list[str] = []

    def format(self, text: str) -> str:
        return INLINE_RE.sub(self._replace, text)

    def _replace(self, match: re.Match) -> str:
        if match.group("anchor") or match.group("tag"):
            return match.group(0)
        if match.group("raw") is not None:
            return match.group("raw")
        if match.group("paren"):
            return "(("
        if match.group("note"):
            return self._footnote(match.group("note"))
        if match.group("url"):
            url = match.group("url")
            label = match.group("label") or url
            return f'<a href="{html.escape(url)}">{label}</a>'
        url = match.group("bare")
        return f'<a href="{html.escape(url)}">{url}</a>'

    def _footnote(self, note: str) -> str:
        number = len(self.footnotes) + 1
        title = html.escape(TAG_RE.sub("", note), quote=True)
        self.footnotes.append(f'<div class="footnote" id="fn{number}">*{number}: {note}</div>')
        return f'<a href="#fn{number}" title="{title}">*{number}</a>'


class HatenaFormatter:
    """Block-level Hatena notation, shared by every ``.txt`` file of a build."""

    def __init__(self) -> None:
        self._lexers: dict = {}

    def format(self, text: str, inline: InlineFormatter | None = None) -> str:
        if inline is None:
            inline = InlineFormatter()
        lines = text.replace("\r\n", "\n").split("\n")
        while lines and not lines[-1].strip():
            lines.pop()
        return self._format_blocks(lines, inline, sections=True)

    def _format_blocks(self, lines: list[str], inline: InlineFormatter, sections: bool) -> str:
        out: list[str] = []
        paragraph: list[str] = []
        open_sections: list[int] = []
        blank_run = 0

        def flush_paragraph() -> None:
            if paragraph:
                out.append("<p>" + "<br />\n".join(inline.format(line) for line in paragraph) + "</p>")
                paragraph.clear()

        def close_sections(level: int) -> None:
            while open_sections and open_sections[-1] >= level:
                open_sections.pop()
                out.append("</div>")

        i = 0
        while i < len(lines):
            line = lines[i]
            if not line.strip():
                flush_paragraph()
                blank_run += 1
                if blank_run >= 2:
                    out.append("<br />")
                i += 1
                continue
            blank_run = 0

            heading = HEADING_RE.match(line) if sections else None
            if heading:
                flush_paragraph()
                level = len(heading.group("marks"))
                close_sections(level)
                open_sections.append(level)
                tag = f"h{level + 2}"
                name = heading.group("name")
                id_attr = f' id="{html.escape(name)}"' if name else ""
                title = inline.format(heading.group("title").strip())
                out.append('<div class="section">')
                out.append(f"<{tag}{id_attr}>{title}</{tag}>")
                i += 1
                continue

            if sections and line.rstrip() == SECTION_BREAK:
                flush_paragraph()
                close_sections(0)
                i += 1
                continue

            quote = BLOCKQUOTE_RE.match(line)
            if quote:
                flush_paragraph()
                inner, i = self._collect_nested(lines, i + 1)
                body = self._format_blocks(inner, inline, sections=False)
                cite = quote.group("cite")
                if cite:
                    body += f'\n<cite><a href="{html.escape(cite)}">{html.escape(cite)}</a></cite>'
                out.append(f"<blockquote>\n{body}\n</blockquote>")
                continue

            super_pre = SUPER_PRE_RE.match(line)
            if super_pre:
                flush_paragraph()
                inner, i = self._collect_until(lines, i + 1, "||<")
                out.append(self._super_pre("\n".join(inner), super_pre.group("lang")))
                continue

            if line == ">|":
                flush_paragraph()
                inner, i = self._collect_until(lines, i + 1, "|<")
                out.append("<pre>" + "\n".join(inline.format(item) for item in inner) + "</pre>")
                continue

            if line.startswith("><"):
                flush_paragraph()
                inner, i = self._collect_stop_p(lines, i)
                out.append(inner)
                continue

            if LIST_RE.match(line):
                flush_paragraph()
                items = []
                while i < len(lines):
                    match = LIST_RE.match(lines[i])
                    if not match:
                        break
                    items.append((match.group("marks"), match.group("text").strip()))
                    i += 1
                out.append(self._render_list(items, 1, inline))
                continue

            if DL_RE.match(line):
                flush_paragraph()
                rows = []
                while i < len(lines):
                    match = DL_RE.match(lines[i])
                    if not match:
                        break
                    rows.append(f"<dt>{inline.format(match.group('term'))}</dt>")
                    rows.append(f"<dd>{inline.format(match.group('desc').strip())}</dd>")
                    i += 1
                out.append("<dl>\n" + "\n".join(rows) + "\n</dl>")
                continue

            if TABLE_RE.match(line):
                flush_paragraph()
                rows = []
                while i < len(lines) and TABLE_RE.match(lines[i]):
                    rows.append(self._table_row(lines[i], inline))
                    i += 1
                out.append("<table>\n" + "\n".join(rows) + "\n</table>")
                continue

            paragraph.append(line)
            i += 1

        flush_paragraph()
        close_sections(0)
        return "\n".join(out)

    def _collect_until(self, lines: list[str], start: int, end_marker: str) -> tuple[list[str], int]:
        inner = []
        i = start
        while i < len(lines):
            if lines[i] == end_marker:
                return inner, i + 1
            inner.append(lines[i])
            i += 1
        return inner, i

    def _collect_nested(self, lines: list[str], start: int) -> tuple[list[str], int]:
        inner = []
        depth = 1
        i = start
        while i < len(lines):
            line = lines[i]
            if BLOCKQUOTE_RE.match(line):
                depth += 1
            elif line == "<<":
                depth -= 1
                if depth == 0:
                    return inner, i + 1
            inner.append(line)
            i += 1
        return inner, i

    def _collect_stop_p(self, lines: list[str], start: int) -> tuple[str, int]:
        # "><" opens the block and a line ending in "><" closes it, possibly the same line.
        inner = []
        i = start
        while i < len(lines):
            line = lines[i]
            inner.append(line)
            i += 1
            if line.endswith("><") and (len(inner) > 1 or len(line) > 2):
                break
        text = "\n".join(inner)
        text = text[1:]
        if text.endswith("><"):
            text = text[:-1]
        return text, i

    def _super_pre(self, code: str, lang: str) -> str:
        if lang:
            lexer = self._lexer(lang)
            if lexer is not None:
                return highlight(code, lexer, HtmlFormatter(cssclass=f"code lang-{lang}")).rstrip("\n")
        return f'<pre class="code">{html.escape(code, quote=False)}</pre>'

    def _lexer(self, lang: str):
        if lang not in self._lexers:
            try:
                self._lexers[lang] = get_lexer_by_name(lang)
            except ClassNotFound:
                self._lexers[lang] = None
        return self._lexers[lang]

    def _render_list(self, items: list[tuple[str, str]], depth: int, inline: InlineFormatter) -> str:
        tag = "ul" if items[0][0][depth - 1] == "-" else "ol"
        out = [f"<{tag}>"]
        j = 0
        while j < len(items):
            marks, text = items[j]
            k = j + 1
            while k < len(items) and len(items[k][0]) > depth:
                k += 1
            if len(marks) == depth:
                body = inline.format(text)
                if k > j + 1:
                    body += "\n" + self._render_list(items[j + 1 : k], depth + 1, inline) + "\n"
            else:
                k = j
                while k < len(items) and len(items[k][0]) > depth:
                    k += 1
                body = "\n" + self._render_list(items[j:k], depth + 1, inline) + "\n"
            out.append(f"<li>{body}</li>")
            j = k
        out.append(f"</{tag}>")
        return "\n".join(out)

    def _table_row(self, line: str, inline: InlineFormatter) -> str:
        cells = []
        for cell in line[1:-1].split("|"):
            if cell.startswith("*"):
                cells.append(f"<th>{inline.format(cell[1:])}</th>")
            else:
                cells.append(f"<td>{inline.format(cell)}</td>")
        return "<tr>" + "".join(cells) + "</tr>"

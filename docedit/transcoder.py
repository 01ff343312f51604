"""
Markdown ⇄ editor HTML transcoding.

Documents are stored as markdown with an optional leading YAML front matter
block. The editor works on an HTML fragment, so a document is decoded into
``(front_matter, html)`` when opened and encoded back to markdown on save.

The front matter is held separately from the body while editing. A document
that had none never gains one; ``None`` and ``{}`` are kept distinct for that
reason.

Example:
    ```python
    from docedit.transcoder import decode, encode

    front_matter, html = decode("---\\ntitle: Intro\\n---\\n\\n# Hello\\n")
    # front_matter == {"title": "Intro"}, html == "<h1>Hello</h1>"

    text = encode("<h1>Hello again</h1>", front_matter)
    # "---\\ntitle: Intro\\n---\\n\\n# Hello again\\n"
    ```
"""

import re
from collections.abc import Iterable
from typing import Any

import markdown
import yaml
from bs4 import BeautifulSoup, Comment, NavigableString, Tag

from docedit.exceptions import DocumentFormatError

FrontMatter = dict[str, Any]

MARKDOWN_EXTENSIONS = ["fenced_code", "tables", "sane_lists"]

_FRONT_MATTER = re.compile(
    r"\A---[ \t]*\r?\n(?P<yaml>.*?)(?:\r?\n)?^---[ \t]*(?:\r?\n|\Z)",
    re.DOTALL | re.MULTILINE,
)

_BLOCK_TAGS = {
    "address", "article", "aside", "blockquote", "div", "dl", "figure",
    "footer", "h1", "h2", "h3", "h4", "h5", "h6", "header", "hr", "ol", "p",
    "pre", "section", "table", "ul",
}
_HEADINGS = {"h1": 1, "h2": 2, "h3": 3, "h4": 4, "h5": 5, "h6": 6}

# Characters with inline meaning anywhere in a line
_INLINE_SPECIAL = re.compile(r"([\\`*_\[\]])")
# Constructs that only have meaning at the start of a line
_LINE_START_SPECIAL = re.compile(r"^([ \t]*)(#{1,6}(?=\s|$)|>|[-+*](?=\s|$))", re.MULTILINE)
_ORDERED_MARKER = re.compile(r"^([ \t]*\d+)\.(?=\s|$)", re.MULTILINE)
_SETEXT_UNDERLINE = re.compile(r"^([ \t]*)([=-]+[ \t]*)$", re.MULTILINE)
_WHITESPACE = re.compile(r"\s+")
_LIST_INDENT = "    "
_LIST_ITEM = re.compile(r"(?:- |\d+\. )")


def decode_bytes(raw: bytes) -> str:
    """
    Decode stored file bytes as UTF-8, dropping a byte order mark.

    Raises:
        DocumentFormatError: If the bytes are not valid UTF-8
    """
    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise DocumentFormatError(f"Document is not valid UTF-8: {e}") from e


def split_front_matter(text: str) -> tuple[FrontMatter | None, str]:
    """
    Separate a leading YAML front matter block from the markdown body.

    Returns:
        ``(front_matter, body)``; ``front_matter`` is None when the document
        has no block and ``{}`` when the block is empty

    Raises:
        DocumentFormatError: If the block is not valid YAML or not a mapping
    """
    text = text.lstrip("\ufeff")
    match = _FRONT_MATTER.match(text)
    if match is None:
        return None, text

    try:
        data = yaml.safe_load(match.group("yaml"))
    except yaml.YAMLError as e:
        raise DocumentFormatError(f"Malformed front matter: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise DocumentFormatError(
            f"Front matter must be a mapping, got {type(data).__name__}"
        )

    return data, text[match.end():]


def decode(markdown_text: str) -> tuple[FrontMatter | None, str]:
    """
    Convert a stored document into front matter and editor HTML.

    Args:
        markdown_text: Markdown with optional leading ``---`` YAML block

    Returns:
        ``(front_matter, html)``

    Raises:
        DocumentFormatError: If the front matter cannot be parsed
    """
    front_matter, body = split_front_matter(markdown_text)
    html = markdown.markdown(
        body,
        extensions=MARKDOWN_EXTENSIONS,
        output_format="html",
    )
    return front_matter, html


def encode(html: str, front_matter: FrontMatter | None = None) -> str:
    """
    Convert editor HTML back into a stored document.

    Args:
        html: HTML fragment from the editor
        front_matter: Mapping extracted by :func:`decode`; serialised only
            when non-empty

    Returns:
        Markdown text ending in a single newline
    """
    body = _MarkdownWriter().render(html)

    if not front_matter:
        return body

    header = yaml.safe_dump(
        front_matter,
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
    )
    if not body:
        return f"---\n{header}---\n"
    return f"---\n{header}---\n\n{body}"


def _escape(text: str) -> str:
    text = _INLINE_SPECIAL.sub(r"\\\1", text)
    return text.replace("<", "&lt;")


def _escape_line_starts(text: str) -> str:
    text = _LINE_START_SPECIAL.sub(r"\1\\\2", text)
    text = _ORDERED_MARKER.sub(r"\1\\.", text)
    return _SETEXT_UNDERLINE.sub(r"\1\\\2", text)


def _code_span(code: str) -> str:
    longest = max((len(run) for run in re.findall(r"`+", code)), default=0)
    fence = "`" * (longest + 1)
    if code.startswith("`") or code.endswith("`"):
        code = f" {code} "
    return f"{fence}{code}{fence}"


def _indent(text: str, prefix: str) -> str:
    return "\n".join(prefix + line if line else line for line in text.split("\n"))


class _MarkdownWriter:
    """Walks a parsed HTML fragment and writes markdown blocks."""

    def render(self, html: str) -> str:
        soup = BeautifulSoup(html, "html.parser")
        blocks = self._blocks(soup)
        return "\n\n".join(blocks) + "\n" if blocks else ""

    # Block level

    def _blocks(self, parent: Tag) -> list[str]:
        blocks: list[str] = []
        pending: list[Any] = []

        def flush() -> None:
            paragraph = self._inline_run(pending).strip()
            pending.clear()
            if paragraph:
                blocks.append(_escape_line_starts(paragraph))

        for child in parent.children:
            if isinstance(child, Tag) and child.name in _BLOCK_TAGS:
                flush()
                block = self._block(child)
                if block:
                    blocks.append(block)
            else:
                pending.append(child)
        flush()
        return blocks

    def _block(self, node: Tag) -> str:
        name = node.name
        if name in _HEADINGS:
            text = _WHITESPACE.sub(" ", self._inline_children(node)).strip()
            if text.endswith("#"):
                # A closing run of #s would be read as an ATX closing sequence
                text = text[:-1] + "\\#"
            return "#" * _HEADINGS[name] + " " + text if text else ""
        if name == "p":
            return _escape_line_starts(self._inline_children(node).strip())
        if name == "pre":
            return self._code_block(node)
        if name in ("ul", "ol"):
            return self._list(node)
        if name == "blockquote":
            inner = "\n\n".join(self._blocks(node))
            return "\n".join(
                f"> {line}" if line else ">" for line in inner.split("\n")
            )
        if name == "hr":
            return "* * *"
        if name == "table":
            return self._table(node)
        return "\n\n".join(self._blocks(node))

    def _code_block(self, node: Tag) -> str:
        code = node.find("code")
        source = code if isinstance(code, Tag) else node
        text = source.get_text()
        if not text.endswith("\n"):
            text += "\n"

        language = ""
        for css_class in source.get("class") or []:
            if css_class.startswith("language-"):
                language = css_class[len("language-"):]
                break

        longest = max((len(run) for run in re.findall(r"^`+", text, re.MULTILINE)), default=0)
        fence = "`" * max(3, longest + 1)
        return f"{fence}{language}\n{text}{fence}"

    def _list(self, node: Tag) -> str:
        ordered = node.name == "ol"
        number = _start_number(node.get("start")) if ordered else 0
        items: list[str] = []

        for item in node.find_all("li", recursive=False):
            marker = f"{number}. " if ordered else "- "
            number += 1
            blocks = self._blocks(item)
            if not blocks:
                items.append(marker.rstrip())
                continue
            first, rest = blocks[0], blocks[1:]
            lines = [marker + _indent(first, _LIST_INDENT).lstrip()]
            for block in rest:
                separator = "\n" if _LIST_ITEM.match(block) else "\n\n"
                lines.append(separator + _indent(block, _LIST_INDENT))
            items.append("".join(lines))

        return "\n".join(items)

    def _table(self, node: Tag) -> str:
        rows = [
            [
                _WHITESPACE.sub(" ", self._inline_children(cell)).strip().replace("|", "\\|")
                for cell in row.find_all(["th", "td"], recursive=False)
            ]
            for row in node.find_all("tr")
        ]
        rows = [row for row in rows if row]
        if not rows:
            return ""

        width = max(len(row) for row in rows)
        rows = [row + [""] * (width - len(row)) for row in rows]
        lines = ["| " + " | ".join(rows[0]) + " |", "|" + " --- |" * width]
        lines.extend("| " + " | ".join(row) + " |" for row in rows[1:])
        return "\n".join(lines)

    # Inline level

    def _inline_children(self, node: Tag) -> str:
        return self._inline_run(node.children)

    def _inline_run(self, nodes: Iterable[Any]) -> str:
        parts: list[str] = []
        after_break = False
        for child in nodes:
            text = self._inline(child)
            if after_break:
                # The source newline after a hard break is not content
                text = text.lstrip(" ")
            parts.append(text)
            after_break = (isinstance(child, Tag) and child.name == "br") or (after_break and not text)
        return "".join(parts)

    def _inline(self, node: Any) -> str:
        if isinstance(node, Comment):
            return ""
        if isinstance(node, NavigableString):
            return _escape(_WHITESPACE.sub(" ", str(node)))
        if not isinstance(node, Tag):
            return ""

        name = node.name
        if name == "br":
            return "  \n"
        if name in ("strong", "b"):
            return self._wrap(node, "**")
        if name in ("em", "i"):
            return self._wrap(node, "*")
        if name in ("s", "del", "strike"):
            return self._wrap(node, "<del>", "</del>")
        if name == "code":
            return _code_span(node.get_text())
        if name == "a":
            return self._link(node)
        if name == "img":
            return self._image(node)
        if name in _BLOCK_TAGS:
            # Block content inside an inline context, e.g. <li><p>..</p></li>
            return "\n\n".join(self._blocks(node))
        return self._inline_children(node)

    def _wrap(self, node: Tag, opener: str, closer: str | None = None) -> str:
        content = self._inline_children(node)
        stripped = content.strip()
        if not stripped:
            return content
        leading = content[: len(content) - len(content.lstrip())]
        trailing = content[len(content.rstrip()):]
        return f"{leading}{opener}{stripped}{closer or opener}{trailing}"

    def _link(self, node: Tag) -> str:
        href = node.get("href")
        text = self._inline_children(node).strip()
        if not href:
            return text
        return f"[{text}]({_destination(href, node.get('title'))})"

    def _image(self, node: Tag) -> str:
        src = node.get("src")
        if not src:
            return ""
        alt = _escape(node.get("alt", ""))
        return f"![{alt}]({_destination(src, node.get('title'))})"


def _start_number(value: str | None) -> int:
    try:
        return int(value) if value else 1
    except ValueError:
        return 1


def _destination(url: str, title: str | None) -> str:
    if re.search(r"[\s()<>]", url):
        url = f"<{url}>"
    if title:
        escaped = title.replace('"', "&quot;")
        return f'{url} "{escaped}"'
    return url


__all__ = [
    "FrontMatter",
    "decode",
    "decode_bytes",
    "encode",
    "split_front_matter",
]

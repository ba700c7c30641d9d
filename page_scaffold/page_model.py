r"""Minimal structural model of a page file.

Pages are Astro components: an optional front-matter preamble fenced by
``---`` lines, followed by a template body. :class:`PageDocument` splits the
text into a list of preamble statements and the body so that import
de-duplication and layout wrapping operate on structure, only serialising
back to text at the boundary. Parsing then rendering a well-formed page is
lossless, which keeps repeated normalisation runs free of spurious edits.

Example
-------
>>> from page_scaffold.page_model import PageDocument
>>> doc = PageDocument.parse("---\nimport X from './x';\n---\n<p>Hi</p>\n")
>>> doc.preamble
["import X from './x';"]
>>> doc.wrap_body("Greeting")
True
>>> print(doc.render(), end="")
---
import X from './x';
---
<Layout title="Greeting">
<p>Hi</p>
</Layout>
"""

from __future__ import annotations

import dataclasses as dc
import re
from html import escape

from ._constants import LAYOUT_SYMBOL, LINK_LIST_SYMBOL

FENCE = "---"

IMPORT_PATTERN = re.compile(
    r"""^\s*import\s+(?P<clause>[^'"]+?)\s+from\s+(?P<quote>['"])(?P<source>[^'"]+)(?P=quote)\s*;?\s*$"""
)
NAMED_CLAUSE_PATTERN = re.compile(r"\{(?P<names>[^}]*)\}")
LAYOUT_TAG_PATTERN = re.compile(rf"<{LAYOUT_SYMBOL}[\s>/]")
SIDEBAR_SLOT_PATTERN = re.compile(r"""slot\s*=\s*["']sidebar["']""")
BARE_LINK_LIST_PATTERN = re.compile(rf"<{LINK_LIST_SYMBOL}\s+items=\{{")


def quote_js(value: object) -> str:
    """Escape text for a single-quoted attribute or JavaScript string literal."""
    return (
        str(value)
        .replace("\\", "\\\\")
        .replace("`", "\\`")
        .replace("'", "\\'")
        .replace("\n", "\\n")
        .replace("\r", "\\r")
    )


def quote_attr(value: object) -> str:
    """Escape text for a double-quoted attribute."""
    return str(value).replace('"', "&quot;")


def quote_text(value: object) -> str:
    """Escape text for element content, where braces open expressions."""
    return escape(str(value)).replace("{", "&#123;").replace("}", "&#125;")


def open_tag_end(text: str, start: int) -> int | None:
    """Return the index just past the ``>`` closing a tag, scanning from ``start``.

    Quoted attribute values and ``{...}`` expressions are skipped, so a ``>``
    inside ``title={a > b}`` does not end the tag. Returns None when the tag is
    never closed.
    """
    depth = 0
    quote: str | None = None
    index = start
    while index < len(text):
        char = text[index]
        if quote is not None:
            if char == "\\" and depth:
                index += 1
            elif char == quote:
                quote = None
        elif char in "'\"`":
            quote = char
        elif char == "{":
            depth += 1
        elif char == "}":
            depth = max(depth - 1, 0)
        elif char == ">" and depth == 0:
            return index + 1
        index += 1
    return None


def sidebar_markup(list_name: str) -> str:
    """Return the vertical sidebar link list bound to ``list_name``."""
    return (
        f'<{LINK_LIST_SYMBOL} slot="sidebar" items={{{list_name}}} '
        'orientation="vertical" />'
    )


@dc.dataclass(frozen=True, slots=True)
class ImportStatement:
    """A single-line ES module import.

    Attributes
    ----------
    source : str
        Module specifier (for example ``@layouts/Page.astro``).
    default : str or None
        Name bound by a default (or namespace) import.
    named : tuple[str, ...]
        Names bound by the braced import list, after ``as`` renames.
    """

    source: str
    default: str | None = None
    named: tuple[str, ...] = ()

    @classmethod
    def parse(cls, line: str) -> ImportStatement | None:
        """Return the parsed import on ``line`` or None for other statements."""
        match = IMPORT_PATTERN.match(line)
        if match is None:
            return None
        clause = match["clause"].strip().removeprefix("type ").strip()
        named: tuple[str, ...] = ()
        braced = NAMED_CLAUSE_PATTERN.search(clause)
        if braced:
            named = tuple(
                _bound_name(part)
                for part in braced["names"].split(",")
                if part.strip()
            )
            clause = (clause[: braced.start()] + clause[braced.end() :]).strip()
        default = None
        if clause.strip(" ,"):
            default = _bound_name(clause.rstrip(",").strip())
        return cls(source=match["source"], default=default, named=named)

    @property
    def symbols(self) -> tuple[str, ...]:
        """Every name this statement binds in the page scope."""
        return ((self.default,) if self.default else ()) + self.named

    def render(self) -> str:
        """Serialise the statement using single-quoted specifiers."""
        parts: list[str] = []
        if self.default:
            parts.append(self.default)
        if self.named:
            parts.append("{ " + ", ".join(self.named) + " }")
        return f"import {', '.join(parts)} from '{self.source}';"


def _bound_name(binding: str) -> str:
    """Return the local name bound by ``a``, ``a as b``, or ``* as ns``."""
    tokens = binding.split()
    return tokens[-1] if tokens else binding


@dc.dataclass(slots=True)
class PageDocument:
    """Preamble statements plus template body of a page file.

    Attributes
    ----------
    preamble : list[str] or None
        Lines between the opening and closing ``---`` fences, or ``None``
        when the page has no front-matter.
    body : str
        Everything after the closing fence line.
    """

    preamble: list[str] | None
    body: str

    @classmethod
    def parse(cls, text: str) -> PageDocument:
        """Split page text into preamble lines and body.

        A page whose opening fence is never closed is treated as having no
        preamble; the stray fence line is dropped from the body.
        """
        if not text.startswith(FENCE):
            return cls(preamble=None, body=text)
        open_end = text.find("\n")
        if open_end == -1:
            return cls(preamble=None, body="")
        close = text.find(f"\n{FENCE}", open_end)
        if close == -1:
            return cls(preamble=None, body=text[open_end + 1 :])
        preamble = text[open_end + 1 : close].split("\n") if close > open_end else []
        line_end = text.find("\n", close + 1)
        body = "" if line_end == -1 else text[line_end + 1 :]
        return cls(preamble=preamble, body=body)

    def render(self) -> str:
        """Serialise the document back to page text."""
        if self.preamble is None:
            return self.body
        head = "".join(f"{line}\n" for line in self.preamble)
        return f"{FENCE}\n{head}{FENCE}\n{self.body}"

    def imports(self) -> list[tuple[int, ImportStatement]]:
        """Return ``(line index, statement)`` pairs for parseable imports."""
        found: list[tuple[int, ImportStatement]] = []
        for index, line in enumerate(self.preamble or []):
            statement = ImportStatement.parse(line)
            if statement is not None:
                found.append((index, statement))
        return found

    def binds(self, symbol: str) -> bool:
        """Return True when any preamble import binds ``symbol``."""
        return any(symbol in statement.symbols for _, statement in self.imports())

    def drop_default_imports(self, symbol: str) -> int:
        """Remove default imports of ``symbol`` whatever module they point at.

        Named imports sharing a statement with the dropped default are kept.
        Returns the number of statements touched.
        """
        if not self.preamble:
            return 0
        kept: list[str] = []
        touched = 0
        for line in self.preamble:
            statement = ImportStatement.parse(line)
            if statement is None or statement.default != symbol:
                kept.append(line)
                continue
            touched += 1
            if statement.named:
                kept.append(dc.replace(statement, default=None).render())
        self.preamble = kept
        return touched

    def ensure_import(self, statement: ImportStatement, *, index: int = 0) -> bool:
        """Insert ``statement`` unless every symbol it binds is already imported.

        A missing preamble is created. Returns True when a line was added.
        """
        if self.preamble is None:
            self.preamble = []
        if all(self.binds(symbol) for symbol in statement.symbols):
            return False
        self.preamble.insert(min(index, len(self.preamble)), statement.render())
        return True

    def has_layout_tag(self) -> bool:
        return LAYOUT_TAG_PATTERN.search(self.body) is not None

    def wrap_body(self, title: str) -> bool:
        """Wrap the body in a layout invocation unless one is already present."""
        if self.has_layout_tag():
            return False
        inner = self.body.rstrip("\n")
        self.body = (
            f'<{LAYOUT_SYMBOL} title="{quote_attr(title)}">\n'
            f"{inner}\n</{LAYOUT_SYMBOL}>\n"
        )
        return True

    def has_sidebar(self) -> bool:
        return SIDEBAR_SLOT_PATTERN.search(self.body) is not None

    def inject_sidebar(self, list_name: str) -> bool:
        """Insert a sidebar list as the first child of the layout invocation.

        Nothing happens when a sidebar slot already exists or the layout tag
        is self-closing. Returns True when the body changed.
        """
        if self.has_sidebar():
            return False
        match = LAYOUT_TAG_PATTERN.search(self.body)
        if match is None:
            return False
        end = open_tag_end(self.body, match.start() + len(LAYOUT_SYMBOL) + 1)
        if end is None or self.body[end - 2] == "/":
            return False
        self.body = (
            self.body[:end] + f"\n  {sidebar_markup(list_name)}" + self.body[end:]
        )
        return True

    def sidebarize_link_lists(self) -> int:
        """Move slot-less ``<LinkList items={...}>`` usages into the sidebar."""
        self.body, count = BARE_LINK_LIST_PATTERN.subn(
            f'<{LINK_LIST_SYMBOL} slot="sidebar" orientation="vertical" items={{',
            self.body,
        )
        return count


__all__ = [
    "FENCE",
    "ImportStatement",
    "PageDocument",
    "open_tag_end",
    "quote_attr",
    "quote_js",
    "quote_text",
    "sidebar_markup",
]

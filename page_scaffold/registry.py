"""Read and extend the navigation link registry.

The registry is the TypeScript module the site imports its navigation from
(``src/links/registry.ts``). Each navigation list is declared as::

    export const travelTrips = [
      { href: '/travel/trips/rome-2024', label: 'Rome 2024' },
    ];

:class:`LinkRegistry` locates a declaration with a small string- and
comment-aware scanner, parses its entries into :class:`LinkEntry` records, and
appends new entries by splicing text into the list body. Everything outside
the edited list, and every entry before the insertion point, is preserved
byte for byte.

Example
-------
.. code-block:: python

    from pathlib import Path
    from page_scaffold.registry import LinkEntry, LinkRegistry

    registry = LinkRegistry(Path("src/links/registry.ts"))
    result = registry.append_if_absent(
        "travelTrips", LinkEntry("/travel/trips/tokyo-2026", "Tokyo 2026")
    )
    print(result.inserted)
"""

from __future__ import annotations

import dataclasses as dc
import re
from pathlib import Path

from .errors import (
    MalformedRegistryError,
    MissingDependencyError,
    RegistryListNotFoundError,
)
from .page_model import quote_js
from .storage import write_text

DECLARATION_PATTERN = re.compile(
    r"export\s+const\s+(?P<name>[A-Za-z_$][\w$]*)\s*(?::[^=\n]+)?=\s*\["
)
_NAME_PATTERN = re.compile(r"[A-Za-z_$][\w$]*")
_QUOTES = "'\"`"
_PUNCTUATION = "{}:,[]"
_SIMPLE_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "0": "\0", "b": "\b", "f": "\f"}
_RECORD_FIELDS = frozenset({"href", "label"})


@dc.dataclass(frozen=True, slots=True)
class LinkEntry:
    """A navigation link: site-absolute ``href`` and display ``label``."""

    href: str
    label: str


@dc.dataclass(frozen=True, slots=True)
class AppendResult:
    """Outcome of :meth:`LinkRegistry.append_if_absent`.

    ``inserted`` is False when an entry with the same href already existed,
    which is a skip rather than an error.
    """

    list_name: str
    entry: LinkEntry
    inserted: bool


@dc.dataclass(frozen=True, slots=True)
class _Token:
    kind: str
    value: str
    start: int
    end: int

    def is_punct(self, char: str) -> bool:
        return self.kind == "punct" and self.value == char


@dc.dataclass(slots=True)
class _ParsedList:
    entries: list[LinkEntry]
    last_entry_end: int | None
    trailing_comma: bool


class LinkRegistry:
    """Accessor for the named link lists declared in the registry module."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def list_names(self) -> list[str]:
        """Return declared list names in document order."""
        return _declared_names(self._load())

    def read_list(self, name: str) -> list[LinkEntry]:
        """Return the entries of list ``name`` in display order.

        Raises
        ------
        RegistryListNotFoundError
            If no list called ``name`` is declared.
        MalformedRegistryError
            If the list body is not a sequence of ``{ href, label }`` records.
        """
        text = self._load()
        start, end = _locate(text, name)
        return _parse_entries(text[start:end], name).entries

    def append_if_absent(self, name: str, entry: LinkEntry) -> AppendResult:
        """Append ``entry`` to the tail of list ``name`` unless its href exists.

        The registry file is rewritten in place only when an entry is added.
        A missing comma after the current last entry is inserted so the
        module stays valid TypeScript.
        """
        text = self._load()
        start, end = _locate(text, name)
        body = text[start:end]
        parsed = _parse_entries(body, name)
        if any(existing.href == entry.href for existing in parsed.entries):
            return AppendResult(list_name=name, entry=entry, inserted=False)

        if parsed.last_entry_end is not None and not parsed.trailing_comma:
            body = f"{body[: parsed.last_entry_end]},{body[parsed.last_entry_end :]}"
        item = (
            f"  {{ href: '{quote_js(entry.href)}', "
            f"label: '{quote_js(entry.label)}' }},"
        )
        kept = body.rstrip()
        new_body = f"{kept}\n{item}\n" if kept else f"\n{item}\n"
        write_text(self.path, text[:start] + new_body + text[end:])
        return AppendResult(list_name=name, entry=entry, inserted=True)

    def _load(self) -> str:
        try:
            return self.path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            msg = f"Missing {self.path}. Create it before running this command."
            raise MissingDependencyError(msg) from exc


def _declarations(text: str) -> list[re.Match[str]]:
    """Return list declarations outside comments and string literals."""
    found: list[re.Match[str]] = []
    index = 0
    while index < len(text):
        char = text[index]
        if text.startswith("//", index):
            index = _line_end(text, index)
        elif text.startswith("/*", index):
            end = text.find("*/", index + 2)
            index = len(text) if end == -1 else end + 2
        elif char in _QUOTES:
            index = _skip_string(text, index)
        elif (match := DECLARATION_PATTERN.match(text, index)) and (
            index == 0 or not _is_name_char(text[index - 1])
        ):
            found.append(match)
            index = match.end()
        else:
            index += 1
    return found


def _is_name_char(char: str) -> bool:
    return char.isalnum() or char in "_$"


def _skip_string(text: str, index: int) -> int:
    """Return the index after the string literal starting at ``index``."""
    quote = text[index]
    position = index + 1
    while position < len(text):
        char = text[position]
        if char == "\\":
            position += 2
            continue
        if char == quote or (char == "\n" and quote != "`"):
            return position + 1
        position += 1
    return position


def _declared_names(text: str) -> list[str]:
    return [match["name"] for match in _declarations(text)]


def _locate(text: str, name: str) -> tuple[int, int]:
    """Return the ``[start, end)`` span of the body of list ``name``."""
    for match in _declarations(text):
        if match["name"] == name:
            start = match.end()
            return start, _closing_bracket(text, start, name)
    raise RegistryListNotFoundError(name, _declared_names(text))


def _closing_bracket(text: str, start: int, name: str) -> int:
    """Return the index of the ``]`` closing the array opened before ``start``."""
    depth = 1
    index = start
    while index < len(text):
        char = text[index]
        if text.startswith("//", index):
            index = _line_end(text, index)
        elif text.startswith("/*", index):
            index = _comment_end(text, index, name)
        elif char in _QUOTES:
            _, index = _read_string(text, index, name)
        else:
            if char == "[":
                depth += 1
            elif char == "]":
                depth -= 1
                if depth == 0:
                    return index
            index += 1
    msg = f"List '{name}' in the registry is never closed with ']'."
    raise MalformedRegistryError(msg)


def _line_end(text: str, index: int) -> int:
    newline = text.find("\n", index)
    return len(text) if newline == -1 else newline + 1


def _comment_end(text: str, index: int, name: str) -> int:
    end = text.find("*/", index + 2)
    if end == -1:
        msg = f"Unterminated comment in registry list '{name}'."
        raise MalformedRegistryError(msg)
    return end + 2


def _read_string(text: str, index: int, name: str) -> tuple[str, int]:
    """Decode the string literal starting at ``index``; return it and its end."""
    quote = text[index]
    chars: list[str] = []
    position = index + 1
    while position < len(text):
        char = text[position]
        if char == quote:
            return "".join(chars), position + 1
        if char == "\\" and position + 1 < len(text):
            decoded, position = _read_escape(text, position + 1)
            chars.append(decoded)
            continue
        if char == "\n" and quote != "`":
            break
        chars.append(char)
        position += 1
    msg = f"Unterminated string in registry list '{name}'."
    raise MalformedRegistryError(msg)


def _read_escape(text: str, position: int) -> tuple[str, int]:
    """Decode the escape whose code starts at ``position`` (after the backslash)."""
    code = text[position]
    if code == "\n":
        return "", position + 1
    if code == "u":
        if text.startswith("{", position + 1):
            close = text.find("}", position + 2)
            if close != -1:
                return chr(int(text[position + 2 : close], 16)), close + 1
        digits = text[position + 1 : position + 5]
        if len(digits) == 4:
            return chr(int(digits, 16)), position + 5
    return _SIMPLE_ESCAPES.get(code, code), position + 1


def _tokenize(body: str, name: str) -> list[_Token]:
    tokens: list[_Token] = []
    index = 0
    while index < len(body):
        char = body[index]
        if char.isspace():
            index += 1
        elif body.startswith("//", index):
            index = _line_end(body, index)
        elif body.startswith("/*", index):
            index = _comment_end(body, index, name)
        elif char in _QUOTES:
            value, end = _read_string(body, index, name)
            tokens.append(_Token("string", value, index, end))
            index = end
        elif char in _PUNCTUATION:
            tokens.append(_Token("punct", char, index, index + 1))
            index += 1
        elif match := _NAME_PATTERN.match(body, index):
            tokens.append(_Token("name", match.group(0), index, match.end()))
            index = match.end()
        else:
            msg = f"Unexpected {char!r} in registry list '{name}'."
            raise MalformedRegistryError(msg)
    return tokens


def _parse_entries(body: str, name: str) -> _ParsedList:
    """Parse a list body into entries, tracking where the last one ends."""
    tokens = _tokenize(body, name)
    parsed = _ParsedList(entries=[], last_entry_end=None, trailing_comma=False)
    position = 0
    while position < len(tokens):
        if not tokens[position].is_punct("{"):
            msg = f"Registry list '{name}' must contain only {{ href, label }} objects."
            raise MalformedRegistryError(msg)
        fields, position = _parse_record(tokens, position + 1, name)
        parsed.entries.append(LinkEntry(href=fields["href"], label=fields["label"]))
        parsed.last_entry_end = tokens[position - 1].end
        parsed.trailing_comma = False
        if position < len(tokens):
            if not tokens[position].is_punct(","):
                msg = f"Missing ',' between entries of registry list '{name}'."
                raise MalformedRegistryError(msg)
            parsed.trailing_comma = True
            position += 1
    return parsed


def _parse_record(
    tokens: list[_Token], position: int, name: str
) -> tuple[dict[str, str], int]:
    """Parse ``key: 'value'`` pairs up to the closing brace of one record."""
    fields: dict[str, str] = {}
    while position < len(tokens):
        token = tokens[position]
        if token.is_punct("}"):
            if set(fields) != _RECORD_FIELDS:
                found = ", ".join(sorted(fields)) or "nothing"
                msg = (
                    f"Entries in registry list '{name}' need exactly href and "
                    f"label; found {found}."
                )
                raise MalformedRegistryError(msg)
            return fields, position + 1
        if (
            token.kind not in {"name", "string"}
            or position + 2 >= len(tokens)
            or not tokens[position + 1].is_punct(":")
            or tokens[position + 2].kind != "string"
        ):
            msg = f"Registry list '{name}' has a field that is not a string literal."
            raise MalformedRegistryError(msg)
        if token.value in fields:
            msg = f"Duplicate field '{token.value}' in registry list '{name}'."
            raise MalformedRegistryError(msg)
        fields[token.value] = tokens[position + 2].value
        position += 3
        if position < len(tokens) and tokens[position].is_punct(","):
            position += 1
        elif position < len(tokens) and not tokens[position].is_punct("}"):
            msg = f"Missing ',' between fields in registry list '{name}'."
            raise MalformedRegistryError(msg)
    msg = f"Unclosed entry in registry list '{name}'."
    raise MalformedRegistryError(msg)


__all__ = ["AppendResult", "LinkEntry", "LinkRegistry"]

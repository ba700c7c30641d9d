r"""Route identity helpers shared by the synthesizer and normalizer.

A page's identity is its site-absolute route (``/travel/trips/rome-2024``),
independent of on-disk naming. These helpers convert between routes, page
files relative to the pages root, and the human-readable titles derived from
them.

Example
-------
>>> from page_scaffold.routes import normalize_route, title_from_file
>>> normalize_route("travel/trips/rome-2024.astro")
'/travel/trips/rome-2024'
>>> title_from_file("music/concerts/index.astro")
'Concerts'
"""

from __future__ import annotations

import re
from pathlib import Path, PurePosixPath

from ._constants import DEFAULT_PAGE_SUFFIX

_WORD_SEPARATORS = re.compile(r"[-_]")
_WORD_START = re.compile(r"\b\w")
_INDEX_STEM = "index"


def normalize_route(value: str, *, suffix: str = DEFAULT_PAGE_SUFFIX) -> str:
    """Strip a page-file extension and ensure exactly one leading ``/``."""
    text = value.strip()
    if suffix and text.lower().endswith(suffix.lower()):
        text = text[: -len(suffix)]
    return "/" + text.lstrip("/")


def route_for_file(relative_file: str, *, suffix: str = DEFAULT_PAGE_SUFFIX) -> str:
    """Return the route served by a page file relative to the pages root.

    ``index`` files map to their directory, so ``travel/index.astro`` serves
    ``/travel`` and the root ``index.astro`` serves ``/``.
    """
    stem = relative_file
    if suffix and stem.endswith(suffix):
        stem = stem[: -len(suffix)]
    parts = [part for part in stem.split("/") if part]
    if parts and parts[-1] == _INDEX_STEM:
        parts = parts[:-1]
    return "/" + "/".join(parts)


def page_file_for_route(
    pages_root: Path, route: str, *, suffix: str = DEFAULT_PAGE_SUFFIX
) -> Path:
    """Return the page file a new route is written to."""
    relative = route.strip("/") or _INDEX_STEM
    return pages_root / f"{relative}{suffix}"


def relative_page_path(pages_root: Path, page_path: Path) -> str:
    """Return ``page_path`` relative to ``pages_root`` with POSIX separators."""
    return page_path.relative_to(pages_root).as_posix()


def title_from_file(relative_file: str, *, suffix: str = DEFAULT_PAGE_SUFFIX) -> str:
    """Derive a default page title from the file's location.

    The last path segment is used, or the parent directory's name for index
    files. Separators become spaces and each word is capitalised. The site
    root index is titled ``Home``.
    """
    path = PurePosixPath(relative_file)
    if path.name == f"{_INDEX_STEM}{suffix}":
        name = path.parent.name
    else:
        name = path.name[: -len(suffix)] if path.name.endswith(suffix) else path.name
    if not name:
        return "Home"
    spaced = _WORD_SEPARATORS.sub(" ", name)
    return _WORD_START.sub(lambda match: match.group(0).upper(), spaced)


__all__ = [
    "normalize_route",
    "page_file_for_route",
    "relative_page_path",
    "route_for_file",
    "title_from_file",
]

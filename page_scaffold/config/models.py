"""Typed dataclasses describing the scaffolding configuration."""

from __future__ import annotations

import dataclasses as dc
from pathlib import Path

from page_scaffold._constants import (
    DEFAULT_BACKUP_SUFFIX,
    DEFAULT_LAYOUT_FILE,
    DEFAULT_LAYOUT_IMPORT,
    DEFAULT_LINK_LIST_FILE,
    DEFAULT_LINK_LIST_IMPORT,
    DEFAULT_PAGE_SUFFIX,
    DEFAULT_PAGES_ROOT,
    DEFAULT_REGISTRY_FILE,
    DEFAULT_REGISTRY_IMPORT,
)


class ScaffoldConfigError(ValueError):
    """Raised when the scaffolding configuration is invalid or incomplete."""


@dc.dataclass(slots=True)
class ProjectPaths:
    """Locations of the files the tools read and write, relative to the root."""

    pages_root: Path = Path(DEFAULT_PAGES_ROOT)
    layout: Path = Path(DEFAULT_LAYOUT_FILE)
    link_list: Path = Path(DEFAULT_LINK_LIST_FILE)
    registry: Path = Path(DEFAULT_REGISTRY_FILE)

    def resolve(self, root: Path) -> ProjectPaths:
        """Return a copy with every path anchored at ``root``."""
        return ProjectPaths(
            pages_root=root / self.pages_root,
            layout=root / self.layout,
            link_list=root / self.link_list,
            registry=root / self.registry,
        )


@dc.dataclass(slots=True)
class ImportSources:
    """Module specifiers written into page preambles."""

    layout: str = DEFAULT_LAYOUT_IMPORT
    link_list: str = DEFAULT_LINK_LIST_IMPORT
    registry: str = DEFAULT_REGISTRY_IMPORT


@dc.dataclass(slots=True)
class SectionIndex:
    """A page regenerated wholesale as a navigation listing.

    Attributes
    ----------
    route : str
        Site-absolute route of the index page (for example ``/travel/trips``).
    title : str
        Title bound to the layout invocation.
    list_name : str or None
        Registry list rendered in the sidebar; ``None`` renders a placeholder
        paragraph and omits the list imports.
    """

    route: str
    title: str
    list_name: str | None = None


@dc.dataclass(slots=True)
class DetailGroup:
    """Pages under ``prefix`` receive a sidebar bound to ``list_name``."""

    prefix: str
    list_name: str

    def matches(self, relative_file: str) -> bool:
        """Return True when the page-root-relative file sits under the prefix."""
        return relative_file.startswith(self.prefix)


@dc.dataclass(slots=True)
class ScaffoldConfig:
    """Complete configuration consumed by the synthesizer and normalizer."""

    paths: ProjectPaths = dc.field(default_factory=ProjectPaths)
    imports: ImportSources = dc.field(default_factory=ImportSources)
    page_suffix: str = DEFAULT_PAGE_SUFFIX
    backup_suffix: str = DEFAULT_BACKUP_SUFFIX
    section_indexes: dict[str, SectionIndex] = dc.field(default_factory=dict)
    detail_groups: list[DetailGroup] = dc.field(default_factory=list)

    def get_section_index(self, route: str) -> SectionIndex | None:
        """Return the index mapping for ``route`` if one is configured."""
        return self.section_indexes.get(route)

    def find_detail_group(self, relative_file: str) -> DetailGroup | None:
        """Return the first detail group whose prefix matches the file."""
        return next(
            (group for group in self.detail_groups if group.matches(relative_file)),
            None,
        )


__all__ = [
    "DetailGroup",
    "ImportSources",
    "ProjectPaths",
    "ScaffoldConfig",
    "ScaffoldConfigError",
    "SectionIndex",
]

"""Bring every page under the pages root in line with the layout conventions.

Normalisation is computed as a :class:`NormalizationPlan` before anything is
written: each page file is read, transformed in memory, and recorded when its
text changes. A dry run reports the plan; applying it writes each changed
page after saving a one-time backup of its previous content. Both paths share
the same planning code.

Per page:

* Configured section index pages are regenerated wholesale from the section
  index template.
* Every other page keeps its body but gets exactly one canonical layout
  import at the top of its preamble, a layout wrapper if it has none, and,
  for pages under a configured detail group, a sidebar bound to that group's
  registry list.

Running the normalizer twice with the same configuration changes nothing the
second time.

Example
-------
>>> from pathlib import Path
>>> from page_scaffold.config import load_scaffold_config
>>> from page_scaffold.normalizer import PageNormalizer
>>> config = load_scaffold_config(Path("config/site.yaml"))  # doctest: +SKIP
>>> normalizer = PageNormalizer.from_config(config, root=Path("."))  # doctest: +SKIP
>>> summary = normalizer.run(dry_run=True)  # doctest: +SKIP
>>> summary.updated  # doctest: +SKIP
0
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import logging
import typing as typ

from ._constants import (
    DEFAULT_BACKUP_SUFFIX,
    DEFAULT_PAGE_SUFFIX,
    LAYOUT_SYMBOL,
    LINK_LIST_SYMBOL,
)
from .config import DetailGroup, ImportSources, SectionIndex
from .page_model import ImportStatement, PageDocument
from .routes import route_for_file, title_from_file
from .storage import PageStore
from .templating import PageTemplates

if typ.TYPE_CHECKING:
    from pathlib import Path

    from .config import ScaffoldConfig

logger = logging.getLogger(__name__)


@dc.dataclass(slots=True)
class PlannedChange:
    """A page whose normalised text differs from what is on disk."""

    path: Path
    relative: str
    original: str
    updated: str
    templated: bool


@dc.dataclass(slots=True)
class NormalizationPlan:
    """Every change a normalisation run would make, in walk order."""

    changes: list[PlannedChange] = dc.field(default_factory=list)
    skipped: list[str] = dc.field(default_factory=list)

    @property
    def updated(self) -> int:
        return len(self.changes)

    @property
    def templated(self) -> int:
        return sum(1 for change in self.changes if change.templated)


@dc.dataclass(frozen=True, slots=True)
class NormalizeSummary:
    """Counts reported at the end of a run.

    ``updated`` is the number of files changed (or that would change in a dry
    run); ``templated`` is how many of those were regenerated as section
    index pages.
    """

    updated: int
    templated: int
    dry_run: bool


class PageNormalizer:
    """Plan and apply layout normalisation across a page tree."""

    def __init__(
        self,
        pages_root: Path,
        section_indexes: cabc.Mapping[str, SectionIndex],
        detail_groups: cabc.Sequence[DetailGroup],
        *,
        imports: ImportSources | None = None,
        page_suffix: str = DEFAULT_PAGE_SUFFIX,
        backup_suffix: str = DEFAULT_BACKUP_SUFFIX,
        sidebarize: bool = False,
        templates: PageTemplates | None = None,
    ) -> None:
        """Initialize the normalizer.

        Parameters
        ----------
        pages_root : Path
            Directory walked recursively for page files.
        section_indexes : Mapping[str, SectionIndex]
            Routes regenerated wholesale as listing pages.
        detail_groups : Sequence[DetailGroup]
            Path prefixes whose pages receive a sidebar; first match wins.
        imports : ImportSources, optional
            Module specifiers for generated imports.
        page_suffix : str, optional
            Extension identifying page files.
        backup_suffix : str, optional
            Suffix appended to a page's name for its one-time backup.
        sidebarize : bool, optional
            Also move slot-less ``<LinkList items={...}>`` usages into the
            sidebar slot.
        templates : PageTemplates, optional
            Renderer for section index pages.
        """
        self.imports = imports or ImportSources()
        self.section_indexes = dict(section_indexes)
        self.detail_groups = list(detail_groups)
        self.page_suffix = page_suffix
        self.sidebarize = sidebarize
        self.store = PageStore(
            pages_root, suffix=page_suffix, backup_suffix=backup_suffix
        )
        self.templates = templates or PageTemplates(self.imports)
        self._layout_import = ImportStatement(
            source=self.imports.layout, default=LAYOUT_SYMBOL
        )
        self._link_list_import = ImportStatement(
            source=self.imports.link_list, default=LINK_LIST_SYMBOL
        )

    @classmethod
    def from_config(
        cls, config: ScaffoldConfig, *, root: Path, sidebarize: bool = False
    ) -> PageNormalizer:
        """Build a normalizer from a loaded configuration rooted at ``root``."""
        paths = config.paths.resolve(root)
        return cls(
            paths.pages_root,
            config.section_indexes,
            config.detail_groups,
            imports=config.imports,
            page_suffix=config.page_suffix,
            backup_suffix=config.backup_suffix,
            sidebarize=sidebarize,
        )

    def plan(self) -> NormalizationPlan:
        """Read every page and record those whose text would change.

        Pages that cannot be read as UTF-8 text are logged, listed in
        ``skipped``, and left untouched.
        """
        plan = NormalizationPlan()
        for path in self.store.iter_pages():
            relative = self.store.relative(path)
            try:
                original = self.store.read(path)
            except (OSError, UnicodeDecodeError) as exc:
                logger.warning("Skipping %s: %s", relative, exc)
                plan.skipped.append(relative)
                continue
            updated, templated = self.normalize_text(original, relative)
            if updated != original:
                plan.changes.append(
                    PlannedChange(
                        path=path,
                        relative=relative,
                        original=original,
                        updated=updated,
                        templated=templated,
                    )
                )
        return plan

    def apply(self, plan: NormalizationPlan) -> None:
        """Write every planned change, backing up the first original."""
        for change in plan.changes:
            self.store.write(change.path, change.updated, original=change.original)

    def run(self, *, dry_run: bool = False) -> NormalizeSummary:
        """Plan, optionally apply, and summarise a normalisation pass."""
        plan = self.plan()
        if not dry_run:
            self.apply(plan)
        return NormalizeSummary(
            updated=plan.updated, templated=plan.templated, dry_run=dry_run
        )

    def normalize_text(self, text: str, relative: str) -> tuple[str, bool]:
        """Return the normalised page text and whether it was templated.

        Parameters
        ----------
        text : str
            Current page content.
        relative : str
            Page path relative to the pages root, POSIX separators.
        """
        route = route_for_file(relative, suffix=self.page_suffix)
        section = self.section_indexes.get(route)
        if section is not None:
            return self.templates.render_section_index(section), True

        document = PageDocument.parse(text)
        if self.sidebarize:
            document.sidebarize_link_lists()
        document.drop_default_imports(LAYOUT_SYMBOL)
        document.ensure_import(self._layout_import, index=0)
        document.wrap_body(title_from_file(relative, suffix=self.page_suffix))

        group = self._detail_group_for(relative)
        if group is not None and document.inject_sidebar(group.list_name):
            document.ensure_import(self._link_list_import, index=1)
            document.ensure_import(
                ImportStatement(source=self.imports.registry, named=(group.list_name,)),
                index=2,
            )
        return document.render(), False

    def _detail_group_for(self, relative: str) -> DetailGroup | None:
        return next(
            (group for group in self.detail_groups if group.matches(relative)), None
        )


__all__ = [
    "NormalizationPlan",
    "NormalizeSummary",
    "PageNormalizer",
    "PlannedChange",
]

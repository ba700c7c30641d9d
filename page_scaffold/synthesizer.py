"""Create stub pages and register them in a navigation list.

:class:`PageSynthesizer` turns a route, a title, and a registry list name into
a page file under the pages root and a matching ``{ href, label }`` entry at
the tail of that list. The list is resolved before anything is written, so an
unknown or malformed list aborts with no changes on disk. If the registry
write itself fails after a page was written, the page is rolled back.

Example
-------
>>> from pathlib import Path
>>> from page_scaffold.config import ScaffoldConfig
>>> from page_scaffold.synthesizer import PageSynthesizer
>>> synthesizer = PageSynthesizer(ScaffoldConfig(), root=Path("."))  # doctest: +SKIP
>>> result = synthesizer.synthesize(
...     "/travel/trips/tokyo-2026", "Tokyo 2026", "travelTrips"
... )  # doctest: +SKIP
>>> result.outcome  # doctest: +SKIP
<PageOutcome.CREATED: 'created'>
"""

from __future__ import annotations

import dataclasses as dc
import enum
import typing as typ

from .errors import MissingDependencyError, ScaffoldError
from .registry import LinkEntry, LinkRegistry
from .routes import normalize_route, page_file_for_route
from .storage import write_text
from .templating import PageTemplates

if typ.TYPE_CHECKING:
    from pathlib import Path

    from .config import ScaffoldConfig


class PageOutcome(enum.Enum):
    """What happened to the page file."""

    CREATED = "created"
    SKIPPED = "skipped"


@dc.dataclass(slots=True)
class SynthesisResult:
    """Outcome of a single :meth:`PageSynthesizer.synthesize` call.

    Attributes
    ----------
    route : str
        Normalised route of the page.
    page_path : Path
        Page file for the route.
    outcome : PageOutcome
        ``CREATED`` when the stub was written (including ``force``
        overwrites), ``SKIPPED`` when an existing page was left untouched.
    registry_changed : bool
        True when a new entry was appended to the registry list.
    """

    route: str
    page_path: Path
    outcome: PageOutcome
    registry_changed: bool


class PageSynthesizer:
    """Write stub pages and keep the link registry in step with them."""

    def __init__(
        self,
        config: ScaffoldConfig,
        *,
        root: Path,
        templates: PageTemplates | None = None,
    ) -> None:
        self.config = config
        self.paths = config.paths.resolve(root)
        self.registry = LinkRegistry(self.paths.registry)
        self.templates = templates or PageTemplates(config.imports)

    def check_dependencies(self) -> None:
        """Raise :class:`MissingDependencyError` for the first absent file."""
        for required in (self.paths.layout, self.paths.link_list, self.paths.registry):
            if not required.exists():
                msg = f"Missing {required}. Create it before running this command."
                raise MissingDependencyError(msg)

    def synthesize(
        self,
        route_path: str,
        title: str,
        list_name: str,
        description: str = "",
        *,
        force: bool = False,
    ) -> SynthesisResult:
        """Create the page for ``route_path`` and register it in ``list_name``.

        Parameters
        ----------
        route_path : str
            Route such as ``/travel/trips/tokyo-2026``; a trailing page
            extension and missing leading slash are tolerated.
        title : str
            Page title, also used as the registry label.
        list_name : str
            Registry list the page is appended to; it must already exist.
        description : str, optional
            Layout description attribute.
        force : bool, optional
            Overwrite an existing page file instead of skipping it.

        Returns
        -------
        SynthesisResult
            Page outcome and whether the registry changed.

        Raises
        ------
        MissingDependencyError
            If the layout, link list component, or registry is missing.
        RegistryListNotFoundError
            If ``list_name`` is not declared in the registry.
        MalformedRegistryError
            If the list cannot be parsed.
        FileWriteError
            If the page or registry cannot be written.
        """
        self.check_dependencies()
        route = normalize_route(route_path, suffix=self.config.page_suffix)
        self.registry.read_list(list_name)

        page_path = page_file_for_route(
            self.paths.pages_root, route, suffix=self.config.page_suffix
        )
        previous = page_path.read_text(encoding="utf-8") if page_path.exists() else None
        if previous is not None and not force:
            outcome = PageOutcome.SKIPPED
        else:
            stub = self.templates.render_stub(
                title=title, list_name=list_name, description=description
            )
            write_text(page_path, stub)
            outcome = PageOutcome.CREATED

        try:
            appended = self.registry.append_if_absent(
                list_name, LinkEntry(href=route, label=title)
            )
        except ScaffoldError:
            if outcome is PageOutcome.CREATED:
                _restore(page_path, previous)
            raise

        return SynthesisResult(
            route=route,
            page_path=page_path,
            outcome=outcome,
            registry_changed=appended.inserted,
        )


def _restore(page_path: Path, previous: str | None) -> None:
    """Put the page back the way it was before this run."""
    if previous is None:
        page_path.unlink(missing_ok=True)
    else:
        write_text(page_path, previous)


__all__ = ["PageOutcome", "PageSynthesizer", "SynthesisResult"]

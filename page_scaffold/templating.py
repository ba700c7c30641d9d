"""Jinja rendering of generated page files.

Two page shapes are produced from the templates in
``page_scaffold/templates``: the stub written by the page synthesizer and the
listing page that replaces a configured section index during normalisation.
Astro markup is not HTML-escaped; values are escaped explicitly with the
``js_string``, ``html_attr``, and ``html_text`` filters for the context
they land in.
"""

from __future__ import annotations

import typing as typ
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from .page_model import quote_attr, quote_js, quote_text, sidebar_markup

if typ.TYPE_CHECKING:
    from .config import ImportSources, SectionIndex


class PageTemplates:
    """Render page stubs and section index pages."""

    def __init__(
        self, imports: ImportSources, *, templates_dir: Path | None = None
    ) -> None:
        """Initialize the Jinja environment and load both page templates.

        Parameters
        ----------
        imports : ImportSources
            Module specifiers for the layout, link list component, and
            registry, written verbatim into generated preambles.
        templates_dir : Path, optional
            Directory containing the templates. Defaults to
            ``page_scaffold/templates``.
        """
        self.imports = imports
        self.templates_dir = templates_dir or Path(__file__).parent / "templates"
        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=False,  # noqa: S701 - Astro source, escaped per attribute
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )
        self.env.filters["js_string"] = quote_js
        self.env.filters["html_attr"] = quote_attr
        self.env.filters["html_text"] = quote_text
        self.stub_template = self.env.get_template("page_stub.jinja")
        self.index_template = self.env.get_template("section_index.jinja")

    def render_stub(self, *, title: str, list_name: str, description: str = "") -> str:
        """Return the stub page bound to ``list_name``."""
        return self.stub_template.render(
            imports=self.imports,
            title=title,
            description=description,
            list_name=list_name,
            sidebar=sidebar_markup(list_name),
        )

    def render_section_index(self, section: SectionIndex) -> str:
        """Return the listing page for a configured section index."""
        sidebar = sidebar_markup(section.list_name) if section.list_name else ""
        return self.index_template.render(
            imports=self.imports, section=section, sidebar=sidebar
        )


__all__ = ["PageTemplates"]

"""Cyclopts CLI entrypoint for scaffolding and normalising site pages.

The ``pages`` console script defined here creates stub pages bound to a
navigation list (``pages scaffold``), brings every existing page in line with
the layout and sidebar conventions (``pages normalize``), and converts the
portfolio spreadsheet into the gallery's JSON data (``pages portfolio``).
Commands run from the site's project root; section-index and detail-group
tables are read from ``config/site.yaml`` when present.

Examples
--------
Create a trip page and add it to the ``travelTrips`` list:

>>> from page_scaffold.cli import app
>>> app.run(
...     ["scaffold", "/travel/trips/tokyo-2026", "Tokyo 2026", "travelTrips"]
... )  # doctest: +SKIP

Preview normalisation without writing:

>>> from page_scaffold.cli import main
>>> main()  # doctest: +SKIP
"""

from __future__ import annotations

import logging
import sys
import typing as typ
from pathlib import Path

from cyclopts import App, CycloptsError, Parameter

from ._constants import DEFAULT_PORTFOLIO_OUTPUT
from .config import ScaffoldConfig, ScaffoldConfigError, load_scaffold_config
from .errors import ScaffoldError
from .normalizer import PageNormalizer
from .portfolio import convert_portfolio
from .synthesizer import PageOutcome, PageSynthesizer

DEFAULT_CONFIG = Path("config/site.yaml")

app = App(
    name="pages",
    help="Scaffold pages, normalise layouts, and maintain the link registry.",
)


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


def _load_config(config: Path | None, root: Path) -> ScaffoldConfig:
    """Load ``config``, else the project's default file, else built-in defaults."""
    if config is not None:
        return load_scaffold_config(config)
    candidate = root / DEFAULT_CONFIG
    return load_scaffold_config(candidate if candidate.exists() else None)


@app.command(help="Create a stub page bound to a registry list and register it.")
def scaffold(
    route_path: typ.Annotated[
        str, Parameter(help="Route such as /travel/trips/tokyo-2026")
    ],
    title: typ.Annotated[str, Parameter(help="Page title and registry label")],
    list_name: typ.Annotated[
        str, Parameter(help="Registry list the page is appended to")
    ],
    *,
    desc: typ.Annotated[str, Parameter(help="Short page description")] = "",
    force: typ.Annotated[
        bool, Parameter(help="Overwrite the page file if it already exists")
    ] = False,
    config: typ.Annotated[
        Path | None, Parameter(help="Path to the scaffolding config")
    ] = None,
    root: typ.Annotated[Path, Parameter(help="Project root")] = Path(),
) -> None:
    """Create the page for ``route_path`` and append it to ``list_name``.

    Parameters
    ----------
    route_path : str
        Site route of the new page; a trailing ``.astro`` is ignored.
    title : str
        Page title, also used as the registry label.
    list_name : str
        Name of an existing list in ``src/links/registry.ts``.
    desc : str, optional
        Layout description attribute.
    force : bool, optional
        Overwrite an existing page file instead of skipping it.
    config : Path or None, optional
        Scaffolding config; defaults to ``config/site.yaml`` under ``root``.
    root : Path, optional
        Project root containing ``src/``.

    Returns
    -------
    None
        Prints what was created, skipped, or registered.
    """
    synthesizer = PageSynthesizer(_load_config(config, root), root=root)
    result = synthesizer.synthesize(
        route_path, title, list_name, description=desc, force=force
    )
    page_label = _format_path(result.page_path)
    if result.outcome is PageOutcome.CREATED:
        print(f"Created: {page_label}")
    else:
        print(f"Page already exists: {page_label} (use --force to overwrite)")
    if result.registry_changed:
        print(
            f"Updated registry: {list_name} += "
            f"{{ href: '{result.route}', label: '{title}' }}"
        )
    else:
        print(
            f"Registry already contains href '{result.route}' in {list_name}; "
            "skipping append."
        )
    print("Done.")


@app.command(help="Normalise layout imports, wrappers, and sidebars on every page.")
def normalize(
    *,
    dry_run: typ.Annotated[
        bool, Parameter(help="Report changes without writing files")
    ] = False,
    sidebarize: typ.Annotated[
        bool,
        Parameter(help="Move slot-less LinkList usages into the sidebar slot"),
    ] = False,
    config: typ.Annotated[
        Path | None, Parameter(help="Path to the scaffolding config")
    ] = None,
    root: typ.Annotated[Path, Parameter(help="Project root")] = Path(),
) -> None:
    """Normalise every page under the pages root.

    Parameters
    ----------
    dry_run : bool, optional
        Print the files that would change and write nothing.
    sidebarize : bool, optional
        Also convert ``<LinkList items={...}>`` usages into sidebar lists.
    config : Path or None, optional
        Scaffolding config; defaults to ``config/site.yaml`` under ``root``.
    root : Path, optional
        Project root containing ``src/``.

    Returns
    -------
    None
        Prints one line per changed file and a summary.
    """
    normalizer = PageNormalizer.from_config(
        _load_config(config, root), root=root, sidebarize=sidebarize
    )
    plan = normalizer.plan()
    if not dry_run:
        normalizer.apply(plan)
    for change in plan.changes:
        label = _format_path(change.path)
        print(f"[DRY] Would update: {label}" if dry_run else f"Updated: {label}")
    prefix = "[DRY] " if dry_run else ""
    verb = "would be updated" if dry_run else "updated"
    print(
        f"{prefix}Done. {plan.updated} file(s) {verb}, "
        f"{plan.templated} index page(s) templated."
    )


@app.command(help="Convert the portfolio CSV into the gallery JSON data file.")
def portfolio(
    csv_path: typ.Annotated[Path, Parameter(help="Portfolio CSV export")],
    *,
    images_prefix: typ.Annotated[
        str | None, Parameter(help="Public URL prefix for image files")
    ] = None,
    output: typ.Annotated[
        Path | None, Parameter(help="JSON file to write")
    ] = None,
    root: typ.Annotated[Path, Parameter(help="Project root")] = Path(),
) -> None:
    """Write ``src/data/portfolio.json`` from ``csv_path``."""
    output_path = output or root / DEFAULT_PORTFOLIO_OUTPUT
    items = convert_portfolio(
        csv_path,
        output_path,
        images_prefix=images_prefix,
        public_dir=root / "public",
    )
    print(f"OK: Wrote {len(items)} items to {_format_path(output_path)}")


def main() -> None:
    """Invoke the Cyclopts application that powers the ``pages`` command.

    Operator errors (missing dependencies, unknown lists, malformed registry
    or CSV, write failures, bad configuration) are printed to stderr and end
    the process with exit status 1. Usage errors are reported by Cyclopts and
    also exit with status 1.

    Examples
    --------
    >>> main()  # doctest: +SKIP
    """
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s: %(message)s")
    try:
        app(exit_on_error=False)
    except CycloptsError as exc:
        raise SystemExit(1) from exc
    except (ScaffoldError, ScaffoldConfigError, FileNotFoundError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()

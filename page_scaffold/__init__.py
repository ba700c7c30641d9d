"""Tools for scaffolding and normalising pages of an Astro site.

This package exposes the CLI entry points used by ``uv run pages`` to create
stub pages bound to navigation lists, keep ``src/links/registry.ts`` in step,
normalise layout usage across ``src/pages``, and build the portfolio data
file.

Exports
-------
- ``app``: Cyclopts application entry for subcommands.
- ``main``: Convenience function that invokes the Cyclopts app.

Examples
--------
>>> from page_scaffold import main
>>> main()  # doctest: +SKIP
>>> from page_scaffold import app
>>> isinstance(app.help, str)
True
"""

from __future__ import annotations

from .cli import app, main

__all__ = ["app", "main"]

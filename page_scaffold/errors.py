"""Exception types raised by the scaffolding, registry, and portfolio tools.

Every operator-facing failure derives from :class:`ScaffoldError` so the CLI
can report it uniformly and exit with status 1. Informational conditions
(a duplicate href, an existing page, a page that already conforms) are never
raised; they are returned as results.
"""

from __future__ import annotations


class ScaffoldError(RuntimeError):
    """Base class for failures surfaced to the operator."""


class MissingDependencyError(ScaffoldError):
    """Raised when a layout, component, or registry file is absent."""


class RegistryListNotFoundError(ScaffoldError):
    """Raised when a list name is not declared in the registry document."""

    def __init__(self, name: str, available: list[str]) -> None:
        self.name = name
        self.available = available
        known = ", ".join(available) if available else "none"
        super().__init__(
            f"Could not find list '{name}' in the registry. Declared lists: {known}"
        )


class MalformedRegistryError(ScaffoldError):
    """Raised when a registry list cannot be parsed as ``{href, label}`` records."""


class FileWriteError(ScaffoldError):
    """Raised when persisting a page, registry, or data file fails."""


class PortfolioCsvError(ScaffoldError):
    """Raised when the portfolio CSV is missing columns or data rows."""


__all__ = [
    "FileWriteError",
    "MalformedRegistryError",
    "MissingDependencyError",
    "PortfolioCsvError",
    "RegistryListNotFoundError",
    "ScaffoldError",
]

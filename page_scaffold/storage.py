"""Filesystem access for page trees and generated files.

All writes go through this module so that I/O failures surface as
:class:`~page_scaffold.errors.FileWriteError` and backups follow one rule:
the first pre-change version of a page is kept beside it and never replaced.
"""

from __future__ import annotations

import collections.abc as cabc
from pathlib import Path

from ._constants import DEFAULT_BACKUP_SUFFIX, DEFAULT_PAGE_SUFFIX
from .errors import FileWriteError


def write_text(path: Path, content: str) -> None:
    """Write ``content`` to ``path`` as UTF-8, creating parent directories."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    except OSError as exc:
        msg = f"Failed to write {path}: {exc}"
        raise FileWriteError(msg) from exc


class PageStore:
    """Read and write the page files found under a pages root."""

    def __init__(
        self,
        root: Path,
        *,
        suffix: str = DEFAULT_PAGE_SUFFIX,
        backup_suffix: str = DEFAULT_BACKUP_SUFFIX,
    ) -> None:
        self.root = root
        self.suffix = suffix
        self.backup_suffix = backup_suffix

    def iter_pages(self) -> cabc.Iterator[Path]:
        """Yield page files recursively, in a stable sorted order."""
        if not self.root.is_dir():
            return
        yield from sorted(
            path for path in self.root.rglob(f"*{self.suffix}") if path.is_file()
        )

    def relative(self, path: Path) -> str:
        """Return the page-root-relative identity of ``path``."""
        return path.relative_to(self.root).as_posix()

    def read(self, path: Path) -> str:
        return path.read_text(encoding="utf-8")

    def backup_path(self, path: Path) -> Path:
        return path.with_name(path.name + self.backup_suffix)

    def write(self, path: Path, content: str, *, original: str) -> None:
        """Persist ``content``, saving ``original`` as a backup the first time."""
        backup = self.backup_path(path)
        if not backup.exists():
            write_text(backup, original)
        write_text(path, content)


__all__ = ["PageStore", "write_text"]

"""Convert a portfolio spreadsheet export into the gallery's JSON data file.

The CSV must carry a header row with at least ``filename``, ``title``,
``description``, ``date``, and ``location`` columns (matched
case-insensitively). Quoted fields may contain commas and doubled quotes.
Data-quality problems (missing titles, unparseable dates, images absent from
``public/``) are logged as warnings and never drop a row; structural problems
raise :class:`~page_scaffold.errors.PortfolioCsvError`.

Example
-------
.. code-block:: python

    from pathlib import Path
    from page_scaffold.portfolio import convert_portfolio

    items = convert_portfolio(
        Path("data/portfolio.csv"),
        Path("src/data/portfolio.json"),
        images_prefix="/images/portfolio/",
    )
    print(len(items))
"""

from __future__ import annotations

import csv
import dataclasses as dc
import datetime as dt
import io
import json
import logging
import re
import typing as typ

from .errors import PortfolioCsvError
from .storage import write_text

if typ.TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("filename", "title", "description", "date", "location")
_REPEATED_SLASHES = re.compile(r"/{2,}")


@dc.dataclass(frozen=True, slots=True)
class PortfolioItem:
    """One gallery photo as written to the JSON data file."""

    title: str
    description: str
    date: str
    location: str
    src: str | None = None

    def to_dict(self) -> dict[str, str]:
        """Return the JSON payload, omitting ``src`` when no prefix was given."""
        payload = {
            "title": self.title,
            "description": self.description,
            "date": self.date,
            "location": self.location,
        }
        if self.src:
            payload["src"] = self.src
        return payload


def read_portfolio_rows(text: str) -> list[dict[str, str]]:
    """Parse CSV text into trimmed row mappings keyed by lower-case header.

    Raises
    ------
    PortfolioCsvError
        If there is no data row or a required column is missing.
    """
    rows = [
        row
        for row in csv.reader(io.StringIO(text))
        if any(cell.strip() for cell in row)
    ]
    if len(rows) < 2:
        msg = "CSV must include a header row and at least one data row."
        raise PortfolioCsvError(msg)

    header = [cell.strip().lower() for cell in rows[0]]
    for column in REQUIRED_COLUMNS:
        if column not in header:
            found = ", ".join(header)
            msg = f'Missing required column "{column}" in header. Found: {found}'
            raise PortfolioCsvError(msg)
    positions = {column: header.index(column) for column in REQUIRED_COLUMNS}
    return [
        {
            column: row[index].strip() if index < len(row) else ""
            for column, index in positions.items()
        }
        for row in rows[1:]
    ]


def build_image_src(images_prefix: str, filename: str) -> str:
    """Join ``images_prefix`` and ``filename`` with a single slash."""
    prefix = images_prefix if images_prefix.endswith("/") else f"{images_prefix}/"
    return _REPEATED_SLASHES.sub("/", f"{prefix}{filename}")


def _is_valid_date(value: str) -> bool:
    for parser in (dt.date.fromisoformat, dt.datetime.fromisoformat):
        try:
            parser(value)
        except ValueError:
            continue
        return True
    return False


def build_portfolio_items(
    rows: list[dict[str, str]],
    *,
    images_prefix: str | None = None,
    public_dir: Path | None = None,
) -> list[PortfolioItem]:
    """Turn parsed rows into :class:`PortfolioItem` records, warning on gaps."""
    items: list[PortfolioItem] = []
    for line_number, row in enumerate(rows, start=2):
        filename = row["filename"]
        if not filename or not row["title"]:
            logger.warning(
                'Row %d: "filename" and "title" are recommended.', line_number
            )
        date = row["date"]
        if date and not _is_valid_date(date):
            logger.warning(
                'Row %d: date "%s" is not a valid date. It will be kept as-is.',
                line_number,
                date,
            )
        src = None
        if images_prefix:
            src = build_image_src(images_prefix, filename)
            if public_dir is not None:
                disk_path = public_dir / src.lstrip("/")
                if not disk_path.exists():
                    logger.warning(
                        "Image not found at public path: %s (expected disk: %s)",
                        src,
                        disk_path,
                    )
        items.append(
            PortfolioItem(
                title=row["title"],
                description=row["description"],
                date=date,
                location=row["location"],
                src=src,
            )
        )
    return items


def convert_portfolio(
    csv_path: Path,
    output_path: Path,
    *,
    images_prefix: str | None = None,
    public_dir: Path | None = None,
) -> list[PortfolioItem]:
    """Read ``csv_path`` and write the portfolio JSON array to ``output_path``.

    Parameters
    ----------
    csv_path : Path
        Spreadsheet export to convert.
    output_path : Path
        JSON file to write; parent directories are created.
    images_prefix : str, optional
        Public URL prefix joined with each filename to form ``src``.
    public_dir : Path, optional
        Static assets directory checked for each image when a prefix is set.

    Returns
    -------
    list[PortfolioItem]
        Items in CSV order, as written.

    Raises
    ------
    FileNotFoundError
        If ``csv_path`` does not exist.
    PortfolioCsvError
        If the CSV lacks required columns or data rows.
    FileWriteError
        If the JSON file cannot be written.
    """
    if not csv_path.exists():
        msg = f"Could not read CSV at {csv_path}."
        raise FileNotFoundError(msg)
    text = csv_path.read_text(encoding="utf-8-sig")
    items = build_portfolio_items(
        read_portfolio_rows(text), images_prefix=images_prefix, public_dir=public_dir
    )
    payload = json.dumps(
        [item.to_dict() for item in items], indent=2, ensure_ascii=False
    )
    write_text(output_path, f"{payload}\n")
    return items


__all__ = [
    "REQUIRED_COLUMNS",
    "PortfolioItem",
    "build_image_src",
    "build_portfolio_items",
    "convert_portfolio",
    "read_portfolio_rows",
]

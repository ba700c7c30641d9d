"""Tests for bulk page normalisation."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from page_scaffold.config import (
    DetailGroup,
    ScaffoldConfig,
    SectionIndex,
    load_scaffold_config,
)
from page_scaffold.normalizer import PageNormalizer

SECTIONS = {
    "/travel/trips": SectionIndex("/travel/trips", "Trips", "travelTrips"),
    "/photography/portfolio": SectionIndex(
        "/photography/portfolio", "Photography Portfolio"
    ),
}
GROUPS = [DetailGroup("travel/trips/", "travelTrips")]

ROME_NORMALISED = """\
---
import Layout from '@layouts/Page.astro';
import LinkList from '@components/LinkList.astro';
import { travelTrips } from '@links/registry';
---
<Layout title="Rome 2024">
  <LinkList slot="sidebar" items={travelTrips} orientation="vertical" />
<p>Rome</p>
</Layout>
"""

TRIPS_INDEX = """\
---
import Layout from '@layouts/Page.astro';
import LinkList from '@components/LinkList.astro';
import { travelTrips } from '@links/registry';
---
<Layout title="Trips">
  <LinkList slot="sidebar" items={travelTrips} orientation="vertical" />
  <p class="intro">Choose a subsection.</p>
</Layout>
"""

PORTFOLIO_INDEX = """\
---
import Layout from '@layouts/Page.astro';
---
<Layout title="Photography Portfolio">
  <p>This section will be populated soon.</p>
</Layout>
"""


@pytest.fixture
def pages_root(tmp_path: Path) -> Path:
    root = tmp_path / "src" / "pages"
    root.mkdir(parents=True)
    return root


@pytest.fixture
def normalizer(pages_root: Path) -> PageNormalizer:
    return PageNormalizer(pages_root, SECTIONS, GROUPS)


def _write(pages_root: Path, relative: str, text: str) -> Path:
    path = pages_root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def test_bare_detail_page_gets_imports_wrapper_and_sidebar(
    normalizer: PageNormalizer,
) -> None:
    text, templated = normalizer.normalize_text(
        "<p>Rome</p>\n", "travel/trips/rome-2024.astro"
    )

    assert not templated
    assert text == ROME_NORMALISED


def test_legacy_layout_import_is_replaced_in_place(normalizer: PageNormalizer) -> None:
    legacy = (
        "---\n"
        "import Layout from '../layouts/Site.astro';\n"
        "const year = 2025;\n"
        "---\n"
        '<Layout title="About me">\n<p>{year}</p>\n</Layout>\n'
    )

    text, _ = normalizer.normalize_text(legacy, "about.astro")

    assert text == (
        "---\n"
        "import Layout from '@layouts/Page.astro';\n"
        "const year = 2025;\n"
        "---\n"
        '<Layout title="About me">\n<p>{year}</p>\n</Layout>\n'
    )


def test_duplicate_layout_imports_collapse_to_one(normalizer: PageNormalizer) -> None:
    page = (
        "---\n"
        "import Layout from '@layouts/Page.astro';\n"
        "import Layout from '../../layouts/Page.astro';\n"
        "---\n"
        "<Layout>\n</Layout>\n"
    )

    text, _ = normalizer.normalize_text(page, "music/index.astro")

    assert text.count("import Layout") == 1


@pytest.mark.parametrize(
    ("relative", "expected"),
    [
        ("travel/trips/index.astro", TRIPS_INDEX),
        ("photography/portfolio/index.astro", PORTFOLIO_INDEX),
    ],
)
def test_section_index_is_regenerated(
    normalizer: PageNormalizer, relative: str, expected: str
) -> None:
    text, templated = normalizer.normalize_text("<h1>Old listing</h1>\n", relative)

    assert templated
    assert text == expected


def test_existing_sidebar_is_not_duplicated(normalizer: PageNormalizer) -> None:
    page = (
        "---\nimport Layout from '@layouts/Page.astro';\n---\n"
        '<Layout title="Rome">\n  <Nav slot="sidebar" />\n</Layout>\n'
    )

    text, _ = normalizer.normalize_text(page, "travel/trips/rome-2024.astro")

    assert text == page
    assert "LinkList" not in text


def test_sidebarize_is_opt_in(pages_root: Path) -> None:
    page = (
        "---\nimport Layout from '@layouts/Page.astro';\n---\n"
        "<Layout>\n  <LinkList items={sections} />\n</Layout>\n"
    )
    plain = PageNormalizer(pages_root, {}, [])
    sidebarizing = PageNormalizer(pages_root, {}, [], sidebarize=True)

    assert plain.normalize_text(page, "music.astro")[0] == page
    assert 'slot="sidebar"' in sidebarizing.normalize_text(page, "music.astro")[0]


def test_normalisation_is_idempotent(normalizer: PageNormalizer) -> None:
    cases = {
        "travel/trips/rome-2024.astro": "<p>Rome</p>\n",
        "travel/trips/index.astro": "<h1>Trips</h1>\n",
        "about.astro": "---\nimport Layout from './L.astro';\n---\n<p>Hi</p>\n",
        "index.astro": "---\n<p>Unterminated</p>\n",
    }
    for relative, original in cases.items():
        once, _ = normalizer.normalize_text(original, relative)
        twice, _ = normalizer.normalize_text(once, relative)
        assert twice == once, f"expected a fixed point for {relative}"


def test_dry_run_reports_without_writing(
    normalizer: PageNormalizer, pages_root: Path
) -> None:
    page = _write(pages_root, "travel/trips/rome-2024.astro", "<p>Rome</p>\n")
    _write(pages_root, "travel/trips/index.astro", "<h1>Old</h1>\n")

    summary = normalizer.run(dry_run=True)

    assert summary.dry_run
    assert (summary.updated, summary.templated) == (2, 1)
    assert page.read_text(encoding="utf-8") == "<p>Rome</p>\n"
    assert not list(pages_root.rglob("*.bak")), "dry run must not write backups"


def test_apply_writes_pages_and_backups(
    normalizer: PageNormalizer, pages_root: Path
) -> None:
    page = _write(pages_root, "travel/trips/rome-2024.astro", "<p>Rome</p>\n")

    summary = normalizer.run()

    assert summary.updated == 1
    assert page.read_text(encoding="utf-8") == ROME_NORMALISED
    backup = pages_root / "travel" / "trips" / "rome-2024.astro.bak"
    assert backup.read_text(encoding="utf-8") == "<p>Rome</p>\n"


def test_second_run_changes_nothing(
    normalizer: PageNormalizer, pages_root: Path
) -> None:
    _write(pages_root, "travel/trips/rome-2024.astro", "<p>Rome</p>\n")
    _write(pages_root, "travel/trips/index.astro", "<h1>Old</h1>\n")
    _write(pages_root, "about.astro", "<p>About</p>\n")
    normalizer.run()

    summary = normalizer.run()

    assert (summary.updated, summary.templated) == (0, 0)


def test_backup_keeps_first_original(
    normalizer: PageNormalizer, pages_root: Path
) -> None:
    page = _write(pages_root, "about.astro", "<p>First</p>\n")
    normalizer.run()
    page.write_text("<p>Second</p>\n", encoding="utf-8")

    normalizer.run()

    backup = pages_root / "about.astro.bak"
    assert backup.read_text(encoding="utf-8") == "<p>First</p>\n"
    assert "<p>Second</p>" in page.read_text(encoding="utf-8")


def test_index_already_matching_template_is_not_counted(
    normalizer: PageNormalizer, pages_root: Path
) -> None:
    _write(pages_root, "travel/trips/index.astro", TRIPS_INDEX)

    plan = normalizer.plan()

    assert plan.changes == []
    assert plan.templated == 0


def test_backups_and_other_files_are_ignored(
    normalizer: PageNormalizer, pages_root: Path
) -> None:
    _write(pages_root, "about.astro.bak", "<p>Old</p>\n")
    _write(pages_root, "notes.md", "# Notes\n")

    assert normalizer.plan().changes == []


def test_missing_pages_root_is_empty(tmp_path: Path) -> None:
    normalizer = PageNormalizer(tmp_path / "absent", {}, [])

    assert normalizer.run().updated == 0


def test_from_config_uses_configured_tables(site_root: Path) -> None:
    config_path = Path(__file__).resolve().parents[1] / "config" / "site.yaml"
    config = load_scaffold_config(config_path)
    page = site_root / "src" / "pages" / "music" / "concerts" / "laufey-2025.astro"
    page.parent.mkdir(parents=True)
    page.write_text("<p>Laufey</p>\n", encoding="utf-8")

    PageNormalizer.from_config(config, root=site_root).run()

    text = page.read_text(encoding="utf-8")
    assert "import { musicConcerts } from '@links/registry';" in text
    assert '<Layout title="Laufey 2025">' in text


def test_default_config_has_no_tables(pages_root: Path) -> None:
    normalizer = PageNormalizer.from_config(
        ScaffoldConfig(), root=pages_root.parent.parent
    )

    text, templated = normalizer.normalize_text("<p/>\n", "travel/trips/index.astro")

    assert not templated
    assert '<Layout title="Trips">' in text


def test_undecodable_page_is_skipped_with_warning(
    normalizer: PageNormalizer,
    pages_root: Path,
    caplog: pytest.LogCaptureFixture,
) -> None:
    broken = pages_root / "cafe.astro"
    broken.write_bytes("<p>café</p>\n".encode("latin-1"))
    page = _write(pages_root, "about.astro", "<p>About</p>\n")

    with caplog.at_level(logging.WARNING, logger="page_scaffold.normalizer"):
        plan = normalizer.plan()
    normalizer.apply(plan)

    assert plan.skipped == ["cafe.astro"]
    assert [change.relative for change in plan.changes] == ["about.astro"]
    assert '<Layout title="About">' in page.read_text(encoding="utf-8")
    assert broken.read_bytes() == "<p>café</p>\n".encode("latin-1")
    assert any("cafe.astro" in record.getMessage() for record in caplog.records)

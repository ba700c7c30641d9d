"""Shared fixtures for the page_scaffold test suite.

``site_root`` builds a miniature Astro project in a temporary directory with
the layout, link list component, and a registry mirroring the live site's
lists, so synthesizer, normalizer, and CLI tests run against realistic files
without touching the repository.
"""

from __future__ import annotations

from pathlib import Path

import pytest

REGISTRY_SOURCE = """\
// Top-level sections
export const sections = [
  { href: '/travel', label: 'Travel' },
  { href: '/photography', label: 'Photography' },
  { href: '/music', label: 'Music' },
  { href: '/photography/gallery', label: 'Gallery' }
];

// Travel
export const travelTrips = [
  { href: '/travel/trips/amsterdam-2025',  label: 'Amsterdam 2025' },
  { href: '/travel/trips/egypt-2025',      label: 'Egypt 2025' },
  { href: '/travel/trips/chile-2025',      label: 'Chile 2025' },
  { href: '/travel/trips/rome-2024',       label: 'Rome 2024' },
  { href: '/travel/trips/london-2024',     label: 'London 2024' },
  { href: '/travel/trips/paris-2023',      label: 'Paris 2023' },
  { href: '/travel/trips/israel-2023',     label: 'Israel 2023' },
  { href: '/travel/trips/greece-2022',     label: 'Greece 2022' },
  { href: '/travel/trips/norway-2019',     label: 'Norway 2019' },
];

// Photography
export const photographyAwards = [
  { href: '/photography/awards/peninsula-photo-competition-2025',
    label: 'Peninsula Photo Competition 2025' },
];

// Music
export const musicConcerts = [
  { href: '/music/concerts/laufey-2025', label: 'Laufey 2025' }, // latest
  { href: '/music/concerts/reset-2023', label: 'Re:Set 2023' },
];

// Geography (placeholder for now)
export const geographyLinks = [];
"""

LAYOUT_SOURCE = """\
---
const { title, description } = Astro.props;
---
<html><body><aside><slot name="sidebar" /></aside><main><slot /></main></body></html>
"""

LINK_LIST_SOURCE = """\
---
const { items, orientation = 'horizontal' } = Astro.props;
---
<ul class={orientation}>{items.map((item) => <li><a href={item.href}>{item.label}</a></li>)}</ul>
"""


@pytest.fixture
def site_root(tmp_path: Path) -> Path:
    """Create a minimal site with layout, component, registry, and pages dir."""
    root = tmp_path / "site"
    files = {
        "src/layouts/Page.astro": LAYOUT_SOURCE,
        "src/components/LinkList.astro": LINK_LIST_SOURCE,
        "src/links/registry.ts": REGISTRY_SOURCE,
    }
    for relative, content in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    (root / "src" / "pages").mkdir(parents=True)
    return root


@pytest.fixture
def registry_path(site_root: Path) -> Path:
    """Return the registry module inside ``site_root``."""
    return site_root / "src" / "links" / "registry.ts"

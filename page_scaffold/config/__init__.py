"""Load and validate the scaffolding configuration YAML.

This subpackage parses the project's ``config/site.yaml`` file into
dataclasses (:class:`ScaffoldConfig`, :class:`SectionIndex`,
:class:`DetailGroup`, etc.) that the page synthesizer and bulk normalizer
consume. The section-index and detail-group tables live here rather than in
source, so adding a site section is a config edit.

Examples
--------
>>> from pathlib import Path
>>> from page_scaffold.config import load_scaffold_config
>>> config = load_scaffold_config(Path("config/site.yaml"))  # doctest: +SKIP
>>> config.find_detail_group("travel/trips/rome-2024.astro").list_name  # doctest: +SKIP
'travelTrips'
"""

from .loader import load_scaffold_config
from .models import (
    DetailGroup,
    ImportSources,
    ProjectPaths,
    ScaffoldConfig,
    ScaffoldConfigError,
    SectionIndex,
)

__all__ = [
    "DetailGroup",
    "ImportSources",
    "ProjectPaths",
    "ScaffoldConfig",
    "ScaffoldConfigError",
    "SectionIndex",
    "load_scaffold_config",
]

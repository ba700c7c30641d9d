"""Load scaffolding configuration YAML into typed dataclasses."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from ruamel.yaml import YAML

from page_scaffold._constants import DEFAULT_PAGE_SUFFIX
from page_scaffold.routes import normalize_route, route_for_file

from .models import (
    DetailGroup,
    ImportSources,
    ProjectPaths,
    ScaffoldConfig,
    ScaffoldConfigError,
    SectionIndex,
)


def load_scaffold_config(path: Path | None = None) -> ScaffoldConfig:
    """Load the YAML configuration describing paths and mapping tables.

    Parameters
    ----------
    path : Path or None, optional
        Filesystem path to the YAML configuration (for example,
        ``config/site.yaml``). When ``None`` the built-in defaults are
        returned with empty section-index and detail-group tables.

    Returns
    -------
    ScaffoldConfig
        Parsed configuration with every omitted key filled from defaults.

    Raises
    ------
    FileNotFoundError
        If ``path`` is given but does not exist.
    ScaffoldConfigError
        If the document or one of its sections has the wrong shape.
    YAMLError
        If the YAML content cannot be parsed by the underlying loader.

    Examples
    --------
    >>> from pathlib import Path
    >>> from page_scaffold.config import load_scaffold_config
    >>> config = load_scaffold_config(Path("config/site.yaml"))  # doctest: +SKIP
    >>> config.get_section_index("/travel").list_name  # doctest: +SKIP
    'travelTrips'
    """
    if path is None:
        return ScaffoldConfig()
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):
        msg = "Top-level YAML structure must be a mapping."
        raise ScaffoldConfigError(msg)
    raw: dict[str, typ.Any] = dict(loaded)

    paths = _build_paths(_mapping(raw, "paths"))
    imports = _build_imports(_mapping(raw, "imports"))
    page_suffix = str(raw.get("page_suffix") or DEFAULT_PAGE_SUFFIX)
    backup_suffix = str(raw.get("backup_suffix") or ScaffoldConfig().backup_suffix)
    pages_prefix = paths.pages_root.as_posix().rstrip("/") + "/"

    section_indexes: dict[str, SectionIndex] = {}
    for key, payload in _mapping(raw, "section_indexes").items():
        route = _section_route(str(key), pages_prefix, page_suffix)
        section_indexes[route] = _build_section_index(route, payload)

    detail_groups = [
        _build_detail_group(str(prefix), payload, pages_prefix)
        for prefix, payload in _mapping(raw, "detail_groups").items()
    ]

    return ScaffoldConfig(
        paths=paths,
        imports=imports,
        page_suffix=page_suffix,
        backup_suffix=backup_suffix,
        section_indexes=section_indexes,
        detail_groups=detail_groups,
    )


def _mapping(raw: typ.Mapping[str, typ.Any], key: str) -> dict[str, typ.Any]:
    """Return ``raw[key]`` as a dict, treating a missing or empty value as {}."""
    value = raw.get(key) or {}
    if not isinstance(value, dict):
        msg = f"'{key}' must be a mapping."
        raise ScaffoldConfigError(msg)
    return value


def _build_paths(payload: typ.Mapping[str, typ.Any]) -> ProjectPaths:
    base = ProjectPaths()
    return ProjectPaths(
        pages_root=Path(payload.get("pages_root", base.pages_root)),
        layout=Path(payload.get("layout", base.layout)),
        link_list=Path(payload.get("link_list", base.link_list)),
        registry=Path(payload.get("registry", base.registry)),
    )


def _build_imports(payload: typ.Mapping[str, typ.Any]) -> ImportSources:
    base = ImportSources()
    return ImportSources(
        layout=str(payload.get("layout", base.layout)),
        link_list=str(payload.get("link_list", base.link_list)),
        registry=str(payload.get("registry", base.registry)),
    )


def _section_route(key: str, pages_prefix: str, suffix: str) -> str:
    """Accept either a route (``/travel``) or a page file path as the key."""
    text = key.strip()
    if text.endswith(suffix):
        relative = text.removeprefix(pages_prefix).lstrip("/")
        return route_for_file(relative, suffix=suffix)
    return normalize_route(text, suffix=suffix).rstrip("/") or "/"


def _build_section_index(route: str, payload: typ.Any) -> SectionIndex:
    if not isinstance(payload, dict):
        msg = f"Section index '{route}' must be a mapping with a 'title'."
        raise ScaffoldConfigError(msg)
    title = payload.get("title")
    if not title:
        msg = f"Section index '{route}' is missing 'title'."
        raise ScaffoldConfigError(msg)
    list_name = payload.get("list")
    return SectionIndex(
        route=route,
        title=str(title),
        list_name=str(list_name) if list_name else None,
    )


def _build_detail_group(
    prefix: str, payload: typ.Any, pages_prefix: str
) -> DetailGroup:
    match payload:
        case str() as list_name:
            pass
        case {"list": str() as list_name}:
            pass
        case _:
            msg = f"Detail group '{prefix}' must name a registry list."
            raise ScaffoldConfigError(msg)
    normalized = prefix.strip().lstrip("/").removeprefix(pages_prefix)
    if not normalized.endswith("/"):
        normalized += "/"
    return DetailGroup(prefix=normalized, list_name=list_name)


__all__ = ["load_scaffold_config"]

"""Behaviour test for scaffolding the same route twice.

A repeated ``scaffold`` run must neither duplicate the page file nor append a
second registry entry.
"""

from __future__ import annotations

import typing as typ
from pathlib import Path

import pytest
from pytest_bdd import given, scenarios, then, when

from page_scaffold.config import ScaffoldConfig
from page_scaffold.registry import LinkRegistry
from page_scaffold.synthesizer import PageOutcome, PageSynthesizer, SynthesisResult

FEATURE_FILE = Path(__file__).resolve().parents[2] / "features" / "page_scaffold.feature"
scenarios(FEATURE_FILE)

ROUTE = "/travel/trips/tokyo-2026"

ScenarioState = dict[str, typ.Any]


@pytest.fixture
def scenario_state() -> ScenarioState:
    """Share mutable scenario data across pytest-bdd steps."""
    return {}


def _scaffold(scenario_state: ScenarioState) -> SynthesisResult:
    synthesizer = typ.cast("PageSynthesizer", scenario_state["synthesizer"])
    return synthesizer.synthesize(ROUTE, "Tokyo 2026", "travelTrips")


def _trip_count(scenario_state: ScenarioState) -> int:
    registry = typ.cast("LinkRegistry", scenario_state["registry"])
    return len(registry.read_list("travelTrips"))


@given("a site with a layout, a link list component, and a registry")
def given_site(
    site_root: Path, registry_path: Path, scenario_state: ScenarioState
) -> None:
    scenario_state["root"] = site_root
    scenario_state["synthesizer"] = PageSynthesizer(ScaffoldConfig(), root=site_root)
    scenario_state["registry"] = LinkRegistry(registry_path)
    scenario_state["counts"] = [_trip_count(scenario_state)]


@when('I scaffold "/travel/trips/tokyo-2026" titled "Tokyo 2026" in travelTrips')
def when_scaffold(scenario_state: ScenarioState) -> None:
    scenario_state["first"] = _scaffold(scenario_state)
    scenario_state["counts"].append(_trip_count(scenario_state))


@when(
    'I scaffold "/travel/trips/tokyo-2026" titled "Tokyo 2026" in travelTrips again'
)
def when_scaffold_again(scenario_state: ScenarioState) -> None:
    scenario_state["second"] = _scaffold(scenario_state)
    scenario_state["counts"].append(_trip_count(scenario_state))


@then("exactly one page file exists for the route")
def then_one_page(scenario_state: ScenarioState) -> None:
    root = typ.cast("Path", scenario_state["root"])
    trips = root / "src" / "pages" / "travel" / "trips"
    assert [path.name for path in trips.iterdir()] == ["tokyo-2026.astro"]


@then("the first run created the page and appended one registry entry")
def then_first_created(scenario_state: ScenarioState) -> None:
    first = typ.cast("SynthesisResult", scenario_state["first"])
    before, after_first, _ = scenario_state["counts"]
    assert first.outcome is PageOutcome.CREATED
    assert first.registry_changed
    assert after_first == before + 1


@then("the second run skipped the page and left the registry unchanged")
def then_second_skipped(scenario_state: ScenarioState) -> None:
    second = typ.cast("SynthesisResult", scenario_state["second"])
    _, after_first, after_second = scenario_state["counts"]
    assert second.outcome is PageOutcome.SKIPPED
    assert not second.registry_changed
    assert after_second == after_first

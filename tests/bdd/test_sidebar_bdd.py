"""Behaviour tests for sidebar generation using pytest-bdd.

Usage
-----
Run ``pytest tests/bdd/test_sidebar_bdd.py -v``.
"""

from __future__ import annotations

import typing as typ
from pathlib import Path

import pytest
from pytest_bdd import given, parsers, scenarios, then, when

from rule_pages.config import RulesConfig
from rule_pages.generator import ContentLoader
from rule_pages.sidebar import SidebarCategory, SidebarGenerator

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from rule_pages.sidebar import SidebarItem

FEATURE_FILE = Path(__file__).resolve().parents[2] / "features" / "sidebar.feature"
scenarios(FEATURE_FILE)

ScenarioState = dict[str, typ.Any]


@pytest.fixture
def scenario_state() -> ScenarioState:
    """Share mutable scenario data across pytest-bdd steps."""
    return {}


@given("a rules directory with nested folders")
def given_nested_rules(
    tmp_path: Path,
    write_rule: cabc.Callable[[str, str], Path],
    scenario_state: ScenarioState,
) -> None:
    """Write a positioned main rule, a plain rule, and one nested folder."""
    write_rule("main.mdc", "---\ntitle: Main\nsidebar_position: 1\n---\nBody")
    write_rule("zeta.mdc", "# Zeta\n")
    write_rule("code-style/naming.mdc", "# Naming\n")
    scenario_state["project_root"] = tmp_path


@when("I load the rules content and build the sidebar")
def when_build_sidebar(scenario_state: ScenarioState) -> None:
    """Load every rule and turn the documents into sidebar items."""
    project_root = typ.cast("Path", scenario_state["project_root"])
    result = ContentLoader(RulesConfig(), project_root).run()
    scenario_state["sidebar"] = SidebarGenerator().generate(result.documents)


@then("the top-level sidebar starts with the positioned rule")
def then_positioned_first(scenario_state: ScenarioState) -> None:
    """The rule with a position precedes the alphabetically sorted rest."""
    sidebar = typ.cast("list[SidebarItem]", scenario_state["sidebar"])
    assert [item.label for item in sidebar] == ["Main", "Code Style", "Zeta"]
    assert sidebar[0].position == 1


@then(parsers.parse('the "{folder}" folder appears as the "{label}" category'))
def then_folder_category(
    scenario_state: ScenarioState, folder: str, label: str
) -> None:
    """The folder is a collapsed category holding its rule."""
    sidebar = typ.cast("list[SidebarItem]", scenario_state["sidebar"])
    category = next(item for item in sidebar if item.label == label)
    assert isinstance(category, SidebarCategory)
    assert category.collapsed
    assert [(link.label, link.href) for link in category.items] == [
        ("Naming", f"/rules/{folder}/naming")
    ]

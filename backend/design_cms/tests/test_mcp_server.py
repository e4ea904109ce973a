import pytest
from mcp.server.fastmcp.exceptions import ToolError

from design_cms.mcp_server import (
    get_component_payload,
    get_theme_payload,
    list_components_payload,
    list_themes_payload,
    search_components_payload,
)


def test_list_components(session, components):
    payload = list_components_payload(session)

    assert payload["count"] == 2
    assert [c["slug"] for c in payload["components"]] == ["button", "text-input"]


def test_list_components_by_category(session, components):
    payload = list_components_payload(session, category="buttons")

    assert [c["slug"] for c in payload["components"]] == ["button"]


def test_get_component(session, components):
    payload = get_component_payload(session, "text-input")

    assert payload["name"] == "Text Input"
    assert payload["code"] == "export function TextInput() {}"


def test_get_missing_component(session):
    with pytest.raises(ToolError, match="Component not found"):
        get_component_payload(session, "missing")


def test_search_components(session, components):
    payload = search_components_payload(session, "field")

    assert payload["query"] == "field"
    assert [c["slug"] for c in payload["results"]] == ["text-input"]


def test_search_requires_query(session):
    with pytest.raises(ToolError):
        search_components_payload(session, "  ")


def test_themes(session, themes):
    listed = list_themes_payload(session)
    dark = get_theme_payload(session, "dark")

    assert [t["value"] for t in listed["themes"]] == ["dark", "light"]
    assert dark["colors"] == {"primary": "#3b82f6"}
    assert isinstance(dark["id"], str)


def test_get_missing_theme(session):
    with pytest.raises(ToolError, match="Theme not found"):
        get_theme_payload(session, "sepia")

"""Stdio model-context-protocol server exposing read-only design system queries.

External AI assistants launch `design-cms mcp` and call the five tools below.
stdout carries the protocol, so logging goes to stderr.
"""
import logging
from typing import Any

from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.exceptions import ToolError
from sqlmodel import Session

from design_cms import crud
from design_cms.core.db import engine
from design_cms.models import ComponentPublic, ThemePublic

logger = logging.getLogger(__name__)

SERVER_NAME = "design-system"

mcp = FastMCP(SERVER_NAME)


def _components(rows: list) -> list[dict[str, Any]]:
    return [ComponentPublic.model_validate(row).model_dump(mode="json") for row in rows]


def _themes(rows: list) -> list[dict[str, Any]]:
    return [ThemePublic.model_validate(row).model_dump(mode="json") for row in rows]


def list_components_payload(session: Session, category: str | None = None) -> dict[str, Any]:
    components = _components(crud.list_components(session=session, category=category))
    return {"components": components, "count": len(components)}


def get_component_payload(session: Session, slug: str) -> dict[str, Any]:
    component = crud.get_component_by_slug(session=session, slug=slug)
    if component is None:
        raise ToolError("Component not found")
    return ComponentPublic.model_validate(component).model_dump(mode="json")


def search_components_payload(
    session: Session, query: str, category: str | None = None
) -> dict[str, Any]:
    if not query.strip():
        raise ToolError("query is required")
    results = _components(
        crud.search_components(session=session, query=query.strip(), category=category)
    )
    return {"results": results, "count": len(results), "query": query}


def list_themes_payload(session: Session) -> dict[str, Any]:
    themes = _themes(crud.list_themes(session=session, order_by="name"))
    return {"themes": themes, "count": len(themes)}


def get_theme_payload(session: Session, value: str) -> dict[str, Any]:
    theme = crud.get_theme_by_value(session=session, value=value)
    if theme is None:
        raise ToolError("Theme not found")
    return ThemePublic.model_validate(theme).model_dump(mode="json")


@mcp.tool()
def list_components(category: str | None = None) -> dict[str, Any]:
    """List all available design system components with optional category filter (e.g. buttons, inputs, layout)."""
    with Session(engine) as session:
        return list_components_payload(session, category)


@mcp.tool()
def get_component(slug: str) -> dict[str, Any]:
    """Get a component's code, props, variants and examples by its slug (e.g. "button")."""
    with Session(engine) as session:
        return get_component_payload(session, slug)


@mcp.tool()
def search_components(query: str, category: str | None = None) -> dict[str, Any]:
    """Search components by name, description, or category."""
    with Session(engine) as session:
        return search_components_payload(session, query, category)


@mcp.tool()
def list_themes() -> dict[str, Any]:
    """List all available themes with their color palettes."""
    with Session(engine) as session:
        return list_themes_payload(session)


@mcp.tool()
def get_theme(value: str) -> dict[str, Any]:
    """Get a theme's color, typography and spacing tokens by its value (e.g. "light", "dark")."""
    with Session(engine) as session:
        return get_theme_payload(session, value)


def run() -> None:
    logger.info("Design System MCP server running on stdio")
    mcp.run(transport="stdio")

import asyncio
import json
import logging

from fastapi import APIRouter, HTTPException, Query, Request
from sqlmodel import Session
from sse_starlette.sse import EventSourceResponse
from starlette.concurrency import run_in_threadpool

from design_cms import crud
from design_cms.api.deps import SessionDep
from design_cms.api.errors import translate_db_errors
from design_cms.core.db import engine
from design_cms.models import (
    ComponentPublic,
    ComponentsPublic,
    SearchResults,
    ThemePublic,
    ThemesPublic,
)
from design_cms.theme_events import theme_changes

router = APIRouter()
logger = logging.getLogger(__name__)

STREAM_POLL_SECONDS = 15.0


@router.get("/themes", response_model=ThemesPublic)
def read_themes(session: SessionDep) -> ThemesPublic:
    with translate_db_errors("fetch themes"):
        themes = crud.list_themes(session=session, order_by="name")
    return ThemesPublic(themes=themes, count=len(themes))


@router.get("/themes/{value}", response_model=ThemePublic)
def read_theme(value: str, session: SessionDep) -> ThemePublic:
    with translate_db_errors("fetch theme"):
        theme = crud.get_theme_by_value(session=session, value=value)
    if not theme:
        raise HTTPException(status_code=404, detail="Theme not found")
    return theme


@router.get("/components", response_model=ComponentsPublic)
def read_components(
    session: SessionDep,
    category: str | None = None,
    limit: int = Query(default=crud.DEFAULT_COMPONENT_LIMIT, ge=1, le=1000),
) -> ComponentsPublic:
    with translate_db_errors("fetch components"):
        components = crud.list_components(session=session, category=category, limit=limit)
    return ComponentsPublic(components=components, count=len(components))


@router.get("/components/{slug}", response_model=ComponentPublic)
def read_component(slug: str, session: SessionDep) -> ComponentPublic:
    with translate_db_errors("fetch component"):
        component = crud.get_component_by_slug(session=session, slug=slug)
    if not component:
        raise HTTPException(status_code=404, detail="Component not found")
    return component


@router.get("/search", response_model=SearchResults)
def search_components(
    session: SessionDep,
    q: str = "",
    category: str | None = None,
    limit: int = Query(default=crud.DEFAULT_SEARCH_LIMIT, ge=1, le=1000),
) -> SearchResults:
    query = q.strip()
    if not query:
        raise HTTPException(status_code=400, detail='Query parameter "q" is required')
    with translate_db_errors("search components"):
        results = crud.search_components(session=session, query=query, category=category, limit=limit)
    return SearchResults(results=results, count=len(results), query=query)


@router.get("/active-theme", response_model=ThemePublic)
def read_active_theme(session: SessionDep) -> ThemePublic:
    with translate_db_errors("fetch active theme"):
        theme = crud.get_active_theme(session=session)
    if not theme:
        raise HTTPException(status_code=404, detail="No active theme")
    return theme


def _active_theme_payload() -> str:
    with Session(engine) as session:
        theme = crud.get_active_theme(session=session)
        if theme is None:
            return json.dumps(None)
        return ThemePublic.model_validate(theme).model_dump_json()


async def _active_theme_events(request: Request):
    async with theme_changes.subscribe() as queue:
        yield {"event": "active_theme", "data": await run_in_threadpool(_active_theme_payload)}
        while not await request.is_disconnected():
            try:
                reason = await asyncio.wait_for(queue.get(), timeout=STREAM_POLL_SECONDS)
            except asyncio.TimeoutError:
                continue
            logger.debug("Re-sending active theme after %s", reason)
            yield {"event": "active_theme", "data": await run_in_threadpool(_active_theme_payload)}


@router.get("/active-theme/stream")
async def stream_active_theme(request: Request) -> EventSourceResponse:
    """Server-sent events carrying the active theme now and after every theme change."""
    return EventSourceResponse(_active_theme_events(request))

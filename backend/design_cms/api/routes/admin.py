import logging
import uuid
from typing import Any

from fastapi import APIRouter, HTTPException

from design_cms import crud
from design_cms.api.deps import (
    CreatorPrincipal,
    DeleterPrincipal,
    EditorPrincipal,
    SessionDep,
    SettingsPrincipal,
)
from design_cms.api.errors import translate_db_errors
from design_cms.models import (
    ChangePassword,
    ComponentCreate,
    ComponentPublic,
    ComponentUpdate,
    DashboardStats,
    Message,
    ThemeCreate,
    ThemePublic,
    ThemeUpdate,
)
from design_cms.theme_events import theme_changes

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/stats", response_model=DashboardStats)
def read_stats(session: SessionDep, principal: EditorPrincipal) -> Any:
    with translate_db_errors("load dashboard"):
        return crud.get_dashboard_stats(session=session)


# Themes

@router.get("/themes", response_model=list[ThemePublic])
def read_themes(session: SessionDep, principal: EditorPrincipal) -> Any:
    with translate_db_errors("fetch themes"):
        return crud.list_themes(session=session, order_by="created_at")


@router.post("/themes", response_model=ThemePublic, status_code=201)
def create_theme(session: SessionDep, principal: CreatorPrincipal, theme_in: ThemeCreate) -> Any:
    with translate_db_errors("create theme"):
        theme = crud.create_theme(session=session, theme_in=theme_in)
    logger.info("Theme %s created by %s", theme.value, principal.subject)
    theme_changes.publish("theme_created")
    return theme


@router.get("/themes/{id}", response_model=ThemePublic)
def read_theme(id: uuid.UUID, session: SessionDep, principal: EditorPrincipal) -> Any:
    theme = crud.get_theme(session=session, theme_id=id)
    if not theme:
        raise HTTPException(status_code=404, detail="Theme not found")
    return theme


@router.put("/themes/{id}", response_model=ThemePublic)
def update_theme(
    id: uuid.UUID, session: SessionDep, principal: EditorPrincipal, theme_in: ThemeUpdate
) -> Any:
    theme = crud.get_theme(session=session, theme_id=id)
    if not theme:
        raise HTTPException(status_code=404, detail="Theme not found")
    with translate_db_errors("update theme"):
        theme = crud.update_theme(session=session, db_theme=theme, theme_in=theme_in)
    theme_changes.publish("theme_updated")
    return theme


@router.post("/themes/{id}/activate", response_model=ThemePublic)
def activate_theme(id: uuid.UUID, session: SessionDep, principal: EditorPrincipal) -> Any:
    with translate_db_errors("activate theme"):
        theme = crud.set_active_theme(session=session, theme_id=id)
    logger.info("Theme %s activated by %s", theme.value, principal.subject)
    theme_changes.publish("theme_activated")
    return theme


@router.delete("/themes/{id}", response_model=Message)
def delete_theme(id: uuid.UUID, session: SessionDep, principal: DeleterPrincipal) -> Any:
    with translate_db_errors("delete theme"):
        crud.delete_theme(session=session, theme_id=id)
    logger.info("Theme %s deleted by %s", id, principal.subject)
    theme_changes.publish("theme_deleted")
    return Message(message="Theme deleted successfully")


# Components

@router.get("/components", response_model=list[ComponentPublic])
def read_components(session: SessionDep, principal: EditorPrincipal) -> Any:
    with translate_db_errors("fetch components"):
        return crud.list_recent_components(session=session)


@router.post("/components", response_model=ComponentPublic, status_code=201)
def create_component(
    session: SessionDep, principal: CreatorPrincipal, component_in: ComponentCreate
) -> Any:
    if not component_in.resolved_slug():
        raise HTTPException(status_code=400, detail="Component slug could not be derived from its name")
    with translate_db_errors("create component"):
        component = crud.create_component(session=session, component_in=component_in)
    logger.info("Component %s created by %s", component.slug, principal.subject)
    return component


@router.get("/components/{id}", response_model=ComponentPublic)
def read_component(id: uuid.UUID, session: SessionDep, principal: EditorPrincipal) -> Any:
    component = crud.get_component(session=session, component_id=id)
    if not component:
        raise HTTPException(status_code=404, detail="Component not found")
    return component


@router.put("/components/{id}", response_model=ComponentPublic)
def update_component(
    id: uuid.UUID,
    session: SessionDep,
    principal: EditorPrincipal,
    component_in: ComponentUpdate,
) -> Any:
    component = crud.get_component(session=session, component_id=id)
    if not component:
        raise HTTPException(status_code=404, detail="Component not found")
    with translate_db_errors("update component"):
        return crud.update_component(session=session, db_component=component, component_in=component_in)


@router.delete("/components/{id}", response_model=Message)
def delete_component(id: uuid.UUID, session: SessionDep, principal: DeleterPrincipal) -> Any:
    with translate_db_errors("delete component"):
        crud.delete_component(session=session, component_id=id)
    logger.info("Component %s deleted by %s", id, principal.subject)
    return Message(message="Component deleted successfully")


# Settings

@router.post("/change-password", response_model=Message)
def change_password(
    session: SessionDep, principal: SettingsPrincipal, body: ChangePassword
) -> Any:
    if not crud.verify_admin_password(session=session, password=body.current_password):
        raise HTTPException(status_code=401, detail="Current password is incorrect")
    with translate_db_errors("change password"):
        crud.set_admin_password(session=session, password=body.new_password)
    logger.info("Admin password changed by %s", principal.subject)
    return Message(message="Password updated successfully")

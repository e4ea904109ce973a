from typing import Any

from fastapi import APIRouter

from design_cms import crud
from design_cms.api.deps import EditorPrincipal, SessionDep
from design_cms.api.errors import translate_db_errors
from design_cms.core.config import settings
from design_cms.models import DashboardStats

router = APIRouter()

LOGIN_PATH = "/admin/login"


@router.get("/login")
def login_page() -> dict[str, Any]:
    return {
        "message": "Sign in to manage themes and components",
        "login_endpoint": f"{settings.API_PREFIX}/auth/login",
        "method": "POST",
        "fields": ["password", "email"],
    }


@router.get("", response_model=DashboardStats)
def dashboard(session: SessionDep, principal: EditorPrincipal) -> Any:
    with translate_db_errors("load dashboard"):
        return crud.get_dashboard_stats(session=session)

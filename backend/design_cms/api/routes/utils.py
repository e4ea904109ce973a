import logging

from fastapi import APIRouter
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from design_cms.api.deps import SessionDep
from design_cms.core.config import settings

router = APIRouter(prefix="/utils", tags=["utils"])
logger = logging.getLogger(__name__)


@router.get("/health-check/")
def health_check(session: SessionDep) -> dict[str, bool]:
    try:
        session.exec(text("SELECT 1"))  # type: ignore[call-overload]
        database = True
    except SQLAlchemyError as exc:
        logger.warning("Health check could not reach the database: %s", exc)
        database = False
    return {"ok": database, "database": database, "llm_configured": bool(settings.LLM_API_KEY)}

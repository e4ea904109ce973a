import logging
from datetime import timedelta
from typing import Any

from fastapi import APIRouter, HTTPException, Response

from design_cms import crud
from design_cms.api.deps import ADMIN_CONFIG_SUBJECT, OptionalPrincipal, SessionDep
from design_cms.core.config import settings
from design_cms.core.policy import ADMIN_ROLE
from design_cms.core.security import create_access_token
from design_cms.models import LoginRequest, Message

router = APIRouter()
logger = logging.getLogger(__name__)


def _set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        httponly=True,
        secure=settings.ENVIRONMENT != "local",
        samesite="lax",
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )


@router.post("/login")
def login(body: LoginRequest, response: Response, session: SessionDep) -> dict[str, Any]:
    """
    Log in with the shared admin password, or with an email and password for
    an individual user. The session is returned as an HTTP-only cookie and,
    for API clients, in the response body.
    """
    if not body.password:
        raise HTTPException(status_code=400, detail="Password is required")

    if body.email:
        user = crud.authenticate(session=session, email=body.email, password=body.password)
        if not user:
            raise HTTPException(status_code=401, detail="Invalid email or password")
        if not user.is_active:
            raise HTTPException(status_code=400, detail="Inactive user")
        subject, role = str(user.id), user.role
    else:
        if not crud.verify_admin_password(session=session, password=body.password):
            raise HTTPException(status_code=401, detail="Invalid password")
        subject, role = ADMIN_CONFIG_SUBJECT, ADMIN_ROLE

    token = create_access_token(
        subject, role, expires_delta=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    _set_session_cookie(response, token)
    logger.info("Login succeeded for %s (%s)", subject, role)
    return {"success": True, "role": role, "access_token": token, "token_type": "bearer"}


@router.post("/logout", response_model=Message)
def logout(response: Response) -> Any:
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return Message(message="Logged out")


@router.get("/me")
def read_session(principal: OptionalPrincipal) -> dict[str, Any]:
    if principal is None:
        raise HTTPException(status_code=401, detail="Authentication required")
    return {"subject": principal.subject, "role": principal.role, "email": principal.email}

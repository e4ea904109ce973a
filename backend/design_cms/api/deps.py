import logging
import uuid
from collections.abc import Callable, Generator
from typing import Annotated

import jwt
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import APIKeyCookie, HTTPAuthorizationCredentials, HTTPBearer
from sqlmodel import Session

from design_cms.core.config import settings
from design_cms.core.db import engine
from design_cms.core.policy import ADMIN_ROLE, Action, Decision, Principal, evaluate
from design_cms.core.security import decode_access_token
from design_cms.models import User

logger = logging.getLogger(__name__)

# Subject used for sessions opened with the shared admin password.
ADMIN_CONFIG_SUBJECT = "admin"

session_cookie = APIKeyCookie(name=settings.SESSION_COOKIE_NAME, auto_error=False)
bearer_token = HTTPBearer(auto_error=False)


def get_db() -> Generator[Session, None, None]:
    with Session(engine) as session:
        yield session


SessionDep = Annotated[Session, Depends(get_db)]


def principal_from_token(session: Session, token: str | None) -> Principal | None:
    """Resolve a session token to a principal, or None when it is missing or no longer valid."""
    if not token:
        return None
    try:
        payload = decode_access_token(token)
    except jwt.InvalidTokenError:
        logger.info("Rejected invalid or expired session token")
        return None

    subject = payload.get("sub")
    if subject == ADMIN_CONFIG_SUBJECT:
        return Principal(subject=ADMIN_CONFIG_SUBJECT, role=ADMIN_ROLE)
    try:
        user_id = uuid.UUID(str(subject))
    except ValueError:
        return None
    # Roles are read from the user row so demotions apply to live sessions.
    user = session.get(User, user_id)
    if not user or not user.is_active:
        return None
    return Principal(subject=str(user.id), role=user.role, email=user.email)


def get_current_principal(
    session: SessionDep,
    cookie_token: Annotated[str | None, Depends(session_cookie)],
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_token)],
) -> Principal | None:
    token = cookie_token or (credentials.credentials if credentials else None)
    return principal_from_token(session, token)


OptionalPrincipal = Annotated[Principal | None, Depends(get_current_principal)]


def require(action: Action) -> Callable[..., Principal]:
    """Dependency factory enforcing the authorization policy for `action`."""

    def _authorize(request: Request, principal: OptionalPrincipal) -> Principal:
        decision = evaluate(principal, action)
        if decision is Decision.UNAUTHENTICATED:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Authentication required",
            )
        if decision is Decision.FORBIDDEN:
            logger.info(
                "Denied %s on %s for role %s",
                action.value,
                request.url.path,
                principal.role if principal else None,
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Admin access required",
            )
        return principal  # type: ignore[return-value]

    return _authorize


EditorPrincipal = Annotated[Principal, Depends(require(Action.EDIT))]
CreatorPrincipal = Annotated[Principal, Depends(require(Action.CREATE))]
DeleterPrincipal = Annotated[Principal, Depends(require(Action.DELETE))]
GeneratorPrincipal = Annotated[Principal, Depends(require(Action.GENERATE))]
SettingsPrincipal = Annotated[Principal, Depends(require(Action.MANAGE_SETTINGS))]

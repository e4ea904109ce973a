import logging

import jwt
from fastapi import Request
from fastapi.responses import RedirectResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from design_cms.api.routes.admin_pages import LOGIN_PATH
from design_cms.core.config import settings
from design_cms.core.security import decode_access_token

logger = logging.getLogger(__name__)


def is_guarded_admin_path(path: str) -> bool:
    if path == LOGIN_PATH:
        return False
    return path == "/admin" or path.startswith("/admin/")


def has_valid_session(request: Request) -> bool:
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if not token:
        return False
    try:
        decode_access_token(token)
    except jwt.InvalidTokenError:
        return False
    return True


class AdminSessionMiddleware(BaseHTTPMiddleware):
    """Send visitors of the /admin pages without a valid session to the login page."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if is_guarded_admin_path(request.url.path) and not has_valid_session(request):
            logger.debug("Redirecting unauthenticated request for %s", request.url.path)
            return RedirectResponse(url=LOGIN_PATH, status_code=307)
        return await call_next(request)

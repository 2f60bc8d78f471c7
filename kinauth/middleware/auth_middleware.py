# kinauth/middleware/auth_middleware.py
import logging
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from kinauth.core.exceptions import UnauthorizedException
from kinauth.core.security import TokenService

logger = logging.getLogger(__name__)


class AuthMiddleware(BaseHTTPMiddleware):
    """Stores the verified subject of a bearer access token on request.state.user_id."""

    def __init__(self, app, token_service: TokenService):
        super().__init__(app)
        self.token_service = token_service

    async def dispatch(self, request: Request, call_next):
        request.state.user_id = authenticate_bearer(self.token_service, request.headers.get("Authorization"))
        response = await call_next(request)
        return response


def authenticate_bearer(token_service: TokenService, authorization: str | None) -> str | None:
    """Return the subject of a valid bearer access token, or None."""
    if not authorization or not authorization.lower().startswith("bearer "):
        return None
    token = authorization.split(" ", 1)[1].strip()
    try:
        payload = token_service.verify_access(token)
    except UnauthorizedException:
        logger.debug("Rejected bearer token")
        return None
    return payload["sub"]

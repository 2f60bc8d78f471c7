import logging
from datetime import datetime, timezone
from typing import Tuple

from kinauth.core.exceptions import InvalidSessionException, UnauthorizedException
from kinauth.core.security import TokenService
from kinauth.repositories.session_repo import SessionRepository

logger = logging.getLogger(__name__)


class SessionService:
    """Issues token pairs and keeps refresh tokens revocable through session rows.

    Refreshing never rotates the refresh token: the session keeps its jti for
    its whole lifetime.
    """

    def __init__(self, session_repo: SessionRepository, tokens: TokenService):
        self.session_repo = session_repo
        self.tokens = tokens

    async def create_session(self, user_id) -> Tuple[str, str]:
        subject = str(user_id)
        access = self.tokens.sign_access({"sub": subject})
        refresh = self.tokens.sign_refresh({"sub": subject})
        await self.session_repo.create(subject, refresh.jti, refresh.expires_at)
        logger.debug("Session created user_id=%s jti=%s", subject, refresh.jti)
        return access, refresh.token

    async def refresh_access(self, refresh_token: str) -> str:
        payload = self._verify(refresh_token)
        session = await self.session_repo.get_by_jti(payload["jti"])
        if session is None or session["expires_at"] <= datetime.now(timezone.utc):
            raise InvalidSessionException()
        return self.tokens.sign_access({"sub": payload["sub"]})

    async def revoke(self, refresh_token: str) -> None:
        payload = self._verify(refresh_token)
        deleted = await self.session_repo.delete_by_jti(payload["jti"])
        if not deleted:
            logger.debug("Logout for already revoked session jti=%s", payload["jti"])

    def _verify(self, refresh_token: str) -> dict:
        try:
            return self.tokens.verify_refresh(refresh_token)
        except UnauthorizedException:
            raise InvalidSessionException()

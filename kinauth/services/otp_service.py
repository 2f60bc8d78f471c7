import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

from kinauth.core.exceptions import ConflictError, InvalidOrExpiredCodeException
from kinauth.repositories.otp_repo import OtpRepository
from kinauth.repositories.user_repo import UserRepository
from kinauth.schemas.user_schema import UserOut
from kinauth.services.notification_service import LoggingNotificationSender
from kinauth.services.session_service import SessionService

logger = logging.getLogger(__name__)


def generate_code(length: int = 6) -> str:
    return f"{secrets.randbelow(10 ** length):0{length}d}"


class OtpService:
    def __init__(
        self,
        otp_repo: OtpRepository,
        user_repo: UserRepository,
        sessions: SessionService,
        notifier: LoggingNotificationSender,
        ttl_minutes: int = 10,
        code_length: int = 6,
    ):
        self.otp_repo = otp_repo
        self.user_repo = user_repo
        self.sessions = sessions
        self.notifier = notifier
        self.ttl_minutes = ttl_minutes
        self.code_length = code_length

    async def issue(self, target: str, purpose: str) -> int:
        code = generate_code(self.code_length)
        expires_at = datetime.now(timezone.utc) + timedelta(minutes=self.ttl_minutes)
        await self.otp_repo.create(target, code, purpose, expires_at)

        # Delivery is fire-and-forget; the challenge stands even if it fails.
        try:
            await self.notifier.send_code(target, code, purpose)
        except Exception:
            logger.exception("OTP delivery failed target=%s purpose=%s", target, purpose)
        return self.ttl_minutes

    async def verify(
        self, target: str, code: str, profile_name: Optional[str] = None
    ) -> Tuple[str, str, UserOut]:
        now = datetime.now(timezone.utc)
        challenge = await self.otp_repo.find_latest_active(target, code, now)
        if challenge is None:
            raise InvalidOrExpiredCodeException()

        if not await self.otp_repo.consume(challenge["id"], now):
            logger.info("OTP already consumed by a concurrent request target=%s", target)
            raise InvalidOrExpiredCodeException()

        user = await self._find_or_create_user(target, profile_name)
        access, refresh = await self.sessions.create_session(user["id"])
        return access, refresh, UserOut.model_validate(user)

    async def _find_or_create_user(self, target: str, profile_name: Optional[str]) -> dict:
        user = await self.user_repo.get_by_contact(target)
        if user is not None:
            return user

        user_in = {"name": profile_name}
        if "@" in target:
            user_in["email"] = target
        else:
            user_in["phone"] = target

        try:
            user = await self.user_repo.create(user_in)
            logger.info("User created from OTP user_id=%s", user["id"])
            return user
        except ConflictError:
            # A concurrent verification created the row first.
            user = await self.user_repo.get_by_contact(target)
            if user is None:
                raise
            return user

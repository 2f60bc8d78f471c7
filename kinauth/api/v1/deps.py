from fastapi import Depends, Request
from asyncpg import Connection

from kinauth.core.config import settings
from kinauth.core.exceptions import UnauthorizedException
from kinauth.core.security import PasswordHasher, TokenService
from kinauth.db.session import get_db_connection
from kinauth.repositories.family_repo import FamilyRepository
from kinauth.repositories.otp_repo import OtpRepository
from kinauth.repositories.session_repo import SessionRepository
from kinauth.repositories.user_repo import UserRepository
from kinauth.services.auth_services import AuthService
from kinauth.services.notification_service import LoggingNotificationSender
from kinauth.services.onboarding_service import OnboardingService
from kinauth.services.otp_service import OtpService
from kinauth.services.profile_service import ProfileService
from kinauth.services.session_service import SessionService


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_password_hasher(request: Request) -> PasswordHasher:
    return request.app.state.password_hasher


def get_notifier() -> LoggingNotificationSender:
    return LoggingNotificationSender()


def get_session_service(
        conn: Connection = Depends(get_db_connection),
        tokens: TokenService = Depends(get_token_service),
) -> SessionService:
    return SessionService(SessionRepository(conn), tokens)


def get_otp_service(
        conn: Connection = Depends(get_db_connection),
        sessions: SessionService = Depends(get_session_service),
        notifier: LoggingNotificationSender = Depends(get_notifier),
) -> OtpService:
    return OtpService(
        OtpRepository(conn),
        UserRepository(conn),
        sessions,
        notifier,
        ttl_minutes=settings.OTP_TTL_MINUTES,
        code_length=settings.OTP_LENGTH,
    )


def get_auth_service(
        conn: Connection = Depends(get_db_connection),
        sessions: SessionService = Depends(get_session_service),
        hasher: PasswordHasher = Depends(get_password_hasher),
) -> AuthService:
    return AuthService(UserRepository(conn), sessions, hasher)


def get_onboarding_service(conn: Connection = Depends(get_db_connection)) -> OnboardingService:
    return OnboardingService(conn, UserRepository(conn), FamilyRepository(conn))


def get_profile_service(conn: Connection = Depends(get_db_connection)) -> ProfileService:
    return ProfileService(UserRepository(conn), FamilyRepository(conn))


async def get_current_user_id(request: Request) -> str:
    # Populated by AuthMiddleware from a verified bearer token.
    user_id = getattr(request.state, "user_id", None)
    if not user_id:
        raise UnauthorizedException()
    return user_id

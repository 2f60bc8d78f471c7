import asyncio
import inspect
import os
import sys
from pathlib import Path

os.environ.setdefault("JWT_ACCESS_SECRET", "test-access-secret-do-not-use-in-production")
os.environ.setdefault("JWT_REFRESH_SECRET", "test-refresh-secret-do-not-use-in-production")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("LOG_LEVEL", "DEBUG")

import pytest  # noqa: E402

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from fakes import (  # noqa: E402
    FakeConnection,
    FakeFamilyRepository,
    FakeOtpRepository,
    FakeSessionRepository,
    FakeUserRepository,
    MemoryDatabase,
    RecordingNotifier,
)
from kinauth.core.security import PasswordHasher, TokenService, build_password_context  # noqa: E402
from kinauth.services.auth_services import AuthService  # noqa: E402
from kinauth.services.onboarding_service import OnboardingService  # noqa: E402
from kinauth.services.otp_service import OtpService  # noqa: E402
from kinauth.services.profile_service import ProfileService  # noqa: E402
from kinauth.services.session_service import SessionService  # noqa: E402


def pytest_pyfunc_call(pyfuncitem):
    if inspect.iscoroutinefunction(pyfuncitem.obj):
        call_kwargs = {
            name: pyfuncitem.funcargs[name]
            for name in pyfuncitem._fixtureinfo.argnames
            if name in pyfuncitem.funcargs
        }
        asyncio.run(pyfuncitem.obj(**call_kwargs))
        return True
    return None


@pytest.fixture
def db():
    return MemoryDatabase()


@pytest.fixture
def conn(db):
    return FakeConnection(db)


@pytest.fixture
def user_repo(db):
    return FakeUserRepository(db)


@pytest.fixture
def otp_repo(db):
    return FakeOtpRepository(db)


@pytest.fixture
def session_repo(db):
    return FakeSessionRepository(db)


@pytest.fixture
def family_repo(db):
    return FakeFamilyRepository(db)


@pytest.fixture
def token_service():
    return TokenService(
        access_secret="unit-access-secret",
        refresh_secret="unit-refresh-secret",
    )


@pytest.fixture
def hasher():
    return PasswordHasher(build_password_context(rounds=4))


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def session_service(session_repo, token_service):
    return SessionService(session_repo, token_service)


@pytest.fixture
def otp_service(otp_repo, user_repo, session_service, notifier):
    return OtpService(otp_repo, user_repo, session_service, notifier, ttl_minutes=10, code_length=6)


@pytest.fixture
def auth_service(user_repo, session_service, hasher):
    return AuthService(user_repo, session_service, hasher)


@pytest.fixture
def onboarding_service(conn, user_repo, family_repo):
    return OnboardingService(conn, user_repo, family_repo)


@pytest.fixture
def profile_service(user_repo, family_repo):
    return ProfileService(user_repo, family_repo)

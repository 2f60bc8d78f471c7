import logging
from typing import Optional, Tuple

import phonenumbers

from kinauth.core.exceptions import (
    ConflictError,
    InvalidCredentialsException,
    InvalidPhoneNumberException,
    UserAlreadyExistsException,
)
from kinauth.core.security import PasswordHasher
from kinauth.repositories.user_repo import UserRepository
from kinauth.schemas.user_schema import UserOut
from kinauth.services.session_service import SessionService

logger = logging.getLogger(__name__)


def normalize_e164(phone: str) -> str:
    """Validate an international number and return it in E.164 form."""
    phone = phone.strip()
    if not phone.startswith("+"):
        phone = f"+{phone}"
    try:
        parsed = phonenumbers.parse(phone, None)
    except phonenumbers.NumberParseException:
        raise InvalidPhoneNumberException()
    if not phonenumbers.is_valid_number(parsed):
        raise InvalidPhoneNumberException()
    return phonenumbers.format_number(parsed, phonenumbers.PhoneNumberFormat.E164)


def normalize_phone(country_code: str, phone_number: str) -> str:
    """Return the E.164 form of a country code plus local number."""
    return normalize_e164(f"{country_code.strip().lstrip('+')}{phone_number.strip()}")


class AuthService:
    def __init__(self, user_repo: UserRepository, sessions: SessionService, hasher: PasswordHasher):
        self.user_repo = user_repo
        self.sessions = sessions
        self.hasher = hasher

    async def signup(
        self,
        email: str,
        password: str,
        name: Optional[str],
        country_code: str,
        phone_number: str,
    ) -> str:
        phone = normalize_phone(country_code, phone_number)

        existing = await self.user_repo.find_existing(email, phone)
        if existing:
            raise UserAlreadyExistsException()

        user_data = {
            "email": email,
            "phone": phone,
            "country_code": f"+{country_code.strip().lstrip('+')}",
            "name": name,
            "password_hash": self.hasher.hash(password),
        }
        try:
            user = await self.user_repo.create(user_data)
        except ConflictError:
            raise UserAlreadyExistsException()
        logger.info("User signed up with password user_id=%s", user["id"])
        return str(user["id"])

    async def login(self, email: str, password: str) -> Tuple[str, str, UserOut]:
        user = await self.user_repo.get_by_email(email)
        if not user or not user.get("password_hash"):
            # Burn the same hashing time as a real check.
            self.hasher.verify(password, self.hasher.dummy_hash)
            raise InvalidCredentialsException()
        if not self.hasher.verify(password, user["password_hash"]):
            raise InvalidCredentialsException()

        access, refresh = await self.sessions.create_session(user["id"])
        return access, refresh, UserOut.model_validate(user)


from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from passlib.context import CryptContext
from jose import jwt, ExpiredSignatureError, JWTError
import hashlib
import uuid

from kinauth.core.config import Settings
from kinauth.core.exceptions import TokenExpiredException, TokenInvalidException


def build_password_context(rounds: int = 12) -> CryptContext:
    return CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)


class PasswordHasher:
    """bcrypt over a SHA-256 digest, so passwords past 72 bytes are not truncated."""

    def __init__(self, context: CryptContext):
        self.context = context
        # Built once so a lookup miss costs one verify, same as a hit.
        self.dummy_hash = context.hash(self._digest("kinauth-dummy-password"))

    @staticmethod
    def _digest(password: str) -> str:
        return hashlib.sha256(password.encode("utf-8")).hexdigest()

    def hash(self, password: str) -> str:
        return self.context.hash(self._digest(password))

    def verify(self, plain_password: str, hashed_password: str) -> bool:
        return self.context.verify(self._digest(plain_password), hashed_password)


@dataclass(frozen=True)
class RefreshToken:
    token: str
    jti: str
    expires_at: datetime


class TokenService:
    """Signs and verifies access and refresh JWTs.

    The two token kinds are signed with different secrets, so an access token
    never verifies as a refresh token and vice versa.
    """

    def __init__(
        self,
        access_secret: str,
        refresh_secret: str,
        algorithm: str = "HS256",
        access_ttl: timedelta = timedelta(minutes=15),
        refresh_ttl: timedelta = timedelta(days=30),
    ):
        if access_secret == refresh_secret:
            raise ValueError("Access and refresh tokens must use distinct secrets")
        self._access_secret = access_secret
        self._refresh_secret = refresh_secret
        self.algorithm = algorithm
        self.access_ttl = access_ttl
        self.refresh_ttl = refresh_ttl

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenService":
        return cls(
            access_secret=settings.JWT_ACCESS_SECRET,
            refresh_secret=settings.JWT_REFRESH_SECRET,
            algorithm=settings.ALGORITHM,
            access_ttl=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
            refresh_ttl=timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS),
        )

    def sign_access(self, claims: dict) -> str:
        if not claims.get("sub"):
            raise ValueError("Access token claims require a subject")
        to_encode = {**claims, "sub": str(claims["sub"])}
        to_encode["exp"] = datetime.now(timezone.utc) + self.access_ttl
        return jwt.encode(to_encode, self._access_secret, algorithm=self.algorithm)

    def sign_refresh(self, claims: dict) -> RefreshToken:
        if not claims.get("sub"):
            raise ValueError("Refresh token claims require a subject")
        jti = str(uuid.uuid4())
        expires_at = datetime.now(timezone.utc) + self.refresh_ttl
        to_encode = {**claims, "sub": str(claims["sub"]), "jti": jti, "exp": expires_at}
        token = jwt.encode(to_encode, self._refresh_secret, algorithm=self.algorithm)
        return RefreshToken(token=token, jti=jti, expires_at=expires_at)

    def verify_access(self, token: str) -> dict:
        return self._decode(token, self._access_secret)

    def verify_refresh(self, token: str) -> dict:
        payload = self._decode(token, self._refresh_secret)
        if not payload.get("jti"):
            raise TokenInvalidException()
        return payload

    def _decode(self, token: str, secret: str) -> dict:
        try:
            payload = jwt.decode(token, secret, algorithms=[self.algorithm])
        except ExpiredSignatureError:
            raise TokenExpiredException()
        except JWTError:
            raise TokenInvalidException()
        if not payload.get("sub"):
            raise TokenInvalidException()
        return payload

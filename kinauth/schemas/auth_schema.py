from pydantic import BaseModel, Field, EmailStr
from typing import Optional

from kinauth.core.config import settings
from kinauth.db.models.otp_model import OtpPurpose
from kinauth.schemas.user_schema import UserOut

STRICT = {"extra": "forbid", "use_enum_values": True}


class SendOtpIn(BaseModel):
    target: str = Field(..., min_length=3, max_length=255)
    purpose: OtpPurpose = OtpPurpose.signup

    model_config = STRICT


class ProfileHint(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=120)

    model_config = STRICT


class VerifyOtpIn(BaseModel):
    target: str = Field(..., min_length=3, max_length=255)
    code: str = Field(..., pattern=rf"^[0-9]{{{settings.OTP_LENGTH}}}$")
    profile: Optional[ProfileHint] = None

    model_config = STRICT


class SignupIn(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    name: Optional[str] = Field(None, max_length=120)
    country_code: str = Field(..., min_length=2, max_length=5, pattern=r"^\+?[0-9]{1,4}$")
    phone_number: str = Field(..., min_length=5, max_length=15)

    model_config = STRICT


class LoginIn(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)

    model_config = STRICT


class RefreshIn(BaseModel):
    refresh: str = Field(..., min_length=1)

    model_config = STRICT


class OtpSentOut(BaseModel):
    ok: bool = True
    ttl_minutes: int


class TokenPairOut(BaseModel):
    access: str
    refresh: str
    user: UserOut


class AccessOut(BaseModel):
    access: str


class SignupOut(BaseModel):
    ok: bool = True
    user_id: str


class OkOut(BaseModel):
    ok: bool = True

from fastapi import APIRouter, Depends, status

from kinauth.schemas.auth_schema import (
    AccessOut,
    LoginIn,
    OkOut,
    OtpSentOut,
    RefreshIn,
    SendOtpIn,
    SignupIn,
    SignupOut,
    TokenPairOut,
    VerifyOtpIn,
)
from kinauth.api.v1.deps import get_auth_service, get_otp_service, get_session_service
from kinauth.services.auth_services import AuthService
from kinauth.services.otp_service import OtpService
from kinauth.services.session_service import SessionService

router = APIRouter(tags=["auth"], prefix="/api/v1/auth")


@router.post("/otp/send", response_model=OtpSentOut)
async def send_otp(body: SendOtpIn, otp_svc: OtpService = Depends(get_otp_service)):
    ttl = await otp_svc.issue(body.target, body.purpose)
    return OtpSentOut(ttl_minutes=ttl)


@router.post("/otp/verify", response_model=TokenPairOut)
async def verify_otp(body: VerifyOtpIn, otp_svc: OtpService = Depends(get_otp_service)):
    profile_name = body.profile.name if body.profile else None
    access, refresh, user = await otp_svc.verify(body.target, body.code, profile_name)
    return TokenPairOut(access=access, refresh=refresh, user=user)


@router.post("/signup-password", response_model=SignupOut, status_code=status.HTTP_201_CREATED)
async def signup(body: SignupIn, auth_svc: AuthService = Depends(get_auth_service)):
    user_id = await auth_svc.signup(
        email=body.email,
        password=body.password,
        name=body.name,
        country_code=body.country_code,
        phone_number=body.phone_number,
    )
    return SignupOut(user_id=user_id)


@router.post("/login", response_model=TokenPairOut)
async def login(body: LoginIn, auth_svc: AuthService = Depends(get_auth_service)):
    access, refresh, user = await auth_svc.login(body.email, body.password)
    return TokenPairOut(access=access, refresh=refresh, user=user)


@router.post("/refresh", response_model=AccessOut)
async def refresh(body: RefreshIn, sessions: SessionService = Depends(get_session_service)):
    access = await sessions.refresh_access(body.refresh)
    return AccessOut(access=access)


@router.post("/logout", response_model=OkOut)
async def logout(body: RefreshIn, sessions: SessionService = Depends(get_session_service)):
    await sessions.revoke(body.refresh)
    return OkOut()

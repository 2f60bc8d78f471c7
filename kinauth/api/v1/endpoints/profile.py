from fastapi import APIRouter, Depends, status

from kinauth.api.v1.deps import get_current_user_id, get_onboarding_service, get_profile_service
from kinauth.schemas.profile_schema import (
    CompleteProfileIn,
    CompleteProfileOut,
    FamilyOut,
    ProfileOut,
    UpdateProfileIn,
    UpdateProfileOut,
)
from kinauth.services.onboarding_service import OnboardingService
from kinauth.services.profile_service import ProfileService

router = APIRouter(prefix="/api/v1/profile", tags=["profile"])


@router.get("", response_model=ProfileOut)
async def read_profile(
    user_id: str = Depends(get_current_user_id),
    profile_svc: ProfileService = Depends(get_profile_service),
):
    return ProfileOut.model_validate(await profile_svc.get_profile(user_id))


@router.patch("", response_model=UpdateProfileOut)
async def update_profile(
    body: UpdateProfileIn,
    user_id: str = Depends(get_current_user_id),
    profile_svc: ProfileService = Depends(get_profile_service),
):
    user = await profile_svc.update_profile(user_id, body.changes())
    return UpdateProfileOut(user=user)


@router.post("/complete", response_model=CompleteProfileOut, status_code=status.HTTP_201_CREATED)
async def complete_profile(
    body: CompleteProfileIn,
    user_id: str = Depends(get_current_user_id),
    onboarding_svc: OnboardingService = Depends(get_onboarding_service),
):
    locations = [loc.model_dump() for loc in body.locations] if body.locations else None
    user, family = await onboarding_svc.complete_profile(
        user_id,
        body.profile_fields(),
        body.family_name,
        body.role_in_family,
        locations,
    )
    return CompleteProfileOut(user=user, family=FamilyOut.model_validate(family))

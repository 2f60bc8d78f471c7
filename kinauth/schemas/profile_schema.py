from datetime import date, datetime
from typing import Any, List, Optional
from pydantic import BaseModel, Field, EmailStr, HttpUrl, field_validator

from kinauth.db.models.family_model import FamilyRole
from kinauth.db.models.user_model import Gender
from kinauth.schemas.user_schema import UserOut

STRICT = {"extra": "forbid", "use_enum_values": True}


class LocationIn(BaseModel):
    label: str = Field(..., min_length=1, max_length=120)
    address: Optional[str] = Field(None, max_length=255)
    lat: Optional[float] = Field(None, ge=-90, le=90)
    lng: Optional[float] = Field(None, ge=-180, le=180)

    model_config = STRICT


class CompleteProfileIn(BaseModel):
    # profile
    name: str = Field(..., min_length=1, max_length=120)
    gender: Optional[Gender] = None
    birth_date: Optional[date] = None
    avatar_url: Optional[HttpUrl] = None

    # family
    family_name: str = Field("My Family", min_length=1, max_length=120)
    role_in_family: FamilyRole = FamilyRole.OWNER

    # optional initial locations
    locations: Optional[List[LocationIn]] = None

    model_config = STRICT

    def profile_fields(self) -> dict:
        return {
            "name": self.name,
            "gender": self.gender,
            "birth_date": self.birth_date,
            "avatar_url": str(self.avatar_url) if self.avatar_url is not None else None,
        }


class UpdateProfileIn(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=120)
    gender: Optional[Gender] = None
    birth_date: Optional[date] = None
    avatar_url: Optional[HttpUrl] = None
    phone: Optional[str] = Field(None, min_length=3, max_length=20)
    email: Optional[EmailStr] = None

    model_config = STRICT

    def changes(self) -> dict:
        """Only the fields the client sent; explicit nulls are kept."""
        data = self.model_dump(exclude_unset=True)
        if data.get("avatar_url") is not None:
            data["avatar_url"] = str(data["avatar_url"])
        return data


class _Row(BaseModel):
    id: str

    model_config = {
        "from_attributes": True
    }

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> str:
        return str(value)


class LocationOut(_Row):
    label: str
    address: Optional[str] = None
    lat: Optional[float] = None
    lng: Optional[float] = None


class FamilyOut(_Row):
    name: str
    owner_id: str
    created_at: Optional[datetime] = None

    @field_validator("owner_id", mode="before")
    @classmethod
    def _stringify_owner(cls, value: Any) -> str:
        return str(value)


class FamilyWithLocationsOut(FamilyOut):
    locations: List[LocationOut] = []


class MembershipOut(_Row):
    role: FamilyRole
    created_at: Optional[datetime] = None
    family: FamilyWithLocationsOut


class ProfileOut(BaseModel):
    user: UserOut
    memberships: List[MembershipOut]
    owned_families: List[FamilyOut]


class CompleteProfileOut(BaseModel):
    ok: bool = True
    user: UserOut
    family: FamilyOut


class UpdateProfileOut(BaseModel):
    user: UserOut

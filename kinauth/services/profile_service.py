from kinauth.core.exceptions import (
    ConflictError,
    EmailOrPhoneInUseException,
    UserNotFoundException,
    ValidationFailedException,
)
from kinauth.repositories.family_repo import FamilyRepository
from kinauth.repositories.user_repo import UserRepository
from kinauth.schemas.user_schema import UserOut
from kinauth.services.auth_services import normalize_e164


class ProfileService:
    def __init__(self, user_repo: UserRepository, family_repo: FamilyRepository):
        self.user_repo = user_repo
        self.family_repo = family_repo

    async def get_profile(self, user_id: str) -> dict:
        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            raise UserNotFoundException()

        memberships = await self.family_repo.list_memberships(user_id)
        owned = await self.family_repo.list_owned(user_id)

        family_ids = [m["family_id"] for m in memberships]
        locations_by_family = {}
        for location in await self.family_repo.list_locations(family_ids):
            locations_by_family.setdefault(str(location["family_id"]), []).append(location)

        return {
            "user": UserOut.model_validate(user),
            "memberships": [
                {
                    "id": m["id"],
                    "role": m["role"],
                    "created_at": m["created_at"],
                    "family": {
                        "id": m["family_id"],
                        "name": m["family_name"],
                        "owner_id": m["family_owner_id"],
                        "created_at": m["family_created_at"],
                        "locations": locations_by_family.get(str(m["family_id"]), []),
                    },
                }
                for m in memberships
            ],
            "owned_families": owned,
        }

    async def update_profile(self, user_id: str, changes: dict) -> UserOut:
        """Apply only the keys present in ``changes``; a None value clears the field."""
        if changes.get("phone") is not None:
            changes = {**changes, "phone": normalize_e164(changes["phone"])}

        if "email" in changes or "phone" in changes:
            current = await self.user_repo.get_by_id(user_id)
            if current is None:
                raise UserNotFoundException()
            email = changes.get("email", current.get("email"))
            phone = changes.get("phone", current.get("phone"))
            if email is None and phone is None:
                raise ValidationFailedException(["email", "phone"])

        try:
            user = await self.user_repo.update_fields(user_id, changes)
        except ConflictError:
            raise EmailOrPhoneInUseException()
        if user is None:
            raise UserNotFoundException()
        return UserOut.model_validate(user)

import logging
from typing import List, Optional, Tuple

from asyncpg import Connection

from kinauth.core.exceptions import OnboardingFailedException
from kinauth.repositories.family_repo import FamilyRepository
from kinauth.repositories.user_repo import UserRepository
from kinauth.schemas.user_schema import UserOut

logger = logging.getLogger(__name__)

OPTIONAL_PROFILE_FIELDS = ("gender", "birth_date", "avatar_url")


class OnboardingService:
    """Turns a verified identity into a member of a new family in one transaction.

    Nothing guards against a second call: each call creates another family.
    """

    def __init__(self, conn: Connection, user_repo: UserRepository, family_repo: FamilyRepository):
        self.conn = conn
        self.user_repo = user_repo
        self.family_repo = family_repo

    async def complete_profile(
        self,
        user_id: str,
        profile: dict,
        family_name: str,
        role: str,
        locations: Optional[List[dict]] = None,
    ) -> Tuple[UserOut, dict]:
        fields = {"name": profile["name"]}
        for key in OPTIONAL_PROFILE_FIELDS:
            if profile.get(key) is not None:
                fields[key] = profile[key]

        try:
            async with self.conn.transaction():
                user = await self.user_repo.update_fields(user_id, fields)
                if user is None:
                    raise LookupError(f"User {user_id} does not exist")

                family = await self.family_repo.create_family(family_name, user_id)
                await self.family_repo.create_membership(user_id, family["id"], role)
                if locations:
                    await self.family_repo.create_locations(family["id"], locations)
        except Exception:
            logger.exception("completeProfile failed user_id=%s", user_id)
            raise OnboardingFailedException()

        logger.info("User onboarded user_id=%s family_id=%s", user_id, family["id"])
        return UserOut.model_validate(user), family

# kinauth/api/v1/routers.py
from fastapi import APIRouter
from kinauth.api.v1.endpoints import auth, profile

router = APIRouter()

router.include_router(auth.router)
router.include_router(profile.router)

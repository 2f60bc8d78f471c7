import logging
from contextlib import asynccontextmanager

import asyncpg
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from kinauth.api.v1 import routers
from kinauth.core.config import settings
from kinauth.core.exceptions import ValidationFailedException
from kinauth.core.security import PasswordHasher, TokenService, build_password_context
from kinauth.db.session import connect_db_pool, close_db_pool
from kinauth.middleware.auth_middleware import AuthMiddleware

logging.basicConfig(level=settings.LOG_LEVEL.upper())
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await connect_db_pool()
    yield
    await close_db_pool()


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    fields = [".".join(str(part) for part in err["loc"]) for err in exc.errors()]
    error = ValidationFailedException(fields)
    return JSONResponse(status_code=error.status_code, content=jsonable_encoder({"detail": error.detail}))


async def storage_exception_handler(request: Request, exc: Exception):
    logger.exception("Storage failure on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": {"error": "internal_error"}})


token_service = TokenService.from_settings(settings)

app = FastAPI(
    title="Kinauth API",
    description="Identity, sessions and family onboarding",
    version="1.0.0",
    lifespan=lifespan
)

app.state.token_service = token_service
app.state.password_hasher = PasswordHasher(build_password_context(settings.BCRYPT_ROUNDS))

app.add_middleware(AuthMiddleware, token_service=token_service)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(asyncpg.PostgresError, storage_exception_handler)
app.add_exception_handler(asyncpg.InterfaceError, storage_exception_handler)

app.include_router(routers.router)


@app.get("/health")
async def health():
    return {"status": "ok"}

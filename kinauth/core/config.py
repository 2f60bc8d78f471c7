# kinauth/core/config.py

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # --- JWT Config ---
    JWT_ACCESS_SECRET: str
    JWT_REFRESH_SECRET: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 15
    REFRESH_TOKEN_EXPIRE_DAYS: int = 30

    # --- OTP Config ---
    OTP_TTL_MINUTES: int = 10
    OTP_LENGTH: int = 6

    # --- Password hashing ---
    BCRYPT_ROUNDS: int = 12

    LOG_LEVEL: str = "INFO"

    # --- Database Config ---
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_NAME: str = "kinauth"
    DB_USER: str = "postgres"
    DB_PASS: str = "postgres"
    DB_POOL_MIN_SIZE: int = 5
    DB_POOL_MAX_SIZE: int = 20
    DB_COMMAND_TIMEOUT: float = 10.0

    @property
    def database_url(self) -> str:
        return (
            f"postgresql+asyncpg://"
            f"{self.DB_USER}:{self.DB_PASS}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        )

    @property
    def asyncpg_url(self) -> str:
        return (
            f"postgresql://"
            f"{self.DB_USER}:{self.DB_PASS}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        )

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()

from logging.config import fileConfig
from sqlalchemy import create_engine, pool
from alembic import context

from kinauth.db.base import Base
from kinauth.db.models.user_model import User  # noqa: F401
from kinauth.db.models.otp_model import OtpChallenge  # noqa: F401
from kinauth.db.models.session_model import Session  # noqa: F401
from kinauth.db.models.family_model import Family, FamilyMember, Location  # noqa: F401
from kinauth.core.config import settings

# Alembic Config object
config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

# Alembic runs on a sync engine (psycopg2), not asyncpg.
DATABASE_URL = settings.database_url.replace("+asyncpg", "")


def run_migrations_offline():
    """Run migrations in 'offline' mode."""
    context.configure(
        url=DATABASE_URL,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online():
    """Run migrations in 'online' mode (sync engine for Alembic)."""
    connectable = create_engine(
        DATABASE_URL,
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()

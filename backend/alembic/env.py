"""
Alembic environment for the house booking schema.

The database URL comes from DATABASE_URL_SYNC unless overridden on the
command line:  alembic -x dburl=postgresql://... upgrade head
"""

from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

from housebooking.core.config import get_settings
from housebooking.db.base import Base
import housebooking.models  # noqa: F401 - registers every table on Base.metadata

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def database_url() -> str:
    return context.get_x_argument(as_dictionary=True).get("dburl") or get_settings().DATABASE_URL_SYNC


def configure_options() -> dict:
    # The no-overlap exclusion constraint is hand-written in 001; autogenerate
    # cannot see it, so compare column types only
    return {
        "target_metadata": target_metadata,
        "compare_type": True,
        "transaction_per_migration": True,
    }


def run_migrations_offline() -> None:
    """Emit the SQL script instead of touching a database."""
    context.configure(
        url=database_url(),
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **configure_options(),
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    section = config.get_section(config.config_ini_section, {})
    section["sqlalchemy.url"] = database_url()
    connectable = engine_from_config(section, prefix="sqlalchemy.", poolclass=pool.NullPool)

    with connectable.connect() as connection:
        context.configure(connection=connection, **configure_options())
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()

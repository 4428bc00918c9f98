"""Alembic environment for the ``intake_profiles`` schema.

Revisions are applied synchronously, so the URL comes from
``get_sync_url()`` (plain ``postgresql://``, psycopg2) rather than the
asyncpg URL used by the persister.  The placeholder URL in ``alembic.ini`` is always replaced.
"""

from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

from intake_db.config import get_sync_url
from intake_db.models import Base

alembic_cfg = context.config
alembic_cfg.set_main_option("sqlalchemy.url", get_sync_url())

if alembic_cfg.config_file_name is not None:
    fileConfig(alembic_cfg.config_file_name)

# intake_db.models imports IntakeProfile, so autogenerate sees the table
target_metadata = Base.metadata

# JSONB and TIMESTAMP(timezone=True) changes are easy to miss otherwise
_CONFIGURE_OPTS = {
    "target_metadata": target_metadata,
    "compare_type": True,
    "compare_server_default": True,
}


def run_offline() -> None:
    """Write the upgrade SQL to stdout for review instead of executing it."""
    context.configure(
        url=alembic_cfg.get_main_option("sqlalchemy.url"),
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **_CONFIGURE_OPTS,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_online() -> None:
    """Apply pending revisions over a single unpooled connection."""
    engine = engine_from_config(
        alembic_cfg.get_section(alembic_cfg.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with engine.connect() as connection:
        context.configure(connection=connection, **_CONFIGURE_OPTS)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_offline()
else:
    run_online()

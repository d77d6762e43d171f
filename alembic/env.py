"""Alembic environment: builds the database URL from the AURORA_* env vars."""

import os
import sys
from logging.config import fileConfig
from pathlib import Path

from sqlalchemy import create_engine, pool
from sqlalchemy.engine import URL

from alembic import context

sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from layover.db import Base  # noqa: E402

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def _database_url() -> URL:
    return URL.create(
        "postgresql+psycopg",
        username=os.environ.get("AURORA_USER", "layover"),
        password=os.environ.get("AURORA_PASSWORD", "localdev"),
        host=os.environ.get("AURORA_HOST", "localhost"),
        port=int(os.environ.get("AURORA_PORT", "5432")),
        database=os.environ.get("AURORA_DATABASE", "layover"),
    )


def run_migrations_offline() -> None:
    context.configure(
        url=_database_url().render_as_string(hide_password=False),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = create_engine(_database_url(), poolclass=pool.NullPool)
    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()

"""
alembic/env.py

Migration environment for the library catalog (books, students, borrow_records).
"""

from __future__ import annotations

import os
from logging.config import fileConfig
from typing import Any

from alembic import context
from sqlalchemy import engine_from_config, pool

from db.base import Base
from db.config import load_env_files, normalize_postgres_url, resolve_database_url
from db.models import Book, BorrowRecord, Student  # noqa: F401  imports register models on Base.metadata

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

_COMPARE_OPTIONS: dict[str, Any] = {"compare_type": True, "compare_server_default": True}


def _migration_url() -> str:
    """
    First non-empty of: ``-x db_url=...``, ALEMBIC_DATABASE_URL,
    ``sqlalchemy.url`` in alembic.ini, then the application's own lookup.
    """

    load_env_files()

    explicit = (
        context.get_x_argument(as_dictionary=True).get("db_url"),
        os.getenv("ALEMBIC_DATABASE_URL"),
        config.get_main_option("sqlalchemy.url"),
    )
    raw_url = next((value.strip() for value in explicit if value and value.strip()), None)
    url = normalize_postgres_url(raw_url) if raw_url else resolve_database_url()

    if not url.startswith("postgresql"):
        raise RuntimeError("Catalog migrations target PostgreSQL only (functional unique index on books).")
    return url


def run_migrations_offline() -> None:
    context.configure(
        url=_migration_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **_COMPARE_OPTIONS,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    section = config.get_section(config.config_ini_section, {})
    section["sqlalchemy.url"] = _migration_url()
    connectable = engine_from_config(section, prefix="sqlalchemy.", poolclass=pool.NullPool)

    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata, **_COMPARE_OPTIONS)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()

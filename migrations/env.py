import re
import sys
from logging.config import fileConfig

from alembic import context
from alembic.autogenerate import render
from sqlalchemy import engine_from_config, pool

from app.database import engine, get_db_schema
from app.model.db import Base
from config import DATABASE_URL

config = context.config

# Loggers are configured from alembic.ini
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# Ledger tables (contract_state, issuer, bond, hbar_account, hts_token, ...)
target_metadata = Base.metadata

schema = get_db_schema()


def _include_name(name, type_, parent_names):
    if type_ == "schema":
        return name in [None, schema]
    return True


def run_migrations_offline():
    """Emit the ledger DDL as SQL script without connecting to the database."""
    context.configure(
        url=DATABASE_URL,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        version_table_schema=schema,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online():
    """Apply the ledger migrations against DATABASE_URL."""
    config_ini = config.get_section(config.config_ini_section) or {}
    config_ini["sqlalchemy.url"] = DATABASE_URL
    connectable = engine_from_config(
        config_ini,
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            version_table_schema=schema,
            include_schemas=schema is not None,
            include_name=_include_name if schema is not None else None,
        )

        with context.begin_transaction():
            context.run_migrations()


argv = sys.argv
if "--autogenerate" in argv:
    _render_op_org = getattr(render, "render_op")

    def render_op_wrapper(autogen_context, op):
        new_lines = []
        for line in _render_op_org(autogen_context, op):
            if "get_db_schema())" not in line:
                # Generated revisions always target the runtime schema
                if "schema=" not in line:
                    line = re.sub(r"\)$", ", schema=get_db_schema())", line)
                else:
                    line = re.sub(r"schema=(.|\s)*\)$", "schema=get_db_schema())", line)
            new_lines.append(line)
        return new_lines

    setattr(render, "render_op", render_op_wrapper)

if "--sql" in argv:
    if schema is not None and engine.name == "postgresql":
        print(f"SET SEARCH_PATH TO {schema};")

if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()

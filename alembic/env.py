from logging.config import fileConfig

from sqlalchemy import create_engine, pool
from sqlmodel import SQLModel
from alembic import context

from app.core.config import settings

# Objeto Config de Alembic (valores del .ini)
config = context.config

# La URL siempre sale de la configuración de la app (DATABASE_URL / .env)
config.set_main_option("sqlalchemy.url", settings.database_url)

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# Registrar las tablas en el metadata
import app.models  # noqa: F401,E402

target_metadata = SQLModel.metadata


def run_migrations_offline() -> None:
    """Ejecutar migraciones en modo 'offline'"""
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Ejecutar migraciones en modo 'online'"""
    connectable = create_engine(
        config.get_main_option("sqlalchemy.url"),
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            render_as_batch=connection.dialect.name == "sqlite",
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()

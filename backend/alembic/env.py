# =============================================================================
# SALES ORDERS v1.0 - ALEMBIC ENVIRONMENT
# =============================================================================
# Connection URL built from salesorders.config (PG_* variables / .env)
# =============================================================================

from logging.config import fileConfig
from urllib.parse import quote_plus

from alembic import context
from sqlalchemy import create_engine, pool

from salesorders.config import config as settings

alembic_config = context.config

if alembic_config.config_file_name is not None:
    fileConfig(alembic_config.config_file_name)


def database_url() -> str:
    return (
        f"postgresql+psycopg2://{settings.PG_USER}:{quote_plus(settings.PG_PASSWORD)}"
        f"@{settings.PG_HOST}:{settings.PG_PORT}/{settings.PG_DATABASE}"
    )


def run_migrations_offline() -> None:
    """Emit SQL to stdout without a connection."""
    context.configure(url=database_url(), literal_binds=True)

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations on a live connection."""
    engine = create_engine(database_url(), poolclass=pool.NullPool)

    with engine.connect() as connection:
        context.configure(connection=connection)

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()

from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

from sehat.core.config import settings
from sehat.db.base import Base
import sehat.db.models  # noqa: F401  (metadata 등록)

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# alembic.ini 대신 앱 설정(.env)의 DATABASE_URL 을 그대로 쓴다
config.set_main_option("sqlalchemy.url", settings.DATABASE_URL)

target_metadata = Base.metadata


def run_migrations_offline() -> None:
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            render_as_batch=connection.dialect.name == "sqlite",
        )
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()

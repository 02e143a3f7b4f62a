from logging.config import fileConfig

from sqlalchemy import engine_from_config, pool
from alembic import context

from marketplace.core.config import settings
from marketplace.core.database import Base
from marketplace.models.user import User
from marketplace.models.property import Property
from marketplace.models.image import Image
from marketplace.models.rental import Rental
from marketplace.models.favorite import Favorite
from marketplace.models.message import Message
from marketplace.models.notification import Notification
from marketplace.models.payment import Payment


config = context.config


config.set_main_option("sqlalchemy.url", settings.DATABASE_URL)


if config.config_file_name is not None:
    fileConfig(config.config_file_name)


target_metadata = Base.metadata


def run_migrations_offline():
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online():
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
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

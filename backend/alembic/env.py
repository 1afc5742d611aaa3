from logging.config import fileConfig

from dotenv import load_dotenv
from sqlalchemy import engine_from_config
from sqlalchemy import pool
from alembic import context

from groupcal.config import settings
from groupcal.db.base import Base
from groupcal.db.tables import ALL_TABLE_NAMES
from groupcal.models.availability import AvailabilityRecord, AvailabilitySlot  # noqa: F401
from groupcal.models.campaign import Campaign, CampaignMember  # noqa: F401
from groupcal.models.scheduled_session import ScheduledSession  # noqa: F401
from groupcal.models.setting import Setting  # noqa: F401

load_dotenv()

# Every ORM table must be one the migrations create, and vice versa.
_registered = set(Base.metadata.tables)
_expected = set(ALL_TABLE_NAMES)
assert _registered == _expected, (
    f"Model tables {_registered} must match groupcal.db.tables.ALL_TABLE_NAMES {_expected}. "
    "Add a migration and update ALL_TABLE_NAMES together."
)

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata
config.set_main_option("sqlalchemy.url", settings.database_url)


def run_migrations_offline() -> None:
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
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
        )
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()

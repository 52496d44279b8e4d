import alembic.command
import alembic.config
from sqlalchemy import Engine, event
from sqlalchemy.pool import StaticPool
from sqlmodel import create_engine

from ..settings import Settings

# Все модели должны быть импортированы до первого запроса, чтобы связи разрешились
from .menu import Category, Item
from .tables import DiningTable, TableSession
from .orders import Order, OrderItem, OrderStatus


def run_migrations(settings: Settings):
    alembic_cfg = alembic.config.Config("alembic.ini")
    alembic_cfg.set_main_option("sqlalchemy.url", settings.db_url)
    alembic.command.upgrade(alembic_cfg, "head")


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_db_engine(settings: Settings) -> Engine:
    if settings.db_url.startswith("sqlite"):
        # SQLite по умолчанию не проверяет внешние ключи
        engine = create_engine(
            settings.db_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        return engine
    return create_engine(settings.db_url, pool_pre_ping=True)

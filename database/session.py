# Trading Dashboard - Async DB Session (SQLite via aiosqlite)
from pathlib import Path

from sqlalchemy import event, text
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from database.base import Base
from database.models import MarketRating, OptionsTrade, SectorRating, StrategyType  # noqa: F401
from database.seed import DEFAULT_STRATEGIES

# Relative to the working directory; the app resolves a per-user location instead
DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///trading_dashboard.db"

# updated_at is maintained by the store, whatever the caller wrote.
# recursive_triggers is off by default, so the inner UPDATE does not re-fire.
TIMESTAMP_TRIGGERS = (
    """
    CREATE TRIGGER IF NOT EXISTS update_market_ratings_timestamp
        AFTER UPDATE ON market_ratings
    BEGIN
        UPDATE market_ratings SET updated_at = CURRENT_TIMESTAMP WHERE id = NEW.id;
    END
    """,
    """
    CREATE TRIGGER IF NOT EXISTS update_trades_timestamp
        AFTER UPDATE ON options_trades
    BEGIN
        UPDATE options_trades SET updated_at = CURRENT_TIMESTAMP WHERE id = NEW.id;
    END
    """,
)


def _ensure_sqlite_directory(database_url: str) -> None:
    url = make_url(database_url)
    if url.get_backend_name() != "sqlite" or not url.database or url.database == ":memory:":
        return
    Path(url.database).expanduser().parent.mkdir(parents=True, exist_ok=True)


def _enable_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def get_engine(database_url: str = DEFAULT_DATABASE_URL, *, echo: bool = False) -> AsyncEngine:
    _ensure_sqlite_directory(database_url)
    engine = create_async_engine(database_url, echo=echo)
    if engine.dialect.name == "sqlite":
        # SQLite ignores ON DELETE CASCADE unless enabled per connection
        event.listen(engine.sync_engine, "connect", _enable_foreign_keys)
    return engine


def get_session_factory(engine=None) -> async_sessionmaker[AsyncSession]:
    if engine is None:
        engine = get_engine()
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )


async def init_db(engine=None) -> None:
    """
    Create tables, indexes and triggers if they do not exist and seed the strategy catalog.
    Safe to run repeatedly. For Alembic-managed databases see database/alembic.
    """
    if engine is None:
        engine = get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
        for ddl in TIMESTAMP_TRIGGERS:
            await conn.execute(text(ddl))
        await conn.execute(
            sqlite_insert(StrategyType.__table__)
            .values(DEFAULT_STRATEGIES)
            .on_conflict_do_nothing(index_elements=["name"])
        )

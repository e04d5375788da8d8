# Trading Dashboard - Application facade
# Flat set of async methods called by the GUI layer. Degrades to read-only empty data if the store fails at startup.

import logging
from datetime import date, datetime
from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from app.config import Settings, settings as default_settings
from app.errors import ServiceUnavailableError, ValidationError
from app.paths import resolve_database_url
from app.schemas import (
    MarketRatingRead,
    MarketRatingRequest,
    StrategyTypeRead,
    TradeRead,
    TradeRequest,
    TradeStatus,
)
from app.services.market import MarketService, SECTOR_NAMES, default_rating
from app.services.trades import TradeService, get_valid_categories, get_valid_statuses

from database.session import get_engine, get_session_factory, init_db

logger = logging.getLogger(__name__)

RequestT = TypeVar("RequestT", bound=BaseModel)
DateArg = date | datetime | str


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _coerce(model: type[RequestT], value: RequestT | dict[str, Any]) -> RequestT:
    """GUI payloads arrive as plain dicts; validate them into the request model."""
    if isinstance(value, model):
        return value
    try:
        return model.model_validate(value)
    except PydanticValidationError as e:
        raise ValidationError(f"invalid {model.__name__}: {e}") from e


class App:
    """
    Entry point for the GUI layer.
    Call startup() once before use and shutdown() on exit. If startup fails the error is kept in
    startup_error: reads then return empty results and writes raise ServiceUnavailableError.
    """

    def __init__(self, settings: Settings | None = None, engine: AsyncEngine | None = None):
        self.settings = settings or default_settings
        self._engine = engine
        self.market_service: MarketService | None = None
        self.trade_service: TradeService | None = None
        self.startup_error: Exception | None = None

    @property
    def degraded(self) -> bool:
        return self.market_service is None or self.trade_service is None

    async def startup(self) -> None:
        try:
            if self._engine is None:
                database_url = resolve_database_url(self.settings)
                logger.info("Initializing database at: %s", database_url)
                self._engine = get_engine(database_url, echo=self.settings.sql_echo)
            await init_db(self._engine)
        except (SQLAlchemyError, OSError) as e:
            logger.exception("Database initialization failed; running without persistence: %s", e)
            self.startup_error = e
            return
        session_factory = get_session_factory(self._engine)
        self.market_service = MarketService(session_factory)
        self.trade_service = TradeService(session_factory)
        self.startup_error = None
        logger.info("Trading Dashboard initialized successfully")

    async def shutdown(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()

    def _unavailable(self) -> ServiceUnavailableError:
        return ServiceUnavailableError(f"database unavailable: {self.startup_error}")

    async def health(self) -> dict[str, Any]:
        """Returns facade and DB status."""
        if self.degraded or self._engine is None:
            return {"status": "degraded", "database": f"error: {self.startup_error!s}"}
        try:
            async with self._engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            db_status = "connected"
        except SQLAlchemyError as e:
            db_status = f"error: {e!s}"
        return {"status": "ok", "database": db_status}

    # Market ratings

    async def save_market_rating(self, request: MarketRatingRequest | dict[str, Any]) -> MarketRatingRead:
        req = _coerce(MarketRatingRequest, request)
        if self.market_service is None:
            raise self._unavailable()
        return await self.market_service.save_rating(req)

    async def get_latest_market_rating(self) -> MarketRatingRead:
        if self.market_service is None:
            return default_rating()
        return await self.market_service.get_latest_rating()

    async def update_market_rating(
        self, rating_id: int, request: MarketRatingRequest | dict[str, Any]
    ) -> MarketRatingRead:
        req = _coerce(MarketRatingRequest, request)
        if self.market_service is None:
            raise self._unavailable()
        return await self.market_service.update_rating(rating_id, req)

    def get_sector_names(self) -> list[str]:
        return list(SECTOR_NAMES)

    # Trades

    async def create_trade(self, request: TradeRequest | dict[str, Any]) -> TradeRead:
        req = _coerce(TradeRequest, request)
        if self.trade_service is None:
            raise self._unavailable()
        return await self.trade_service.create_trade(req)

    async def get_trade_by_id(self, trade_id: int) -> TradeRead:
        if self.trade_service is None:
            raise self._unavailable()
        return await self.trade_service.get_trade_by_id(trade_id)

    async def get_trades(self, start_date: DateArg, end_date: DateArg) -> list[TradeRead]:
        if self.trade_service is None:
            return []
        return await self.trade_service.get_trades(start_date, end_date)

    async def get_active_trades_by_date_range(self, start_date: DateArg, end_date: DateArg) -> list[TradeRead]:
        if self.trade_service is None:
            return []
        return await self.trade_service.get_active_trades_by_date_range(start_date, end_date)

    async def update_trade(self, trade_id: int, request: TradeRequest | dict[str, Any]) -> TradeRead:
        req = _coerce(TradeRequest, request)
        if self.trade_service is None:
            raise self._unavailable()
        return await self.trade_service.update_trade(trade_id, req)

    async def update_trade_status(self, trade_id: int, status: TradeStatus | str) -> TradeRead:
        if self.trade_service is None:
            raise self._unavailable()
        return await self.trade_service.update_trade_status(trade_id, status)

    async def delete_trade(self, trade_id: int) -> None:
        if self.trade_service is None:
            raise self._unavailable()
        await self.trade_service.delete_trade(trade_id)

    async def get_strategy_types(self) -> list[StrategyTypeRead]:
        if self.trade_service is None:
            return []
        return await self.trade_service.get_strategy_types()

    def get_valid_statuses(self) -> list[str]:
        return get_valid_statuses()

    def get_valid_categories(self) -> list[str]:
        return get_valid_categories()


async def create_app(settings: Settings | None = None) -> App:
    """Configure logging, build the facade and run startup."""
    settings = settings or default_settings
    configure_logging(settings.log_level)
    app = App(settings)
    await app.startup()
    return app

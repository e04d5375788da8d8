# Trading Dashboard - Trade Service
# CRUD and status changes for options positions, plus the date-range and calendar queries.

import logging
from datetime import date, datetime

from sqlalchemy import and_, delete, or_, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.errors import NotFoundError, StoreError, ValidationError
from app.schemas import StrategyCategory, StrategyTypeRead, TradeRead, TradeRequest, TradeStatus, to_date
from database.models import OptionsTrade, StrategyType

logger = logging.getLogger(__name__)


def get_valid_statuses() -> list[str]:
    return [s.value for s in TradeStatus]


def get_valid_categories() -> list[str]:
    return [c.value for c in StrategyCategory]


def validate_trade_request(request: TradeRequest) -> None:
    for field, label in (("ticker", "ticker"), ("sector", "sector"), ("strategy_type", "strategy type")):
        value = getattr(request, field)
        if not value or not value.strip():
            raise ValidationError(f"{label} is required")
    if request.entry_date is None:
        raise ValidationError("entry date is required")
    if request.expiration_date is None:
        raise ValidationError("expiration date is required")
    if request.expiration_date <= request.entry_date:
        raise ValidationError("expiration date must be after entry date")


def _as_date(value: date | datetime | str) -> date:
    try:
        return to_date(value)
    except ValueError as e:
        raise ValidationError(f"invalid date: {value!r}") from e


def _normalize_status(status: TradeStatus | str) -> str:
    value = status.value if isinstance(status, TradeStatus) else status
    if value not in get_valid_statuses():
        raise ValidationError(f"invalid status: {value}")
    return value


def _trade_values(request: TradeRequest) -> dict:
    return {
        "ticker": request.ticker,
        "sector": request.sector,
        "strategy_type": request.strategy_type,
        "entry_date": request.entry_date,
        "expiration_date": request.expiration_date,
        "target_price": request.target_price,
        "stop_loss": request.stop_loss,
        "notes": request.notes,
    }


class TradeService:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def create_trade(self, request: TradeRequest) -> TradeRead:
        """Insert a new active trade and return the stored row."""
        try:
            validate_trade_request(request)
        except ValidationError as e:
            logger.warning("Rejected trade for %r: %s", request.ticker, e)
            raise
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    trade = OptionsTrade(status=TradeStatus.ACTIVE.value, **_trade_values(request))
                    session.add(trade)
                    await session.flush()
                    trade_id = trade.id
        except SQLAlchemyError as e:
            raise StoreError(f"failed to create trade: {e}") from e
        logger.info("Created trade %s (%s %s)", trade_id, request.ticker, request.strategy_type)
        return await self.get_trade_by_id(trade_id)

    async def get_trade_by_id(self, trade_id: int) -> TradeRead:
        try:
            async with self._session_factory() as session:
                result = await session.execute(select(OptionsTrade).where(OptionsTrade.id == trade_id))
                trade = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise StoreError(f"failed to get trade: {e}") from e
        if trade is None:
            raise NotFoundError(f"trade {trade_id} not found")
        return TradeRead.model_validate(trade)

    async def get_trades(self, start_date: date | datetime | str, end_date: date | datetime | str) -> list[TradeRead]:
        """Trades entered within [start_date, end_date], newest entry first."""
        start, end = _as_date(start_date), _as_date(end_date)
        stmt = (
            select(OptionsTrade)
            .where(OptionsTrade.entry_date >= start, OptionsTrade.entry_date <= end)
            .order_by(OptionsTrade.entry_date.desc(), OptionsTrade.created_at.desc(), OptionsTrade.id.desc())
        )
        return await self._list(stmt, "failed to query trades")

    async def get_active_trades_by_date_range(
        self, start_date: date | datetime | str, end_date: date | datetime | str
    ) -> list[TradeRead]:
        """
        Active trades that overlap [start_date, end_date] at all (calendar view):
        entered in range, expiring in range, or open across the whole range.
        """
        start, end = _as_date(start_date), _as_date(end_date)
        stmt = (
            select(OptionsTrade)
            .where(
                OptionsTrade.status == TradeStatus.ACTIVE.value,
                or_(
                    OptionsTrade.entry_date.between(start, end),
                    OptionsTrade.expiration_date.between(start, end),
                    and_(OptionsTrade.entry_date <= start, OptionsTrade.expiration_date >= end),
                ),
            )
            .order_by(OptionsTrade.entry_date.asc(), OptionsTrade.ticker.asc())
        )
        return await self._list(stmt, "failed to query active trades")

    async def update_trade(self, trade_id: int, request: TradeRequest) -> TradeRead:
        """Overwrite every editable field of a trade. Status is left as is."""
        try:
            validate_trade_request(request)
        except ValidationError as e:
            logger.warning("Rejected update of trade %s: %s", trade_id, e)
            raise
        stmt = update(OptionsTrade).where(OptionsTrade.id == trade_id).values(**_trade_values(request))
        await self._execute_for_id(stmt, trade_id, "failed to update trade")
        logger.info("Updated trade %s", trade_id)
        return await self.get_trade_by_id(trade_id)

    async def update_trade_status(self, trade_id: int, status: TradeStatus | str) -> TradeRead:
        """Set status to active, closed or expired. Any status may follow any other."""
        value = _normalize_status(status)
        stmt = update(OptionsTrade).where(OptionsTrade.id == trade_id).values(status=value)
        await self._execute_for_id(stmt, trade_id, "failed to update trade status")
        logger.info("Trade %s status -> %s", trade_id, value)
        return await self.get_trade_by_id(trade_id)

    async def delete_trade(self, trade_id: int) -> None:
        stmt = delete(OptionsTrade).where(OptionsTrade.id == trade_id)
        await self._execute_for_id(stmt, trade_id, "failed to delete trade")
        logger.info("Deleted trade %s", trade_id)

    async def get_strategy_types(self) -> list[StrategyTypeRead]:
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    select(StrategyType).order_by(StrategyType.category, StrategyType.name)
                )
                rows = result.scalars().all()
        except SQLAlchemyError as e:
            raise StoreError(f"failed to query strategy types: {e}") from e
        return [StrategyTypeRead.model_validate(r) for r in rows]

    async def _list(self, stmt, context: str) -> list[TradeRead]:
        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                rows = result.scalars().all()
        except SQLAlchemyError as e:
            raise StoreError(f"{context}: {e}") from e
        return [TradeRead.model_validate(r) for r in rows]

    async def _execute_for_id(self, stmt, trade_id: int, context: str) -> None:
        """Run a single-row write; NotFoundError (and rollback) if it matched nothing."""
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    result = await session.execute(stmt.execution_options(synchronize_session=False))
                    if result.rowcount == 0:
                        raise NotFoundError(f"trade {trade_id} not found")
        except SQLAlchemyError as e:
            raise StoreError(f"{context}: {e}") from e

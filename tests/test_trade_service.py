"""Trade service: CRUD, status changes, range queries, strategy catalog."""

from collections import Counter
from datetime import date, datetime

import pytest
from sqlalchemy import func, select

from app.errors import NotFoundError, ValidationError
from app.schemas import TradeStatus
from database.models import OptionsTrade


class TestCreateTrade:
    async def test_creates_active_trade(self, trade_service, make_trade_request):
        trade = await trade_service.create_trade(make_trade_request(notes="first entry"))
        assert trade.id > 0
        assert trade.status == TradeStatus.ACTIVE
        assert trade.ticker == "AAPL"
        assert trade.entry_date == date(2024, 1, 10)
        assert trade.target_price == 200.0
        assert trade.stop_loss is None
        assert trade.notes == "first entry"
        assert trade.created_at is not None and trade.updated_at is not None

    @pytest.mark.parametrize(
        "overrides, message",
        [
            ({"ticker": ""}, "ticker is required"),
            ({"sector": "   "}, "sector is required"),
            ({"strategy_type": ""}, "strategy type is required"),
            ({"expiration_date": date(2024, 1, 5)}, "expiration date must be after entry date"),
            ({"expiration_date": date(2024, 1, 10)}, "expiration date must be after entry date"),
        ],
    )
    async def test_invalid_request_writes_nothing(
        self, trade_service, session_factory, make_trade_request, overrides, message
    ):
        with pytest.raises(ValidationError, match=message):
            await trade_service.create_trade(make_trade_request(**overrides))
        async with session_factory() as session:
            assert await session.scalar(select(func.count()).select_from(OptionsTrade)) == 0


async def test_get_trade_by_id_missing(trade_service):
    with pytest.raises(NotFoundError):
        await trade_service.get_trade_by_id(1234)


class TestGetTrades:
    async def test_filters_and_orders_by_entry_date_desc(self, trade_service, make_trade_request):
        early = await trade_service.create_trade(
            make_trade_request(ticker="MSFT", entry_date=date(2024, 1, 5), expiration_date=date(2024, 2, 1))
        )
        late = await trade_service.create_trade(
            make_trade_request(ticker="NVDA", entry_date=date(2024, 1, 10), expiration_date=date(2024, 2, 1))
        )
        await trade_service.create_trade(
            make_trade_request(ticker="XOM", entry_date=date(2024, 2, 1), expiration_date=date(2024, 3, 1))
        )

        trades = await trade_service.get_trades(date(2024, 1, 1), date(2024, 1, 31))
        assert [t.id for t in trades] == [late.id, early.id]

    async def test_range_bounds_are_inclusive(self, trade_service, make_trade_request):
        await trade_service.create_trade(make_trade_request(entry_date=date(2024, 1, 1)))
        await trade_service.create_trade(
            make_trade_request(entry_date=date(2024, 1, 31), expiration_date=date(2024, 3, 1))
        )
        trades = await trade_service.get_trades(date(2024, 1, 1), date(2024, 1, 31))
        assert len(trades) == 2

    async def test_same_entry_date_newest_created_first(self, trade_service, make_trade_request):
        first = await trade_service.create_trade(make_trade_request(ticker="AMD"))
        second = await trade_service.create_trade(make_trade_request(ticker="INTC"))
        trades = await trade_service.get_trades(date(2024, 1, 10), date(2024, 1, 10))
        assert [t.id for t in trades] == [second.id, first.id]

    async def test_no_match_returns_empty_list(self, trade_service, make_trade_request):
        await trade_service.create_trade(make_trade_request())
        assert await trade_service.get_trades(date(2023, 1, 1), date(2023, 12, 31)) == []

    async def test_accepts_datetimes_and_iso_strings(self, trade_service, make_trade_request):
        await trade_service.create_trade(make_trade_request())
        assert len(await trade_service.get_trades(datetime(2024, 1, 10, 15, 30), "2024-01-10")) == 1
        assert len(await trade_service.get_trades("2024-01-01T00:00:00Z", "2024-01-31T00:00:00Z")) == 1

    async def test_rejects_garbage_date(self, trade_service):
        with pytest.raises(ValidationError):
            await trade_service.get_trades("not-a-date", "2024-01-31")


class TestActiveTradesByDateRange:
    async def test_spanning_trade_included_until_closed(self, trade_service, make_trade_request):
        trade = await trade_service.create_trade(
            make_trade_request(entry_date=date(2024, 1, 1), expiration_date=date(2024, 3, 1))
        )
        window = (date(2024, 2, 1), date(2024, 2, 15))
        assert [t.id for t in await trade_service.get_active_trades_by_date_range(*window)] == [trade.id]

        await trade_service.update_trade_status(trade.id, "closed")
        assert await trade_service.get_active_trades_by_date_range(*window) == []

    async def test_overlap_cases_and_ordering(self, trade_service, make_trade_request):
        expiring_in = await trade_service.create_trade(
            make_trade_request(ticker="TSLA", entry_date=date(2024, 1, 15), expiration_date=date(2024, 2, 5))
        )
        entering_in = await trade_service.create_trade(
            make_trade_request(ticker="AMZN", entry_date=date(2024, 2, 10), expiration_date=date(2024, 4, 1))
        )
        same_day = await trade_service.create_trade(
            make_trade_request(ticker="AAPL", entry_date=date(2024, 2, 10), expiration_date=date(2024, 3, 1))
        )
        await trade_service.create_trade(
            make_trade_request(ticker="META", entry_date=date(2024, 3, 1), expiration_date=date(2024, 4, 1))
        )
        await trade_service.create_trade(
            make_trade_request(ticker="GOOG", entry_date=date(2023, 12, 1), expiration_date=date(2024, 1, 20))
        )

        trades = await trade_service.get_active_trades_by_date_range(date(2024, 2, 1), date(2024, 2, 15))
        assert [t.id for t in trades] == [expiring_in.id, same_day.id, entering_in.id]


class TestUpdateTrade:
    async def test_updates_fields_and_keeps_status(self, trade_service, make_trade_request):
        trade = await trade_service.create_trade(make_trade_request())
        await trade_service.update_trade_status(trade.id, TradeStatus.CLOSED)
        updated = await trade_service.update_trade(
            trade.id, make_trade_request(ticker="AAPL", stop_loss=180.0, target_price=None, notes="trimmed")
        )
        assert updated.id == trade.id
        assert updated.stop_loss == 180.0
        assert updated.target_price is None
        assert updated.notes == "trimmed"
        assert updated.status == TradeStatus.CLOSED
        assert updated.created_at == trade.created_at

    async def test_revalidates_dates(self, trade_service, make_trade_request):
        trade = await trade_service.create_trade(make_trade_request())
        with pytest.raises(ValidationError):
            await trade_service.update_trade(trade.id, make_trade_request(expiration_date=date(2024, 1, 1)))
        assert (await trade_service.get_trade_by_id(trade.id)).expiration_date == date(2024, 2, 16)

    async def test_unknown_id(self, trade_service, make_trade_request):
        with pytest.raises(NotFoundError):
            await trade_service.update_trade(77, make_trade_request())


class TestUpdateTradeStatus:
    async def test_any_transition_allowed(self, trade_service, make_trade_request):
        trade = await trade_service.create_trade(make_trade_request())
        for status in ("closed", "active", "expired", "active"):
            trade = await trade_service.update_trade_status(trade.id, status)
            assert trade.status == status

    async def test_invalid_status(self, trade_service, make_trade_request):
        trade = await trade_service.create_trade(make_trade_request())
        with pytest.raises(ValidationError, match="invalid status"):
            await trade_service.update_trade_status(trade.id, "pending")

    async def test_unknown_id(self, trade_service):
        with pytest.raises(NotFoundError):
            await trade_service.update_trade_status(77, "closed")


class TestDeleteTrade:
    async def test_hard_delete(self, trade_service, make_trade_request):
        trade = await trade_service.create_trade(make_trade_request())
        await trade_service.delete_trade(trade.id)
        with pytest.raises(NotFoundError):
            await trade_service.get_trade_by_id(trade.id)

    async def test_missing_id_stays_missing(self, trade_service):
        with pytest.raises(NotFoundError):
            await trade_service.delete_trade(555)
        with pytest.raises(NotFoundError):
            await trade_service.get_trade_by_id(555)


async def test_strategy_types_ordered_by_category_then_name(trade_service):
    strategies = await trade_service.get_strategy_types()
    assert len(strategies) == 9
    assert Counter(s.category.value for s in strategies) == {"Bullish": 3, "Bearish": 3, "Neutral": 3}
    keys = [(s.category.value, s.name) for s in strategies]
    assert keys == sorted(keys)
    assert keys[0] == ("Bearish", "Bear Put Spread")

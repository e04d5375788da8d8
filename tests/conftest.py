"""Shared fixtures: a fresh file-backed SQLite store per test."""

from datetime import date

import pytest

from app.schemas import MarketRatingRequest, TradeRequest
from app.services.market import MarketService
from app.services.trades import TradeService
from database.session import get_engine, get_session_factory, init_db


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite+aiosqlite:///{(tmp_path / 'trading_dashboard.db').as_posix()}"


@pytest.fixture
async def engine(database_url):
    engine = get_engine(database_url)
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return get_session_factory(engine)


@pytest.fixture
def market_service(session_factory):
    return MarketService(session_factory)


@pytest.fixture
def trade_service(session_factory):
    return TradeService(session_factory)


@pytest.fixture
def make_trade_request():
    """Factory for a valid TradeRequest; override any field by keyword."""

    def _make(**overrides) -> TradeRequest:
        data = {
            "ticker": "AAPL",
            "sector": "Technology",
            "strategy_type": "Long Call",
            "entry_date": date(2024, 1, 10),
            "expiration_date": date(2024, 2, 16),
            "target_price": 200.0,
            "stop_loss": None,
            "notes": "",
        }
        data.update(overrides)
        return TradeRequest(**data)

    return _make


@pytest.fixture
def rating_request():
    return MarketRatingRequest(overall_rating=1.5, sector_ratings={"Technology": 2.0, "Energy": -1.0})

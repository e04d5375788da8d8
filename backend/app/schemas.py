from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, Field, field_validator


def to_date(value: date | datetime | str) -> date:
    """Accept date, datetime (truncated) or an ISO-8601 date or datetime string. Raises ValueError."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        if len(value) == 10:
            return date.fromisoformat(value)
        return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
    raise ValueError(f"invalid date: {value!r}")


class TradeStatus(str, Enum):
    ACTIVE = "active"
    CLOSED = "closed"
    EXPIRED = "expired"


class StrategyCategory(str, Enum):
    BULLISH = "Bullish"
    BEARISH = "Bearish"
    NEUTRAL = "Neutral"


class MarketRatingRequest(BaseModel):
    """Schema for saving or replacing a market rating and its full sector set."""

    overall_rating: float = Field(..., description="Overall market sentiment, -3 (bearish) to +3 (bullish).")
    sector_ratings: dict[str, float] = Field(
        default_factory=dict,
        description="Sector name to rating (-3..+3). Replaces any previous sector set on update.",
    )

    class Config:
        json_schema_extra = {
            "example": {
                "overall_rating": 1.5,
                "sector_ratings": {"Technology": 2, "Energy": -1},
            }
        }


class MarketRatingRead(BaseModel):
    """A persisted rating. id == 0 means no rating has been recorded yet."""

    id: int
    overall_rating: float
    sector_ratings: dict[str, float]
    created_at: datetime
    updated_at: datetime


class TradeRequest(BaseModel):
    """Schema for creating or fully updating an OptionsTrade."""

    ticker: str = Field(..., description="Underlying ticker symbol (e.g., 'AAPL').")
    sector: str = Field(..., description="Sector of the underlying.")
    strategy_type: str = Field(..., description="Strategy name, usually one from the catalog.")
    entry_date: date = Field(..., description="Date the position was opened.")
    expiration_date: date = Field(..., description="Option expiration; must be after entry_date.")
    target_price: float | None = Field(None, description="Optional price target.")
    stop_loss: float | None = Field(None, description="Optional stop loss.")
    notes: str = Field("", description="Free-form notes.")

    @field_validator("entry_date", "expiration_date", mode="before")
    @classmethod
    def truncate_to_date(cls, value):
        # GUI bridges send full timestamps; only the calendar day is kept
        if value is None:
            return value
        return to_date(value)

    class Config:
        json_schema_extra = {
            "example": {
                "ticker": "AMD",
                "sector": "Technology",
                "strategy_type": "Bull Call Spread",
                "entry_date": "2026-03-02",
                "expiration_date": "2026-04-17",
                "target_price": 185.0,
                "stop_loss": None,
                "notes": "Breakout above 50-day",
            }
        }


class TradeRead(BaseModel):
    id: int
    ticker: str
    sector: str
    strategy_type: str
    entry_date: date
    expiration_date: date
    target_price: float | None = None
    stop_loss: float | None = None
    status: TradeStatus
    notes: str = ""
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class StrategyTypeRead(BaseModel):
    id: int
    name: str
    category: StrategyCategory
    description: str | None = None
    color_hex: str

    class Config:
        from_attributes = True

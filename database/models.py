# Trading Dashboard - SQLAlchemy Models
# Market sentiment (overall + per-sector ratings), options trades, strategy catalog.

from datetime import date, datetime

from sqlalchemy import CheckConstraint, Date, DateTime, Float, ForeignKey, Index, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from database.base import Base

RATING_MIN = -3.0
RATING_MAX = 3.0

TRADE_STATUSES = ("active", "closed", "expired")
STRATEGY_CATEGORIES = ("Bullish", "Bearish", "Neutral")


class MarketRating(Base):
    """
    Overall market sentiment on a -3..+3 scale.
    Sector ratings are created, replaced and loaded together with their parent.
    """

    __tablename__ = "market_ratings"
    __table_args__ = (
        CheckConstraint(
            f"overall_rating >= {RATING_MIN:g} AND overall_rating <= {RATING_MAX:g}",
            name="ck_market_ratings_overall_range",
        ),
        Index("idx_market_ratings_created_at", "created_at"),
        {"sqlite_autoincrement": True},
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    overall_rating: Mapped[float] = mapped_column(Float, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.current_timestamp())
    updated_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.current_timestamp())

    sectors: Mapped[list["SectorRating"]] = relationship(
        back_populates="market_rating",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"MarketRating(id={self.id}, overall_rating={self.overall_rating})"


class SectorRating(Base):
    """One sector's rating under a MarketRating. No lifecycle of its own."""

    __tablename__ = "sector_ratings"
    __table_args__ = (
        CheckConstraint(
            f"rating >= {RATING_MIN:g} AND rating <= {RATING_MAX:g}",
            name="ck_sector_ratings_range",
        ),
        Index("idx_sector_ratings_market_id", "market_rating_id"),
        Index("idx_sector_ratings_sector", "sector_name"),
        {"sqlite_autoincrement": True},
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    market_rating_id: Mapped[int] = mapped_column(
        ForeignKey("market_ratings.id", ondelete="CASCADE"), nullable=False
    )
    sector_name: Mapped[str] = mapped_column(Text, nullable=False)
    rating: Mapped[float] = mapped_column(Float, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.current_timestamp())

    market_rating: Mapped[MarketRating] = relationship(back_populates="sectors")

    def __repr__(self) -> str:
        return f"SectorRating(sector_name={self.sector_name!r}, rating={self.rating})"


class OptionsTrade(Base):
    """
    A tracked options position.
    Status is active | closed | expired with no enforced transition order.
    """

    __tablename__ = "options_trades"
    __table_args__ = (
        CheckConstraint(
            "status IN ({})".format(", ".join(f"'{s}'" for s in TRADE_STATUSES)),
            name="ck_options_trades_status",
        ),
        Index("idx_trades_ticker", "ticker"),
        Index("idx_trades_sector", "sector"),
        Index("idx_trades_status", "status"),
        Index("idx_trades_entry_date", "entry_date"),
        Index("idx_trades_expiration_date", "expiration_date"),
        Index("idx_trades_strategy", "strategy_type"),
        {"sqlite_autoincrement": True},
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    ticker: Mapped[str] = mapped_column(Text, nullable=False)
    sector: Mapped[str] = mapped_column(Text, nullable=False)
    strategy_type: Mapped[str] = mapped_column(Text, nullable=False)
    entry_date: Mapped[date] = mapped_column(Date, nullable=False)
    expiration_date: Mapped[date] = mapped_column(Date, nullable=False)
    target_price: Mapped[float | None] = mapped_column(Float, nullable=True)
    stop_loss: Mapped[float | None] = mapped_column(Float, nullable=True)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="active", server_default="active")
    notes: Mapped[str] = mapped_column(Text, nullable=False, default="", server_default="")
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.current_timestamp())
    updated_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.current_timestamp())

    def __repr__(self) -> str:
        return f"OptionsTrade(id={self.id}, ticker={self.ticker!r}, status={self.status!r})"


class StrategyType(Base):
    """Seeded strategy catalog; read-only once initialized."""

    __tablename__ = "strategy_types"
    __table_args__ = ({"sqlite_autoincrement": True},)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    category: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    color_hex: Mapped[str] = mapped_column(Text, nullable=False, default="#4a90e2", server_default="#4a90e2")

    def __repr__(self) -> str:
        return f"StrategyType(name={self.name!r}, category={self.category!r})"

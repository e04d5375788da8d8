"""Initial schema: market_ratings, sector_ratings, options_trades, strategy_types.

Revision ID: 001
Revises:
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "market_ratings",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("overall_rating", sa.Float(), nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.current_timestamp()),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.current_timestamp()),
        sa.CheckConstraint("overall_rating >= -3 AND overall_rating <= 3", name="ck_market_ratings_overall_range"),
        sqlite_autoincrement=True,
    )
    op.create_index("idx_market_ratings_created_at", "market_ratings", ["created_at"])

    op.create_table(
        "sector_ratings",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "market_rating_id",
            sa.Integer(),
            sa.ForeignKey("market_ratings.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("sector_name", sa.Text(), nullable=False),
        sa.Column("rating", sa.Float(), nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.current_timestamp()),
        sa.CheckConstraint("rating >= -3 AND rating <= 3", name="ck_sector_ratings_range"),
        sqlite_autoincrement=True,
    )
    op.create_index("idx_sector_ratings_market_id", "sector_ratings", ["market_rating_id"])
    op.create_index("idx_sector_ratings_sector", "sector_ratings", ["sector_name"])

    op.create_table(
        "options_trades",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("ticker", sa.Text(), nullable=False),
        sa.Column("sector", sa.Text(), nullable=False),
        sa.Column("strategy_type", sa.Text(), nullable=False),
        sa.Column("entry_date", sa.Date(), nullable=False),
        sa.Column("expiration_date", sa.Date(), nullable=False),
        sa.Column("target_price", sa.Float(), nullable=True),
        sa.Column("stop_loss", sa.Float(), nullable=True),
        sa.Column("status", sa.String(16), nullable=False, server_default="active"),
        sa.Column("notes", sa.Text(), nullable=False, server_default=""),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.current_timestamp()),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.current_timestamp()),
        sa.CheckConstraint("status IN ('active', 'closed', 'expired')", name="ck_options_trades_status"),
        sqlite_autoincrement=True,
    )
    for column in ("ticker", "sector", "status", "entry_date", "expiration_date"):
        op.create_index(f"idx_trades_{column}", "options_trades", [column])
    op.create_index("idx_trades_strategy", "options_trades", ["strategy_type"])

    strategy_types = op.create_table(
        "strategy_types",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.Text(), nullable=False, unique=True),
        sa.Column("category", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("color_hex", sa.Text(), nullable=False, server_default="#4a90e2"),
        sqlite_autoincrement=True,
    )

    op.execute(
        """
        CREATE TRIGGER IF NOT EXISTS update_market_ratings_timestamp
            AFTER UPDATE ON market_ratings
        BEGIN
            UPDATE market_ratings SET updated_at = CURRENT_TIMESTAMP WHERE id = NEW.id;
        END
        """
    )
    op.execute(
        """
        CREATE TRIGGER IF NOT EXISTS update_trades_timestamp
            AFTER UPDATE ON options_trades
        BEGIN
            UPDATE options_trades SET updated_at = CURRENT_TIMESTAMP WHERE id = NEW.id;
        END
        """
    )

    op.bulk_insert(
        strategy_types,
        [
            {"name": "Long Call", "category": "Bullish", "description": "Buy call options expecting price increase", "color_hex": "#22c55e"},
            {"name": "Bull Call Spread", "category": "Bullish", "description": "Buy lower strike call, sell higher strike call", "color_hex": "#16a34a"},
            {"name": "Cash-Secured Put", "category": "Bullish", "description": "Sell puts with cash backing to acquire shares", "color_hex": "#15803d"},
            {"name": "Long Put", "category": "Bearish", "description": "Buy put options expecting price decrease", "color_hex": "#ef4444"},
            {"name": "Bear Put Spread", "category": "Bearish", "description": "Buy higher strike put, sell lower strike put", "color_hex": "#dc2626"},
            {"name": "Covered Call", "category": "Bearish", "description": "Sell calls against owned shares", "color_hex": "#b91c1c"},
            {"name": "Iron Condor", "category": "Neutral", "description": "Sell call and put spreads for range-bound profit", "color_hex": "#8b5cf6"},
            {"name": "Butterfly Spread", "category": "Neutral", "description": "Limited risk/reward for minimal price movement", "color_hex": "#7c3aed"},
            {"name": "Straddle", "category": "Neutral", "description": "Buy call and put at same strike for volatility play", "color_hex": "#6d28d9"},
        ],
    )


def downgrade() -> None:
    op.drop_table("strategy_types")
    op.drop_table("options_trades")
    op.drop_table("sector_ratings")
    op.drop_table("market_ratings")

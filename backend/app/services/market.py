# Trading Dashboard - Market Rating Service
# Overall sentiment plus per-sector ratings, always written and read as one unit.

import logging
import math
from datetime import datetime, timezone

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.errors import NotFoundError, StoreError, ValidationError
from app.schemas import MarketRatingRead, MarketRatingRequest
from database.models import RATING_MAX, RATING_MIN, MarketRating, SectorRating

logger = logging.getLogger(__name__)

SECTOR_NAMES: tuple[str, ...] = (
    "Basic Materials",
    "Communication Services",
    "Consumer Cyclical",
    "Consumer Defensive",
    "Energy",
    "Financial Services",
    "Healthcare",
    "Industrials",
    "Real Estate",
    "Technology",
    "Utilities",
)


def validate_rating(value: float) -> bool:
    """True if value lies in [-3, 3] inclusive (NaN is never valid)."""
    return not math.isnan(value) and RATING_MIN <= value <= RATING_MAX


def validate_rating_request(request: MarketRatingRequest) -> None:
    if not validate_rating(request.overall_rating):
        raise ValidationError(
            f"invalid overall rating: {request.overall_rating} (must be between -3 and 3)"
        )
    for sector, rating in request.sector_ratings.items():
        if not sector or not sector.strip():
            raise ValidationError("sector name is required")
        if not validate_rating(rating):
            raise ValidationError(
                f"invalid rating for sector {sector}: {rating} (must be between -3 and 3)"
            )


def default_rating() -> MarketRatingRead:
    """Placeholder returned when nothing has been recorded. Not a persisted row."""
    now = datetime.now(timezone.utc).replace(tzinfo=None)
    return MarketRatingRead(id=0, overall_rating=0.0, sector_ratings={}, created_at=now, updated_at=now)


def _to_read(rating: MarketRating) -> MarketRatingRead:
    return MarketRatingRead(
        id=rating.id,
        overall_rating=rating.overall_rating,
        sector_ratings={s.sector_name: s.rating for s in rating.sectors},
        created_at=rating.created_at,
        updated_at=rating.updated_at,
    )


class MarketService:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def save_rating(self, request: MarketRatingRequest) -> MarketRatingRead:
        """Insert a rating and all of its sector rows in one transaction; return the stored rating."""
        try:
            validate_rating_request(request)
        except ValidationError as e:
            logger.warning("Rejected market rating: %s", e)
            raise
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    rating = MarketRating(
                        overall_rating=request.overall_rating,
                        sectors=[
                            SectorRating(sector_name=name, rating=value)
                            for name, value in request.sector_ratings.items()
                        ],
                    )
                    session.add(rating)
                    await session.flush()
                    rating_id = rating.id
        except SQLAlchemyError as e:
            raise StoreError(f"failed to save market rating: {e}") from e
        logger.info("Saved market rating %s (%d sectors)", rating_id, len(request.sector_ratings))
        return await self.get_rating_by_id(rating_id)

    async def get_rating_by_id(self, rating_id: int) -> MarketRatingRead:
        try:
            async with self._session_factory() as session:
                result = await session.execute(select(MarketRating).where(MarketRating.id == rating_id))
                rating = result.scalar_one_or_none()
                if rating is None:
                    raise NotFoundError(f"market rating {rating_id} not found")
                return _to_read(rating)
        except SQLAlchemyError as e:
            raise StoreError(f"failed to get rating by ID: {e}") from e

    async def get_latest_rating(self) -> MarketRatingRead:
        """Most recently created rating, or the id-0 default when the store is empty."""
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    select(MarketRating)
                    .order_by(MarketRating.created_at.desc(), MarketRating.id.desc())
                    .limit(1)
                )
                rating = result.scalar_one_or_none()
                if rating is None:
                    return default_rating()
                return _to_read(rating)
        except SQLAlchemyError as e:
            raise StoreError(f"failed to get latest rating: {e}") from e

    async def update_rating(self, rating_id: int, request: MarketRatingRequest) -> MarketRatingRead:
        """
        Replace the overall value and the whole sector set of an existing rating.
        Sectors absent from the request are removed. Unknown ids raise NotFoundError and change nothing.
        """
        try:
            validate_rating_request(request)
        except ValidationError as e:
            logger.warning("Rejected update of market rating %s: %s", rating_id, e)
            raise
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    result = await session.execute(
                        update(MarketRating)
                        .where(MarketRating.id == rating_id)
                        .values(overall_rating=request.overall_rating)
                        .execution_options(synchronize_session=False)
                    )
                    if result.rowcount == 0:
                        # Leaving the block with an exception rolls the transaction back
                        raise NotFoundError(f"market rating {rating_id} not found")
                    await session.execute(
                        delete(SectorRating)
                        .where(SectorRating.market_rating_id == rating_id)
                        .execution_options(synchronize_session=False)
                    )
                    session.add_all(
                        SectorRating(market_rating_id=rating_id, sector_name=name, rating=value)
                        for name, value in request.sector_ratings.items()
                    )
        except SQLAlchemyError as e:
            raise StoreError(f"failed to update market rating: {e}") from e
        logger.info("Updated market rating %s (%d sectors)", rating_id, len(request.sector_ratings))
        return await self.get_rating_by_id(rating_id)

    def get_sector_names(self) -> list[str]:
        """Standard sector labels for input forms; independent of stored data."""
        return list(SECTOR_NAMES)

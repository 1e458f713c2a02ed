"""Repository for testimonial queries."""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.models.review import Review


class ReviewRepository:
    """Read-only access to stored testimonials."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_by_zip(self, zip_code: str, rating: int) -> list[Review]:
        result = await self.session.execute(
            select(Review)
            .where(Review.zip == zip_code, Review.rating == rating)
            .order_by(Review.created_at.desc())
        )
        return list(result.scalars().all())

    async def list_outside_zip(self, zip_code: str, rating: int, limit: int) -> list[Review]:
        """A candidate pool of reviews from every other zip code."""
        result = await self.session.execute(
            select(Review)
            .where(Review.zip != zip_code, Review.rating == rating)
            .order_by(Review.created_at.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def count_by_rating(self, rating: int) -> int:
        result = await self.session.execute(
            select(func.count()).select_from(Review).where(Review.rating == rating)
        )
        return result.scalar_one()

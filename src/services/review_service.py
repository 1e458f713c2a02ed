"""Pick testimonials for a lead's zip code, backfilling from other areas."""

import random
from typing import Callable, Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.policies import ReviewPolicy
from src.repositories.review_repository import ReviewRepository
from src.schemas.reviews import ReviewItem, ReviewSelection
from src.utils.logger import get_logger

log = get_logger(__name__)


class ReviewSelector:
    """Local reviews first; shortfall filled with shuffled reviews from elsewhere.

    Backfill never repeats an author already selected. When fewer reviews
    exist than the target, fewer are returned.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        policy: ReviewPolicy,
        repository_factory: Callable[[AsyncSession], ReviewRepository] = ReviewRepository,
        rng: Optional[random.Random] = None,
    ):
        self.session_factory = session_factory
        self.policy = policy
        self.repository_factory = repository_factory
        self.rng = rng or random.Random()

    async def select(self, zip_code: str) -> ReviewSelection:
        async with self.session_factory() as session:
            repo = self.repository_factory(session)

            local = await repo.list_by_zip(zip_code, self.policy.rating)
            selected = [
                ReviewItem.model_validate(r).model_copy(update={"is_local": True})
                for r in local[: self.policy.target]
            ]

            shortfall = self.policy.target - len(selected)
            if shortfall > 0:
                pool = await repo.list_outside_zip(
                    zip_code,
                    self.policy.rating,
                    limit=shortfall * self.policy.pool_multiplier,
                )
                selected.extend(self._backfill(selected, pool, shortfall))

            total = await repo.count_by_rating(self.policy.rating)

        log.info(
            "reviews selected",
            zip=zip_code,
            local=len(local),
            selected=len(selected),
            five_star_total=total,
        )
        return ReviewSelection(reviews=selected, five_star_total=total)

    def _backfill(self, selected: list[ReviewItem], pool: list, needed: int) -> list[ReviewItem]:
        seen = {r.author for r in selected}
        candidates = [r for r in pool if r.author not in seen]
        self.rng.shuffle(candidates)

        extra: list[ReviewItem] = []
        for review in candidates:
            if len(extra) >= needed:
                break
            if review.author in seen:
                continue
            seen.add(review.author)
            extra.append(ReviewItem.model_validate(review))
        return extra

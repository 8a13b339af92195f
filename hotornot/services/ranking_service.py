"""
HotOrNot Backend — Ranking Service
====================================

What:  Computes per-image scores and produces the hot/not leaderboards.
How:   Loads every image that has votes (ascending id), scores it, sorts by
       score descending, then slices both ends of the same ordering.
Who:   Called by GET /api/top5.

Ordering Rules:
    - Images without votes have no score and are left out of both lists
    - Ties keep ascending id order (Python's sort is stable, the query is
      ordered by id)
    - hot = first N of the descending order
    - not = last N of the descending order, reversed (worst first)
    - With fewer than 2N scored images the lists share entries; they are
      not deduplicated
"""

import logging
from typing import Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from hotornot.config import settings
from hotornot.schemas.image import RankedImage, RankingsResponse
from hotornot.services.image_store import ImageStore, compute_score, image_store

logger = logging.getLogger(__name__)


def rank_images(images: Sequence, size: int) -> RankingsResponse:
    """
    Build both leaderboards from image-like objects.

    Args:
        images: objects exposing id, url, total_votes, hot_votes; their order
                is the tie-break order
        size:   maximum entries per list
    """
    entries = [
        RankedImage(
            id=image.id,
            url=image.url,
            total_votes=image.total_votes,
            hot_votes=image.hot_votes,
            score=compute_score(image.hot_votes, image.total_votes),
        )
        for image in images
        if image.total_votes > 0
    ]

    ordered = sorted(entries, key=lambda entry: entry.score, reverse=True)

    hot = ordered[:size]
    not_ = list(reversed(ordered[-size:])) if ordered else []

    return RankingsResponse(hot=hot, not_=not_)


class RankingService:

    def __init__(self, store: Optional[ImageStore] = None):
        self.store = store or image_store

    async def get_rankings(
        self, db: AsyncSession, size: Optional[int] = None
    ) -> RankingsResponse:
        """Top and bottom `size` images (default: settings.leaderboard_size)."""
        images = await self.store.list_scored_images(db)
        rankings = rank_images(images, size or settings.leaderboard_size)
        logger.debug(
            "Rankings computed from %d scored images (hot=%d, not=%d)",
            len(images),
            len(rankings.hot),
            len(rankings.not_),
        )
        return rankings


ranking_service = RankingService()

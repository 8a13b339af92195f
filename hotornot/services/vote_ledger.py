"""
HotOrNot Backend — Vote Ledger
================================

What:  Append-only record of individual votes.
Who:   VotingService appends; tests and audits tally.

Rows are never updated or deleted, so an image's counters can always be
re-derived from here: total = COUNT(*), hot = COUNT(*) WHERE value = 'hot'.
"""

import logging
from datetime import datetime, timezone

from sqlalchemy import case, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from hotornot.exceptions import StorageError
from hotornot.models.vote import Vote
from hotornot.schemas.vote import VoteTally

logger = logging.getLogger(__name__)


class VoteLedger:

    async def append(self, db: AsyncSession, image_id: int, value: str) -> Vote:
        """Insert one vote row stamped with the current UTC time."""
        vote = Vote(
            image_id=image_id,
            value=value,
            created_at=datetime.now(timezone.utc),
        )
        try:
            db.add(vote)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Failed to append vote for image %s: %s", image_id, str(e))
            raise StorageError(
                message="Could not record the vote. Please try again.",
                context={"image_id": image_id, "error_type": type(e).__name__},
            )
        return vote

    async def tally(self, db: AsyncSession, image_id: int) -> VoteTally:
        """Count the ledger rows for one image."""
        stmt = select(
            func.count(Vote.id),
            func.coalesce(func.sum(case((Vote.value == "hot", 1), else_=0)), 0),
        ).where(Vote.image_id == image_id)
        try:
            result = await db.execute(stmt)
            total, hot = result.one()
        except SQLAlchemyError as e:
            logger.error("Failed to tally votes for image %s: %s", image_id, str(e))
            raise StorageError(
                message="Could not count votes. Please try again.",
                context={"image_id": image_id},
            )
        return VoteTally(image_id=image_id, total=int(total or 0), hot=int(hot or 0))


vote_ledger = VoteLedger()

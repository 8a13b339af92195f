"""
HotOrNot Backend — Voting Service
===================================

What:  Enforces vote validity and keeps the vote ledger and image counters
       consistent.
How:   Validates the value, bumps the image counters, appends to the ledger,
       all inside the caller's session transaction.
Who:   Called by POST /api/vote/{id}.

Flow:
    ┌──────────┐    ┌──────────────┐    ┌───────────────┐    ┌──────────┐
    │ Validate │───▶│  Increment   │───▶│ Append ledger │───▶│  Commit  │
    │  value   │    │  counters    │    │     row       │    │ (caller) │
    └──────────┘    └──────────────┘    └───────────────┘    └──────────┘

    Invalid value     → InvalidVoteError before any statement runs
    Unknown image     → NotFoundError from the UPDATE, nothing written
    Ledger failure    → StorageError, transaction rolled back, counters untouched

Why counters first:
    The UPDATE reports whether the image exists (rowcount), so no ledger row
    is ever written for a missing image, and no separate existence SELECT is
    needed. Both statements are writes, which keeps SQLite's locking simple.
"""

import logging
from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from hotornot.exceptions import InvalidVoteError
from hotornot.models.vote import VOTE_VALUES
from hotornot.schemas.vote import VoteResponse
from hotornot.services.image_store import ImageStore, image_store
from hotornot.services.vote_ledger import VoteLedger, vote_ledger

logger = logging.getLogger(__name__)


class VotingService:
    """Applies votes. Holds its store and ledger; keeps no per-request state."""

    def __init__(
        self,
        store: Optional[ImageStore] = None,
        ledger: Optional[VoteLedger] = None,
    ):
        self.store = store or image_store
        self.ledger = ledger or vote_ledger

    @staticmethod
    def validate_vote(value: Any) -> bool:
        """
        Check a raw vote value.

        Returns:
            True for "hot", False for "not".
        Raises:
            InvalidVoteError for anything else (case-sensitive, no trimming).
        """
        if not isinstance(value, str) or value not in VOTE_VALUES:
            raise InvalidVoteError(value=value, allowed=VOTE_VALUES)
        return value == "hot"

    async def cast_vote(self, db: AsyncSession, image_id: int, value: Any) -> VoteResponse:
        """
        Record one vote for one image.

        Both writes commit together or not at all: on any failure the
        session is rolled back before the error propagates.

        Raises:
            InvalidVoteError: value is not "hot" or "not"
            NotFoundError:    image_id does not exist
            StorageError:     a statement failed
        """
        is_hot = self.validate_vote(value)

        try:
            await self.store.increment_counters(db, image_id, is_hot)
            await self.ledger.append(db, image_id, value)
        except Exception:
            await db.rollback()
            raise

        logger.info("Vote recorded: image=%s value=%s", image_id, value)
        return VoteResponse(success=True)


voting_service = VotingService()

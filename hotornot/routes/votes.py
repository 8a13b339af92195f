"""
HotOrNot Backend — Vote Route Handler
=======================================

What:  POST /api/vote/{image_id} with body {"vote": "hot" | "not"}.
How:   Hands the raw value to VotingService, which validates it and applies
       the vote inside the request transaction.
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from hotornot.database import get_db_session
from hotornot.schemas.common import ErrorResponse
from hotornot.schemas.vote import VoteRequest, VoteResponse
from hotornot.services.voting_service import voting_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Votes"])


@router.post(
    "/vote/{image_id}",
    response_model=VoteResponse,
    responses={
        200: {"description": "Vote recorded", "model": VoteResponse},
        400: {"description": "Invalid vote value", "model": ErrorResponse},
        404: {"description": "Image not found", "model": ErrorResponse},
        500: {"description": "Storage failure", "model": ErrorResponse},
    },
    summary="Vote on an image",
    description="Records one 'hot' or 'not' vote and updates the image's tallies atomically.",
)
async def cast_vote(
    image_id: int,
    body: VoteRequest,
    db: AsyncSession = Depends(get_db_session),
) -> VoteResponse:
    return await voting_service.cast_vote(db, image_id, body.vote)

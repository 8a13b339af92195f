"""
HotOrNot Backend — Rankings Route Handler
===========================================

What:  GET /api/top5 returns {"hot": [...], "not": [...]}.

Caching:
    None. Every vote can change the order, and the computation is one query
    plus a sort over the voted images.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from hotornot.database import get_db_session
from hotornot.schemas.common import ErrorResponse
from hotornot.schemas.image import RankingsResponse
from hotornot.services.ranking_service import ranking_service

router = APIRouter(prefix="/api", tags=["Rankings"])


@router.get(
    "/top5",
    response_model=RankingsResponse,
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="Hot and not leaderboards",
    description=(
        "Highest-scoring images first in `hot`, lowest-scoring first in `not`. "
        "Images without votes are excluded. With few voted images the two "
        "lists can contain the same entries."
    ),
)
async def top5(db: AsyncSession = Depends(get_db_session)) -> RankingsResponse:
    return await ranking_service.get_rankings(db)

"""
HotOrNot Backend — Image & Ranking Schemas
============================================

What:  Pydantic models defining the API contract for images and leaderboards.
How:   FastAPI uses these models to serialize responses and generate the
       OpenAPI documentation.

Design Decision:
    Schemas are separate from SQLAlchemy models because `rating` and `score`
    are read-time projections that never exist as columns.
"""

from typing import List, Optional

from pydantic import BaseModel, Field


class ImageResponse(BaseModel):
    """
    What:  Full representation of an image and its tallies.
    Who:   Returned by GET /api/images (as array items) and GET /api/images/{id}.
    """
    id: int = Field(description="Image identifier (ascending in upload order)")
    filename: str = Field(description="Stored file name")
    url: str = Field(description="Public URL path of the stored image")
    total_votes: int = Field(description="Number of votes cast")
    hot_votes: int = Field(description="Number of 'hot' votes cast")
    rating: Optional[float] = Field(
        default=None,
        description="hot_votes / total_votes rounded to 2 decimals; null without votes",
    )

    model_config = {"from_attributes": True}


class UploadResponse(BaseModel):
    """Returned by POST /api/upload."""
    id: int = Field(description="Identifier assigned to the new image")
    url: str = Field(description="Public URL path of the stored image")


class RankedImage(BaseModel):
    """
    What:  Leaderboard entry.
    Why:   Carries the score it was ranked by so clients can display it
           without recomputing.
    """
    id: int
    url: str
    total_votes: int
    hot_votes: int
    score: float = Field(description="hot_votes / total_votes rounded to 2 decimals")

    model_config = {"from_attributes": True}


class RankingsResponse(BaseModel):
    """
    What:  Top and bottom leaderboards returned by GET /api/top5.

    `not` is a Python keyword, so the attribute is `not_` and the JSON key is
    produced through the alias. The two lists may share entries when fewer
    than twice the leaderboard size qualify.
    """
    hot: List[RankedImage] = Field(description="Best scores first")
    not_: List[RankedImage] = Field(alias="not", description="Worst scores first")

    model_config = {"populate_by_name": True}

"""
HotOrNot Backend — Image Store
================================

What:  Durable storage of Image records and their vote counters.
How:   Thin layer of SQLAlchemy statements over the `images` table. Every
       method takes the caller's AsyncSession, so several store calls can
       share one transaction (the voting flow relies on this).
Who:   Used by the upload, voting and ranking services and the image routes.

Counter Updates:
    increment_counters() never reads-modifies-writes in Python. It issues a
    single `UPDATE images SET total_votes = total_votes + 1 ...` so the
    database applies concurrent increments one after another and none are
    lost.
"""

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from hotornot.exceptions import NotFoundError, StorageError
from hotornot.models.image import Image
from hotornot.schemas.image import ImageResponse

logger = logging.getLogger(__name__)

_TWO_PLACES = Decimal("0.01")


def compute_score(hot_votes: int, total_votes: int) -> Optional[float]:
    """
    Ratio of hot votes to total votes, rounded half-up to 2 decimals.

    Returns None when there are no votes: the score is undefined, not zero.
    Decimal arithmetic keeps 1/8 at 0.13 instead of the 0.12 that binary
    floats with round() would give.
    """
    if total_votes <= 0:
        return None
    ratio = Decimal(hot_votes) / Decimal(total_votes)
    return float(ratio.quantize(_TWO_PLACES, rounding=ROUND_HALF_UP))


def to_image_response(image: Image) -> ImageResponse:
    return ImageResponse(
        id=image.id,
        filename=image.filename,
        url=image.url,
        total_votes=image.total_votes,
        hot_votes=image.hot_votes,
        rating=compute_score(image.hot_votes, image.total_votes),
    )


class ImageStore:
    """
    Storage operations for images.

    Responsibilities:
        - create_image(): register an uploaded file with zeroed counters
        - list_images() / get_image(): read projections including `rating`
        - increment_counters(): atomic per-vote counter bump
        - list_scored_images(): rows that have at least one vote, for ranking

    Error Handling Strategy:
        SQLAlchemy errors are logged and wrapped in StorageError so driver
        details never reach the client. Missing rows become NotFoundError.
    """

    async def create_image(self, db: AsyncSession, filename: str, url: str) -> Image:
        """
        Insert a new image with total_votes = hot_votes = 0.

        The returned object carries the id assigned by the database
        (flush, not commit: the caller's transaction decides when it lands).
        """
        image = Image(filename=filename, url=url, total_votes=0, hot_votes=0)
        try:
            db.add(image)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Failed to insert image %s: %s", filename, str(e))
            raise StorageError(
                message="Could not register the uploaded image. Please try again.",
                context={"filename": filename, "error_type": type(e).__name__},
            )

        logger.info("Image %d registered: %s", image.id, url)
        return image

    async def list_images(self, db: AsyncSession) -> List[ImageResponse]:
        """All images in ascending id (== upload) order, each with its rating."""
        try:
            result = await db.execute(
                select(Image)
                .order_by(Image.id.asc())
                .execution_options(populate_existing=True)
            )
            images = list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error listing images: %s", str(e), exc_info=True)
            raise StorageError(
                message="Could not retrieve images. Please try again.",
                context={"error_type": type(e).__name__},
            )

        return [to_image_response(image) for image in images]

    async def get_image(self, db: AsyncSession, image_id: int) -> ImageResponse:
        try:
            result = await db.execute(
                select(Image)
                .where(Image.id == image_id)
                .execution_options(populate_existing=True)
            )
            image = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching image %s: %s", image_id, str(e))
            raise StorageError(
                message="Could not retrieve the image. Please try again.",
                context={"image_id": image_id},
            )

        if image is None:
            raise NotFoundError(resource="image", resource_id=image_id)

        return to_image_response(image)

    async def increment_counters(self, db: AsyncSession, image_id: int, is_hot: bool) -> None:
        """
        Add one vote to an image's tallies in a single UPDATE statement.

        total_votes always grows by 1; hot_votes grows by 1 only for a hot
        vote, so hot_votes <= total_votes is preserved.

        Raises:
            NotFoundError: no image has this id (the UPDATE matched no row)
            StorageError:  the statement failed
        """
        stmt = (
            update(Image)
            .where(Image.id == image_id)
            .values(
                total_votes=Image.total_votes + 1,
                hot_votes=Image.hot_votes + (1 if is_hot else 0),
            )
            # No pre-SELECT: on SQLite the first statement of the vote
            # transaction must be the write so waiting writers queue cleanly.
            .execution_options(synchronize_session=False)
        )
        try:
            result = await db.execute(stmt)
        except SQLAlchemyError as e:
            logger.error("Failed to increment counters for image %s: %s", image_id, str(e))
            raise StorageError(
                message="Could not record the vote. Please try again.",
                context={"image_id": image_id, "error_type": type(e).__name__},
            )

        if result.rowcount == 0:
            raise NotFoundError(resource="image", resource_id=image_id)

    async def list_scored_images(self, db: AsyncSession) -> List[Image]:
        """Images with at least one vote, ascending id order."""
        try:
            result = await db.execute(
                select(Image)
                .where(Image.total_votes > 0)
                .order_by(Image.id.asc())
                .execution_options(populate_existing=True)
            )
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error loading scored images: %s", str(e), exc_info=True)
            raise StorageError(
                message="Could not compute rankings. Please try again.",
                context={"error_type": type(e).__name__},
            )


image_store = ImageStore()

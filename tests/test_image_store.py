"""
HotOrNot Backend — Image Store Tests
======================================

What we test:
    ✅ create_image registers images with zeroed counters and increasing ids
    ✅ list_images / get_image include the derived rating
    ✅ increment_counters for hot and not votes
    ✅ Unknown ids raise NotFoundError
    ✅ Driver errors are wrapped in StorageError
"""

import pytest
from sqlalchemy.exc import OperationalError

from hotornot.exceptions import NotFoundError, StorageError
from hotornot.services.image_store import ImageStore


class TestCreateImage:

    def setup_method(self):
        self.store = ImageStore()

    @pytest.mark.asyncio
    async def test_new_image_has_zero_votes(self, database):
        async with database.session() as session:
            image = await self.store.create_image(session, "a.jpg", "/uploads/a.jpg")

        assert image.id is not None
        assert image.total_votes == 0
        assert image.hot_votes == 0

    @pytest.mark.asyncio
    async def test_ids_increase_in_upload_order(self, database):
        async with database.session() as session:
            first = await self.store.create_image(session, "a.jpg", "/uploads/a.jpg")
        async with database.session() as session:
            second = await self.store.create_image(session, "b.jpg", "/uploads/b.jpg")

        assert second.id > first.id

    @pytest.mark.asyncio
    async def test_driver_error_becomes_storage_error(self, mock_db_session):
        mock_db_session.flush.side_effect = OperationalError("INSERT", {}, Exception("disk I/O error"))

        with pytest.raises(StorageError) as exc_info:
            await self.store.create_image(mock_db_session, "a.jpg", "/uploads/a.jpg")

        assert "disk" not in exc_info.value.message


class TestReadImages:

    def setup_method(self):
        self.store = ImageStore()

    @pytest.mark.asyncio
    async def test_list_empty(self, database):
        async with database.session() as session:
            images = await self.store.list_images(session)

        assert images == []

    @pytest.mark.asyncio
    async def test_list_orders_by_id_with_rating(self, database, make_image):
        first = await make_image(hot=3, total=4)
        second = await make_image()

        async with database.session() as session:
            images = await self.store.list_images(session)

        assert [image.id for image in images] == [first, second]
        assert images[0].rating == 0.75
        assert images[1].rating is None

    @pytest.mark.asyncio
    async def test_get_image(self, database, make_image):
        image_id = await make_image(hot=1, total=8, filename="cat.png")

        async with database.session() as session:
            image = await self.store.get_image(session, image_id)

        assert image.filename == "cat.png"
        assert image.url == "/uploads/cat.png"
        assert image.rating == 0.13

    @pytest.mark.asyncio
    async def test_get_unknown_image(self, database):
        async with database.session() as session:
            with pytest.raises(NotFoundError) as exc_info:
                await self.store.get_image(session, 999)

        assert exc_info.value.context["resource_id"] == "999"

    @pytest.mark.asyncio
    async def test_list_driver_error(self, mock_db_session):
        mock_db_session.execute.side_effect = OperationalError("SELECT", {}, Exception())

        with pytest.raises(StorageError):
            await self.store.list_images(mock_db_session)

    @pytest.mark.asyncio
    async def test_list_scored_images_skips_unvoted(self, database, make_image):
        await make_image()
        voted = await make_image(hot=0, total=2)
        also_voted = await make_image(hot=2, total=2)

        async with database.session() as session:
            images = await self.store.list_scored_images(session)

        assert [image.id for image in images] == [voted, also_voted]


class TestIncrementCounters:

    def setup_method(self):
        self.store = ImageStore()

    @pytest.mark.asyncio
    async def test_hot_vote_bumps_both(self, database, make_image):
        image_id = await make_image()

        async with database.session() as session:
            await self.store.increment_counters(session, image_id, is_hot=True)
        async with database.session() as session:
            image = await self.store.get_image(session, image_id)

        assert image.total_votes == 1
        assert image.hot_votes == 1

    @pytest.mark.asyncio
    async def test_not_vote_bumps_total_only(self, database, make_image):
        image_id = await make_image(hot=2, total=3)

        async with database.session() as session:
            await self.store.increment_counters(session, image_id, is_hot=False)
        async with database.session() as session:
            image = await self.store.get_image(session, image_id)

        assert image.total_votes == 4
        assert image.hot_votes == 2

    @pytest.mark.asyncio
    async def test_unknown_image(self, database):
        async with database.session() as session:
            with pytest.raises(NotFoundError):
                await self.store.increment_counters(session, 42, is_hot=True)

    @pytest.mark.asyncio
    async def test_driver_error(self, mock_db_session):
        mock_db_session.execute.side_effect = OperationalError("UPDATE", {}, Exception("locked"))

        with pytest.raises(StorageError):
            await self.store.increment_counters(mock_db_session, 1, is_hot=False)

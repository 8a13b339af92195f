"""
HotOrNot Backend — Ranking Unit Tests
=======================================

What:  Tests for score computation and hot/not leaderboard construction.
How:   Pure functions are tested with plain objects; RankingService is tested
       against a real SQLite database.

What we test:
    ✅ Score rounding (half-up, 2 decimals) and undefined score without votes
    ✅ Images without votes are excluded from both lists
    ✅ Descending order for hot, ascending (worst first) for not
    ✅ Overlap preserved with few images; ties keep id order
"""

from types import SimpleNamespace

import pytest

from hotornot.services.image_store import compute_score
from hotornot.services.ranking_service import RankingService, rank_images


def img(id, hot, total):
    return SimpleNamespace(id=id, url=f"/uploads/{id}.jpg", hot_votes=hot, total_votes=total)


def ids(entries):
    return [entry.id for entry in entries]


class TestComputeScore:

    def test_no_votes_is_none(self):
        assert compute_score(0, 0) is None

    def test_three_of_four(self):
        assert compute_score(3, 4) == 0.75

    def test_rounds_half_up(self):
        """1/8 = 0.125 must round to 0.13, not banker's 0.12."""
        assert compute_score(1, 8) == 0.13

    def test_repeating_fractions(self):
        assert compute_score(1, 3) == 0.33
        assert compute_score(2, 3) == 0.67

    def test_bounds(self):
        assert compute_score(0, 5) == 0.0
        assert compute_score(5, 5) == 1.0


class TestRankImages:

    def test_excludes_unvoted_and_orders_by_score(self):
        rankings = rank_images([img(1, 4, 5), img(2, 1, 5), img(3, 0, 0)], size=5)

        assert ids(rankings.hot) == [1, 2]
        assert ids(rankings.not_) == [2, 1]
        assert rankings.hot[0].score == 0.8
        assert rankings.hot[1].score == 0.2

    def test_fewer_than_size_lists_contain_everything(self):
        rankings = rank_images([img(1, 1, 2), img(2, 3, 3), img(3, 0, 4)], size=5)

        assert sorted(ids(rankings.hot)) == [1, 2, 3]
        assert sorted(ids(rankings.not_)) == [1, 2, 3]
        assert ids(rankings.hot) == [2, 1, 3]
        assert ids(rankings.not_) == [3, 1, 2]

    def test_overlap_is_preserved(self):
        """7 scored images: both lists take 5, so 3 images appear twice."""
        images = [img(i, i, 10) for i in range(1, 8)]

        rankings = rank_images(images, size=5)

        assert ids(rankings.hot) == [7, 6, 5, 4, 3]
        assert ids(rankings.not_) == [1, 2, 3, 4, 5]
        assert set(ids(rankings.hot)) & set(ids(rankings.not_)) == {3, 4, 5}

    def test_many_images_are_sliced_from_both_ends(self):
        images = [img(i, i, 20) for i in range(1, 13)]

        rankings = rank_images(images, size=5)

        assert ids(rankings.hot) == [12, 11, 10, 9, 8]
        assert ids(rankings.not_) == [1, 2, 3, 4, 5]

    def test_ties_keep_id_order(self):
        images = [img(1, 1, 2), img(2, 2, 4), img(3, 3, 6)]

        rankings = rank_images(images, size=5)

        assert ids(rankings.hot) == [1, 2, 3]
        # not is the reversed tail of the same ordering
        assert ids(rankings.not_) == [3, 2, 1]

    def test_empty_input(self):
        rankings = rank_images([], size=5)

        assert rankings.hot == []
        assert rankings.not_ == []

    def test_only_unvoted_images(self):
        rankings = rank_images([img(1, 0, 0), img(2, 0, 0)], size=5)

        assert rankings.hot == []
        assert rankings.not_ == []

    def test_custom_size(self):
        images = [img(i, i, 10) for i in range(1, 6)]

        rankings = rank_images(images, size=2)

        assert ids(rankings.hot) == [5, 4]
        assert ids(rankings.not_) == [1, 2]

    def test_serializes_not_key(self):
        rankings = rank_images([img(1, 1, 1)], size=5)

        payload = rankings.model_dump(by_alias=True)

        assert set(payload) == {"hot", "not"}
        assert payload["not"][0]["id"] == 1


class TestRankingService:

    def setup_method(self):
        self.service = RankingService()

    @pytest.mark.asyncio
    async def test_get_rankings_from_database(self, database, make_image):
        first = await make_image(hot=4, total=5)
        second = await make_image(hot=1, total=5)
        await make_image(hot=0, total=0)

        async with database.session() as session:
            rankings = await self.service.get_rankings(session)

        assert ids(rankings.hot) == [first, second]
        assert ids(rankings.not_) == [second, first]

    @pytest.mark.asyncio
    async def test_default_size_is_five(self, database, make_image):
        for hot in range(8):
            await make_image(hot=hot, total=10)

        async with database.session() as session:
            rankings = await self.service.get_rankings(session)

        assert len(rankings.hot) == 5
        assert len(rankings.not_) == 5
        assert rankings.hot[0].score == 0.7
        assert rankings.not_[0].score == 0.0

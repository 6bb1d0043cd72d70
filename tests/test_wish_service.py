import asyncio
import random

import pytest

from wish_lighthouse_api.app.core.errors import NotFoundError, ValidationError
from wish_lighthouse_api.app.models.wish import UserRef, WishCategory
from wish_lighthouse_api.app.services.wish_service import WishService, to_public_view


AUTHOR = UserRef(id="demo-user", name="Demo User", avatar="https://example.com/a.png")


def run(coro):
    return asyncio.run(coro)


class TestListWishes:
    def test_defaults_to_newest_first(self, service):
        page = run(service.list_wishes())
        assert [w.id for w in page.wishes] == ["1", "2", "3", "4"]
        assert (page.total, page.page, page.limit, page.total_pages) == (4, 1, 10, 1)

    def test_popular_orders_by_likes(self, service):
        page = run(service.list_wishes(sort="popular"))
        assert [w.likes for w in page.wishes] == [89, 67, 42, 28]

    def test_unknown_sort_falls_back_to_newest(self, service):
        page = run(service.list_wishes(sort="whatever"))
        assert [w.id for w in page.wishes] == ["1", "2", "3", "4"]

    def test_popular_ties_are_newest_first(self, repository):
        service = WishService(repository)
        first = run(service.create_wish("The first wish of the day", "other", author=AUTHOR))
        second = run(service.create_wish("The second wish of the day", "other", author=AUTHOR))
        page = run(service.list_wishes(sort="popular"))
        assert [w.id for w in page.wishes] == [second.id, first.id]

    def test_page_past_the_end_is_empty(self, service):
        page = run(service.list_wishes(page=2, limit=10))
        assert page.wishes == []
        assert page.total == 4
        assert page.total_pages == 1

    def test_window(self, service):
        page = run(service.list_wishes(page=2, limit=3))
        assert [w.id for w in page.wishes] == ["4"]
        assert page.total_pages == 2

    def test_category_filter_counts_only_matches(self, service):
        page = run(service.list_wishes(category="health"))
        assert [w.category for w in page.wishes] == [WishCategory.HEALTH]
        assert page.total == 1
        assert page.total_pages == 1

    def test_all_means_no_filter(self, service):
        assert run(service.list_wishes(category="all")).total == 4

    def test_unknown_category_is_rejected(self, service):
        with pytest.raises(ValidationError):
            run(service.list_wishes(category="money"))

    @pytest.mark.parametrize("page,limit", [(0, 10), (1, 0), (-1, 5), (1, 101), ("2", 10)])
    def test_bad_window_is_rejected(self, service, page, limit):
        with pytest.raises(ValidationError):
            run(service.list_wishes(page=page, limit=limit))

    def test_empty_store(self, repository):
        page = run(WishService(repository).list_wishes())
        assert page.wishes == []
        assert page.total == 0
        assert page.total_pages == 0


class TestCreateWish:
    @pytest.mark.parametrize("length", [10, 500])
    def test_accepts_boundary_lengths(self, service, length):
        wish = run(service.create_wish("x" * length, "study", author=AUTHOR))
        assert len(wish.content) == length

    @pytest.mark.parametrize("length", [9, 501])
    def test_rejects_out_of_range_lengths(self, service, length):
        with pytest.raises(ValidationError) as exc_info:
            run(service.create_wish("x" * length, "study", author=AUTHOR))
        assert any(e.startswith("content:") for e in exc_info.value.errors)

    def test_length_is_measured_after_trimming(self, service):
        with pytest.raises(ValidationError):
            run(service.create_wish("   123456789   ", "study", author=AUTHOR))
        wish = run(service.create_wish("  1234567890  ", "study", author=AUTHOR))
        assert wish.content == "1234567890"

    def test_rejects_unknown_category(self, service):
        with pytest.raises(ValidationError) as exc_info:
            run(service.create_wish("A perfectly fine wish", "money", author=AUTHOR))
        assert any(e.startswith("category:") for e in exc_info.value.errors)

    def test_signed_wish_carries_author(self, service):
        wish = run(service.create_wish("A perfectly fine wish", "career", author=AUTHOR))
        assert wish.author.id == "demo-user"
        assert wish.is_anonymous is False
        assert wish.likes == 0
        assert wish.created_at == wish.updated_at

    def test_anonymous_wish_has_no_author(self, service):
        wish = run(service.create_wish("a valid ten+ char wish", "love", True, author=AUTHOR))
        assert wish.author is None
        assert "author" not in wish.model_dump(by_alias=True, exclude_none=True)
        stored = service.repository.get(wish.id)
        assert stored.author is None

    def test_signed_wish_requires_author(self, service):
        with pytest.raises(ValidationError):
            run(service.create_wish("A perfectly fine wish", "career"))

    def test_new_wish_is_immediately_listed(self, service):
        wish = run(service.create_wish("A perfectly fine wish", "health", author=AUTHOR))
        page = run(service.list_wishes(category="health"))
        assert page.total == 2
        assert page.wishes[0].id == wish.id


class TestToggleLike:
    def test_toggle_twice_restores_state(self, service):
        before = run(service.get_wish("1", viewer_id="u1"))
        first = run(service.toggle_like("1", "u1"))
        assert (first.likes, first.is_liked) == (before.likes + 1, True)
        second = run(service.toggle_like("1", "u1"))
        assert (second.likes, second.is_liked) == (before.likes, False)

    def test_updates_timestamp(self, service):
        before = run(service.get_wish("2"))
        run(service.toggle_like("2", "u1"))
        after = run(service.get_wish("2"))
        assert after.updated_at > before.updated_at
        assert after.created_at == before.created_at

    def test_unknown_wish(self, service):
        with pytest.raises(NotFoundError):
            run(service.toggle_like("missing", "u1"))

    def test_likes_match_likers_after_random_toggles(self, repository):
        service = WishService(repository)
        ids = [
            run(service.create_wish(f"Wish number {n} for the wall", "other", author=AUTHOR)).id
            for n in range(3)
        ]
        expected = {wish_id: set() for wish_id in ids}
        rng = random.Random(7)
        for _ in range(60):
            wish_id = rng.choice(ids)
            user_id = f"user-{rng.randint(1, 5)}"
            result = run(service.toggle_like(wish_id, user_id))
            expected[wish_id] ^= {user_id}
            assert result.is_liked == (user_id in expected[wish_id])
        for wish_id in ids:
            record = repository.get(wish_id)
            assert record.liked_by == expected[wish_id]
            assert record.likes == len(expected[wish_id])

    def test_viewer_sees_own_like(self, service):
        run(service.toggle_like("3", "u1"))
        assert run(service.get_wish("3", viewer_id="u1")).is_liked is True
        assert run(service.get_wish("3", viewer_id="u2")).is_liked is False


class TestPublicView:
    def test_does_not_touch_the_record(self, seeded_repository):
        record = seeded_repository.get("2")
        view = to_public_view(record, viewer_id="seed-liker-1")
        assert view.author is None
        assert view.is_liked is True
        assert record.liked_by
        dumped = view.model_dump(by_alias=True)
        assert "likedBy" not in dumped and "liked_by" not in dumped

    def test_get_unknown_wish(self, service):
        with pytest.raises(NotFoundError):
            run(service.get_wish("missing"))


class TestUserWishes:
    def test_only_signed_wishes_of_the_user(self, service):
        run(service.create_wish("My signed wish for the wall", "wealth", author=AUTHOR))
        run(service.create_wish("My secret wish for the wall", "wealth", True, author=AUTHOR))
        page = run(service.list_user_wishes("demo-user"))
        assert page.total == 1
        assert page.wishes[0].author.id == "demo-user"

    def test_seeded_author(self, service):
        page = run(service.list_user_wishes("user3"))
        assert [w.id for w in page.wishes] == ["3"]

import asyncio
import time
from unittest.mock import MagicMock

from core.errors import ApiError
from core.listing import ListingController, Phase
from core.query import SortOrder


def page(*ids, pages=1, total=None, tags=()):
    return {
        "blogs": [{"_id": i, "title": i.upper(), "tags": list(tags)} for i in ids],
        "total": total if total is not None else len(ids),
        "pages": pages,
    }


def make(api=None, **kwargs):
    api = api or MagicMock()
    kwargs.setdefault("debounce", 0.01)
    return ListingController(api, **kwargs)


async def _call(action):
    await action()


def test_typing_is_debounced_into_one_request():
    api = MagicMock()
    api.get_blogs.return_value = page("a")
    listing = make(api)

    async def scenario():
        for text in ("r", "ru", "rust"):
            listing.search_input(text)
        assert listing.phase == Phase.DEBOUNCING
        await asyncio.sleep(0.05)
        await listing.wait_idle()

    asyncio.run(scenario())

    api.get_blogs.assert_called_once()
    assert api.get_blogs.call_args.args[0]["search"] == "rust"
    assert listing.url_query == "search=rust"
    assert listing.phase == Phase.SETTLED


def test_filter_change_resets_page_and_updates_url():
    api = MagicMock()
    api.get_blogs.return_value = page("a", pages=3)
    listing = make(api, query_string="?ref=mail&category=Web")

    async def scenario():
        await listing.refresh()
        await listing.load_more()
        await listing.set_sort("popular")

    asyncio.run(scenario())

    assert listing.query.sort == SortOrder.POPULAR
    assert listing.page == 1
    assert listing.url_query == "ref=mail&category=Web&sort=popular"
    assert api.get_blogs.call_args.args[0]["page"] == 1


def test_load_more_appends_next_page():
    api = MagicMock()
    api.get_blogs.side_effect = [page("a", "b", pages=2, total=3), page("c", pages=2, total=3)]
    listing = make(api)

    async def scenario():
        await listing.refresh()
        assert listing.has_more
        await listing.load_more()

    asyncio.run(scenario())

    assert [b.id for b in listing.blogs] == ["a", "b", "c"]
    assert listing.page == 2
    assert not listing.has_more
    assert api.get_blogs.call_args.args[0]["page"] == 2


def test_load_more_is_ignored_while_in_flight_or_exhausted():
    api = MagicMock()
    listing = make(api)
    listing.pages = 3

    def slow(params):
        time.sleep(0.05)
        return page("x", pages=3)
    api.get_blogs.side_effect = slow

    async def scenario():
        return await asyncio.gather(listing.load_more(), listing.load_more())

    assert asyncio.run(scenario()) == [True, False]
    assert api.get_blogs.call_count == 1

    listing.pages = listing.page
    assert asyncio.run(listing.load_more()) is False
    assert api.get_blogs.call_count == 1


def test_failed_refresh_clears_list_and_reports():
    api = MagicMock()
    api.get_blogs.side_effect = ApiError("Database unavailable", status=500)
    notify = MagicMock()
    listing = make(api, notify=notify)
    listing.blogs = ["stale"]

    assert asyncio.run(listing.refresh()) is False

    assert listing.blogs == []
    assert listing.error == "Database unavailable"
    assert listing.phase == Phase.ERROR
    assert not listing.is_loading
    notify.error.assert_called_once_with("Database unavailable")


def test_failed_load_more_keeps_loaded_rows():
    api = MagicMock()
    api.get_blogs.side_effect = [page("a", pages=2), ApiError("Request failed")]
    listing = make(api)

    async def scenario():
        await listing.refresh()
        return await listing.load_more()

    assert asyncio.run(scenario()) is False
    assert [b.id for b in listing.blogs] == ["a"]
    assert listing.page == 1
    assert not listing.is_loading_more


def test_stale_response_is_dropped():
    """Scenario: a slow search answer arrives after a newer one."""
    api = MagicMock()

    def answer(params):
        if params.get("search") == "slow":
            time.sleep(0.1)
            return page("old")
        return page("new")
    api.get_blogs.side_effect = answer
    listing = make(api)

    async def scenario():
        listing.set_search("slow")
        await asyncio.sleep(0.01)
        listing.set_search("fast")
        await listing.wait_idle()

    asyncio.run(scenario())

    assert [b.id for b in listing.blogs] == ["new"]
    assert listing.query.search == "fast"


def test_clear_filters_keeps_unrelated_params():
    api = MagicMock()
    api.get_blogs.return_value = page()
    listing = make(api, query_string="search=x&tags=a,b&ref=1")

    asyncio.run(_call(listing.clear_filters))

    assert listing.url_query == "ref=1"
    assert listing.active_filter_count == 0
    assert listing.search_text == ""


def test_toggle_tag_and_category_all():
    api = MagicMock()
    api.get_blogs.return_value = page("a", tags=("python", "web"))
    listing = make(api, query_string="category=Web")

    asyncio.run(_call(lambda: listing.toggle_tag("python")))
    assert listing.query.tags == ("python",)
    assert listing.available_tags == ["python", "web"]

    asyncio.run(_call(lambda: listing.toggle_tag("python")))
    assert listing.query.tags == ()

    asyncio.run(_call(lambda: listing.set_category("all")))
    assert listing.query.category == ""
    assert listing.url_query == ""


def test_close_cancels_pending_search():
    api = MagicMock()
    listing = make(api)

    async def scenario():
        listing.search_input("abc")
        listing.close()
        await asyncio.sleep(0.05)

    asyncio.run(scenario())

    api.get_blogs.assert_not_called()
    assert listing.closed


def test_replace_and_remove_rows():
    api = MagicMock()
    api.get_blogs.return_value = page("a", "b")
    listing = make(api)
    asyncio.run(listing.refresh())

    listing.replace_blog(listing.blogs[0].evolve(like_count=9))
    listing.remove_blog("b")

    assert [(b.id, b.like_count) for b in listing.blogs] == [("a", 9)]


"""
Unit tests for the pager workflows.

The backend is an AsyncMock over a five-element catalog (tags a..e, page size 2),
the session store is in memory, and the notifier records what it receives.
"""

import asyncio
from unittest.mock import MagicMock

import pytest

from pagerstate import FunctionBackend, NotificationKind, PageResult, create_pager
from pagerstate.cache import MemorySessionStore, PageCache
from pagerstate.config import PagerOptions
from pagerstate.exceptions import LoadError


def _tags(elements):
    return [el["tag"] for el in elements]


@pytest.fixture
def page_cache(session_store) -> PageCache:
    return PageCache(PagerOptions(subject="IMAGE_META", limit=2), session_store)


class TestLoadWorkflow:
    @pytest.mark.asyncio
    async def test_cache_miss_loads_and_caches(self, pager, backend, page_cache):
        await pager.set_page(0)

        backend.load.assert_awaited_once()
        (config,) = backend.load.await_args.args
        assert config.current_page == 0
        assert config.filters.limit == 2

        assert _tags(pager.elements) == ["a", "b"]
        assert pager.total_elements == 5
        assert pager.total_pages == 3
        assert pager.is_loading is False
        assert pager.state.loaded is True

        assert _tags(page_cache.get(0, 2)) == ["a", "b"]
        assert page_cache.get_total() == 5

    @pytest.mark.asyncio
    async def test_cache_hit_skips_backend(self, pager, backend, page_cache, make_element):
        page_cache.put(1, 2, [make_element("x"), make_element("y")])
        page_cache.put_total(9)

        await pager.set_page(1)

        backend.load.assert_not_awaited()
        assert _tags(pager.elements) == ["x", "y"]
        assert pager.total_elements == 9
        assert pager.is_loading is False

    @pytest.mark.asyncio
    async def test_cache_hit_without_total_keeps_state_total(
        self, pager, backend, page_cache, make_element
    ):
        await pager.set_page(0)
        page_cache.put(1, 2, [make_element("x")])
        page_cache.store.remove_item("IMAGE_META_TOTAL_EL")

        await pager.set_page(1)

        assert backend.load.await_count == 1
        assert pager.total_elements == 5

    @pytest.mark.asyncio
    async def test_total_is_written_only_when_changed(self, backend, notifier):
        store = MagicMock(wraps=MemorySessionStore())
        pager = create_pager("IMAGE_META", backend, cache_store=store, notifier=notifier, limit=2)

        await pager.set_page(0)
        await pager.set_page(1)

        written = [call.args[0] for call in store.set_item.call_args_list]
        assert written == ["IMAGE_META_0_2", "IMAGE_META_TOTAL_EL", "IMAGE_META_1_2"]

    @pytest.mark.asyncio
    async def test_failure_rolls_back_page_without_caching(
        self, pager, backend, session_store, notifier
    ):
        backend.load.side_effect = ConnectionError("backend down")

        await pager.set_page(3)

        assert pager.pager_config.current_page == 2
        assert pager.is_loading is False
        assert pager.state.loaded is True
        assert pager.elements == []
        assert session_store.keys() == []
        # Load failures are silent at this layer
        assert notifier.notifications == []

    @pytest.mark.asyncio
    async def test_malformed_response_is_a_load_failure(self, pager, backend):
        backend.load.side_effect = None
        backend.load.return_value = {"items": []}

        await pager.set_page(1)

        assert pager.pager_config.current_page == 0
        assert pager.is_loading is False

    @pytest.mark.asyncio
    async def test_unserializable_elements_load_without_caching(self, session_store):
        class Photo:
            def __init__(self, id, tag):
                self.id = id
                self.tag = tag

        photo = Photo("p1", "a")
        backend = FunctionBackend(
            load_func=lambda config: ([photo], 1),
            search_func=lambda keyword, page, limit: ([], 0),
            delete_func=lambda element_id, config: None,
        )
        pager = create_pager("PHOTOS", backend, cache_store=session_store, limit=2)

        await pager.set_page(0)

        assert pager.elements == [photo]
        assert pager.total_elements == 1
        assert pager.is_loading is False
        assert session_store.keys() == ["PHOTOS_TOTAL_EL"]

    @pytest.mark.asyncio
    async def test_sync_backend_functions(self, session_store, make_element):
        backend = FunctionBackend(
            load_func=lambda config: PageResult(elements=[make_element("a")], total_elements=1),
            search_func=lambda keyword, page, limit: ([], 0),
            delete_func=lambda element_id, config: None,
        )
        pager = create_pager("SYNC", backend, cache_store=session_store)

        await pager.set_page(0)

        assert _tags(pager.elements) == ["a"]
        assert pager.total_elements == 1


class TestSearchWorkflow:
    @pytest.mark.asyncio
    async def test_search_resets_and_queries(self, pager, backend, session_store):
        await pager.set_page(1)
        session_store.clear()

        await pager.search_for_element("c")

        backend.search.assert_awaited_once_with("c", 0, 2)
        assert pager.pager_config.current_page == 0
        assert pager.pager_config.filters.keyword == "c"
        assert _tags(pager.elements) == ["c"]
        assert pager.total_elements == 1
        # Search results are never cached
        assert session_store.keys() == []

    @pytest.mark.asyncio
    async def test_set_page_routes_to_search_when_keyword_active(self, pager, backend):
        await pager.search_for_element("c")
        backend.load.reset_mock()

        await pager.set_page(1)

        backend.search.assert_awaited_with("c", 1, 2)
        backend.load.assert_not_awaited()
        assert pager.elements == []

    @pytest.mark.asyncio
    async def test_empty_keyword_returns_to_browsing(self, pager, backend):
        await pager.search_for_element("c")

        await pager.search_for_element("")

        assert backend.search.await_count == 1
        backend.load.assert_awaited_once()
        assert pager.pager_config.filters.keyword == ""
        assert _tags(pager.elements) == ["a", "b"]

    @pytest.mark.asyncio
    async def test_failure_keeps_page(self, pager, backend):
        backend.search.side_effect = TimeoutError()

        await pager.search_for_element("c")

        assert pager.pager_config.current_page == 0
        assert pager.is_loading is False
        assert pager.state.loaded is True
        assert pager.elements == []

    @pytest.mark.asyncio
    async def test_search_runs_one_at_a_time(self, pager, backend):
        in_flight = 0
        peak = 0

        async def slow_search(keyword, page, limit):
            nonlocal in_flight, peak
            in_flight += 1
            peak = max(peak, in_flight)
            await asyncio.sleep(0.01)
            in_flight -= 1
            return [], 0

        backend.search.side_effect = slow_search

        await asyncio.gather(pager.orchestrator.search("a"), pager.orchestrator.search("a"))

        assert backend.search.await_count == 2
        assert peak == 1


class TestAddWorkflow:
    @pytest.mark.asyncio
    async def test_add_repaginates_and_invalidates_later_pages(
        self, pager, backend, page_cache, make_element
    ):
        await pager.set_page(1)
        await pager.set_page(0)

        await pager.add_element(make_element("aa"))

        assert _tags(pager.elements) == ["a", "aa"]
        assert _tags(pager.state.find_page(1).elements) == ["b", "c"]
        assert pager.total_elements == 6
        assert pager.is_loading is False
        # Page 1 shifted and was dropped from the cache; page 0 is kept
        assert page_cache.get(1, 2) is None
        assert page_cache.get(0, 2) is not None
        assert backend.load.await_count == 2

    @pytest.mark.asyncio
    async def test_add_marks_state_loading_before_reload(self, pager, make_element):
        await pager.set_page(0)
        seen = []
        pager.subscribe(lambda state: seen.append((state.total_elements, state.loading)))

        await pager.add_element(make_element("aa"))

        assert seen[0] == (6, False)
        assert seen[1] == (6, True)
        assert seen[-1] == (6, False)

    @pytest.mark.asyncio
    async def test_load_started_before_mutation_does_not_write_cache(
        self, session_store, notifier, catalog, make_element
    ):
        gate = asyncio.Event()
        entered = asyncio.Event()
        calls = []

        async def load(config):
            calls.append(config.current_page)
            if len(calls) == 2:
                entered.set()
                await gate.wait()
            start = config.current_page * 2
            return catalog[start : start + 2], len(catalog)

        backend = FunctionBackend(
            load_func=load,
            search_func=lambda keyword, page, limit: ([], 0),
            delete_func=lambda element_id, config: None,
        )
        pager = create_pager(
            "IMAGE_META", backend, cache_store=session_store, notifier=notifier, limit=2
        )
        await pager.set_page(0)

        loading = asyncio.create_task(pager.set_page(1))
        await entered.wait()
        adding = asyncio.create_task(pager.add_element(make_element("aa")))
        while pager.total_elements != 6:
            await asyncio.sleep(0)
        gate.set()
        await asyncio.gather(loading, adding)

        # The in-flight page 1 was not cached, so the forced reload fetched it again
        assert calls == [0, 1, 1]
        assert pager.is_loading is False


class TestDeleteWorkflow:
    @pytest.mark.asyncio
    async def test_delete_success(self, pager, backend, notifier):
        await pager.set_page(0)
        target = pager.elements[0]

        await pager.delete_element(target)

        backend.delete.assert_awaited_once_with("id-a", pager.pager_config)
        assert notifier.notifications == [(NotificationKind.INFO, "Bye", "Deleted successfully!")]
        assert _tags(pager.elements) == ["b"]
        assert pager.total_elements == 4
        assert pager.is_loading is False

    @pytest.mark.asyncio
    async def test_delete_invalidates_later_pages(self, pager, page_cache):
        await pager.set_page(2)
        await pager.set_page(1)

        await pager.delete_element(pager.elements[0])

        assert page_cache.get(2, 2) is None
        assert page_cache.get(1, 2) is not None
        assert _tags(pager.elements) == ["d", "e"]
        assert pager.state.find_page(2).elements == []

    @pytest.mark.asyncio
    async def test_delete_failure(self, pager, backend, notifier, page_cache):
        await pager.set_page(0)
        page_cache.put(1, 2, [])
        backend.delete.side_effect = PermissionError("forbidden")

        await pager.delete_element(pager.elements[0])

        assert len(notifier.notifications) == 1
        kind, title, message = notifier.notifications[0]
        assert kind is NotificationKind.ERROR
        assert title == "Delete failed"
        assert "forbidden" in message
        assert _tags(pager.elements) == ["a", "b"]
        assert pager.total_elements == 5
        assert pager.is_loading is False
        assert backend.load.await_count == 1
        assert page_cache.get(1, 2) == []

    @pytest.mark.asyncio
    async def test_delete_failing_with_another_contract_error(self, pager, backend, notifier):
        await pager.set_page(0)
        backend.delete.side_effect = LoadError(subject="other")

        await pager.delete_element(pager.elements[0])

        kind, title, message = notifier.notifications[0]
        assert kind is NotificationKind.ERROR
        assert title == "Delete failed"
        assert "Load failed for 'other'" in message
        assert _tags(pager.elements) == ["a", "b"]
        assert pager.total_elements == 5
        assert pager.is_loading is False

    @pytest.mark.asyncio
    async def test_delete_uses_identity_key(self, session_store, notifier):
        deleted = []
        backend = FunctionBackend(
            load_func=lambda config: ([{"uuid": "u1", "tag": "a"}], 1),
            search_func=lambda keyword, page, limit: ([], 0),
            delete_func=lambda element_id, config: deleted.append(element_id),
        )
        pager = create_pager(
            "IDS", backend, cache_store=session_store, notifier=notifier, identity_key="uuid"
        )
        await pager.set_page(0)

        await pager.delete_element(pager.elements[0])

        assert deleted == ["u1"]
        assert pager.elements == []
        assert pager.total_elements == 0

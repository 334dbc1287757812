import asyncio
from collections import defaultdict
from collections.abc import Awaitable, Callable
from typing import Any

from ._logging import logger, redact_keyword
from .actions import (
    AddElement,
    DeleteElement,
    DeleteElementFail,
    DeleteElementSuccess,
    LoadPage,
    LoadPageFail,
    LoadPageSuccess,
    SearchForElement,
    SearchForElementFail,
    SearchForElementSuccess,
    SetConfig,
    SetPage,
    SetSearchKeyword,
)
from .cache import PageCache
from .config import PagerOptions
from .contracts import NotificationKind, Notifier, PagerBackend, resolve
from .exceptions import DeleteError, LoadError, SearchError, handle_contract_errors
from .models import ElementsPage, PagerConfig
from .pagination import PageResult
from .store import PagerStore


class PagerOrchestrator:
    """
    Sequences cache lookups, backend calls and state transitions for one pager.

    Every command runs its workflow as a spawned task and awaits it. A lock per
    workflow kind keeps at most one task of each kind outstanding; a second
    request of the same kind waits for the first and then runs (no deduplication).
    Backend failures never escape: they become *Fail transitions.
    """

    def __init__(
        self,
        options: PagerOptions,
        store: PagerStore,
        backend: PagerBackend,
        cache: PageCache,
        notifier: Notifier,
    ):
        self.options = options
        self.store = store
        self.backend = backend
        self.cache = cache
        self.notifier = notifier

        self._workflow_locks: defaultdict[str, asyncio.Lock] = defaultdict(asyncio.Lock)
        self._cache_lock = asyncio.Lock()
        # Bumped on every local mutation; loads started earlier skip their cache write
        self._cache_generation = 0

    @property
    def subject(self) -> str:
        return self.options.subject

    async def _spawn(self, kind: str, workflow: Callable[[], Awaitable[None]]) -> None:
        async with self._workflow_locks[kind]:
            task = asyncio.create_task(workflow(), name=f"{self.subject}:{kind}")
            await task

    # --- COMMANDS ---

    async def set_page(self, page: int, id: str | None = None) -> None:
        """
        Moves to a page and loads it, through search when a keyword is active.

        Raises:
            ValueError: If page is negative
        """
        if page < 0:
            raise ValueError(f"page must be >= 0, got {page}")
        self.store.dispatch(SetPage(page=page, id=id))

        keyword = self.store.state.config.filters.keyword
        if keyword:
            await self.search(keyword)
        else:
            await self.load()

    def set_pager_config(self, config: PagerConfig) -> None:
        self.store.dispatch(SetConfig(config=config))

    async def set_search_keyword(self, keyword: str | None) -> None:
        """Starts a new search; an empty keyword returns to browsing from page 0."""
        self.store.dispatch(SetSearchKeyword(keyword=keyword))

        if keyword:
            await self.search(keyword)
        else:
            await self.load()

    async def add_element(self, element: Any) -> None:
        """
        Inserts an element locally, then forces a reload.

        The repaginated pages are provisional until the reload completes; the
        reload marks the state as loading right away.
        """
        async with self._cache_lock:
            self.store.dispatch(AddElement(element=element))
            self._invalidate_after_mutation()

        logger.info(
            "Element added",
            extra={"subject": self.subject, "operation": "add_element"},
        )
        await self.load()

    async def delete_element(self, element: Any) -> None:
        await self._spawn("delete", lambda: self._delete_workflow(element))

    async def load(self) -> None:
        await self._spawn("load", self._load_workflow)

    async def search(self, keyword: str) -> None:
        await self._spawn("search", lambda: self._search_workflow(keyword))

    # --- WORKFLOWS ---

    async def _load_workflow(self) -> None:
        self.store.dispatch(LoadPage())
        config = self.store.state.config
        page, limit = config.current_page, config.filters.limit

        async with self._cache_lock:
            cached_elements = self.cache.get(page, limit)
            cached_total = self.cache.get_total()
            generation = self._cache_generation

        if cached_elements is not None:
            total = cached_total if cached_total is not None else self.store.state.total_elements
            logger.debug(
                "Serving page from cache",
                extra={"subject": self.subject, "operation": "load", "page": page, "limit": limit},
            )
            self.store.dispatch(
                LoadPageSuccess(
                    pages=[ElementsPage(page=page, elements=cached_elements)],
                    total_elements=total,
                )
            )
            return

        logger.info(
            "Loading page",
            extra={"subject": self.subject, "operation": "load", "page": page, "limit": limit},
        )
        try:
            with handle_contract_errors(LoadError, subject=self.subject):
                result = PageResult.coerce(await resolve(self.backend.load(config)))
        except LoadError as e:
            logger.error(
                "Load failed",
                extra={"subject": self.subject, "operation": "load", "page": page},
                exc_info=e.original_error,
            )
            self.store.dispatch(LoadPageFail(error=e))
            return

        async with self._cache_lock:
            if generation == self._cache_generation:
                self.cache.put(page, limit, result.elements)
                if cached_total != result.total_elements:
                    self.cache.put_total(result.total_elements)
            else:
                logger.debug(
                    "Skipping cache write of a page loaded before a mutation",
                    extra={"subject": self.subject, "operation": "load", "page": page},
                )

        logger.info(
            "Page loaded",
            extra={
                "subject": self.subject,
                "operation": "load",
                "page": page,
                "count": result.count,
            },
        )
        self.store.dispatch(
            LoadPageSuccess(
                pages=[ElementsPage(page=page, elements=result.elements)],
                total_elements=result.total_elements,
            )
        )

    async def _search_workflow(self, keyword: str) -> None:
        self.store.dispatch(SearchForElement(keyword=keyword))
        config = self.store.state.config
        page, limit = config.current_page, config.filters.limit

        logger.info(
            "Searching",
            extra={
                "subject": self.subject,
                "operation": "search",
                "page": page,
                "limit": limit,
                "keyword_hash": redact_keyword(keyword),
            },
        )
        try:
            with handle_contract_errors(SearchError, subject=self.subject):
                result = PageResult.coerce(await resolve(self.backend.search(keyword, page, limit)))
        except SearchError as e:
            logger.error(
                "Search failed",
                extra={"subject": self.subject, "operation": "search", "page": page},
                exc_info=e.original_error,
            )
            self.store.dispatch(SearchForElementFail(error=e))
            return

        self.store.dispatch(
            SearchForElementSuccess(
                pages=[ElementsPage(page=page, elements=result.elements)],
                total_elements=result.total_elements,
            )
        )

    async def _delete_workflow(self, element: Any) -> None:
        self.store.dispatch(DeleteElement(element=element))
        config = self.store.state.config
        element_id = self.options.element_id(element)

        logger.info(
            "Deleting element",
            extra={"subject": self.subject, "operation": "delete", "page": config.current_page},
        )
        try:
            with handle_contract_errors(DeleteError, subject=self.subject):
                await resolve(self.backend.delete(element_id, config))
        except DeleteError as e:
            logger.error(
                "Delete failed",
                extra={"subject": self.subject, "operation": "delete"},
                exc_info=e.original_error,
            )
            self.store.dispatch(DeleteElementFail(error=e))
            self.notifier.notify(NotificationKind.ERROR, "Delete failed", e.message)
            return

        self.notifier.notify(NotificationKind.INFO, "Bye", "Deleted successfully!")
        async with self._cache_lock:
            self.store.dispatch(DeleteElementSuccess(element=element))
            self._invalidate_after_mutation()

        logger.info("Delete successful", extra={"subject": self.subject, "operation": "delete"})
        await self.load()

    def _invalidate_after_mutation(self) -> None:
        # Caller holds the cache lock
        self._cache_generation += 1
        self.cache.invalidate_above(self.store.state.config.current_page)

from collections.abc import Callable, Mapping
from typing import Any

from .cache import MemorySessionStore, PageCache, SessionStore
from .config import PagerOptions
from .contracts import LoggingNotifier, Notifier, PagerBackend
from .models import PagerConfig, PagerList
from .orchestrator import PagerOrchestrator
from .query import PagerQuery
from .state import PagerReducer, initial_state
from .store import PagerStore, Subscriber


class Pager:
    """
    Consumer-facing handle of one pager instance.

    Commands go to the orchestrator; projections are computed from the
    current state on every access.

    Usage:
        pager = create_pager("IMAGE_META", backend, cache_store=session_store)
        await pager.set_page(0)
        pager.elements          # elements of page 0
        await pager.search_for_element("cat")
        await pager.delete_element(pager.elements[0])
    """

    def __init__(self, options: PagerOptions, store: PagerStore, orchestrator: PagerOrchestrator):
        self.options = options
        self.store = store
        self.orchestrator = orchestrator

    @property
    def subject(self) -> str:
        return self.options.subject

    @property
    def state(self) -> PagerList:
        return self.store.state

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        return self.store.subscribe(callback)

    # --- COMMANDS ---

    async def set_page(self, page: int, id: str | None = None) -> None:
        await self.orchestrator.set_page(page, id)

    def set_pager_config(self, config: PagerConfig | Mapping[str, Any]) -> None:
        if not isinstance(config, PagerConfig):
            config = PagerConfig.model_validate(config)
        self.orchestrator.set_pager_config(config)

    async def search_for_element(self, keyword: str | None) -> None:
        await self.orchestrator.set_search_keyword(keyword)

    async def add_element(self, element: Any) -> None:
        await self.orchestrator.add_element(element)

    async def delete_element(self, element: Any) -> None:
        await self.orchestrator.delete_element(element)

    # --- PROJECTIONS ---

    @property
    def elements(self) -> list[Any]:
        return PagerQuery.elements(self.state)

    @property
    def pager_config(self) -> PagerConfig:
        return PagerQuery.pager_config(self.state)

    @property
    def is_loading(self) -> bool:
        return PagerQuery.is_loading(self.state)

    @property
    def total_elements(self) -> int:
        return PagerQuery.total_elements(self.state)

    @property
    def total_pages(self) -> int:
        return PagerQuery.total_pages(self.state)

    @property
    def page_numbers(self) -> list[int]:
        return PagerQuery.page_numbers(self.state)


def create_pager(
    subject: str,
    backend: PagerBackend,
    *,
    cache_store: SessionStore | None = None,
    notifier: Notifier | None = None,
    limit: int = 12,
    sort_key: str | Callable[[Any], Any] = "tag",
    identity_key: str = "id",
    element_type: type | None = None,
) -> Pager:
    """
    Builds a pager bound to one subject.

    Args:
        subject: Unique name of this pager; namespaces its cache keys
        backend: The load/search/delete functions
        cache_store: Session store shared by every pager of the process.
                     Defaults to a private MemorySessionStore.
        notifier: Receives delete notifications. Defaults to LoggingNotifier.
        limit: Page size
        sort_key: Field name or key function ordering elements after an insert
        identity_key: Field identifying an element for delete
        element_type: Optional element type used to validate cached entries

    Raises:
        PagerConfigurationError: If the options are invalid
    """
    options = PagerOptions(
        subject=subject,
        limit=limit,
        sort_key=sort_key,
        identity_key=identity_key,
        element_type=element_type,
    )
    reducer = PagerReducer(options)
    store = PagerStore(reducer, initial_state(limit))
    cache = PageCache(options, cache_store if cache_store is not None else MemorySessionStore())
    orchestrator = PagerOrchestrator(
        options,
        store,
        backend,
        cache,
        notifier if notifier is not None else LoggingNotifier(),
    )
    return Pager(options, store, orchestrator)

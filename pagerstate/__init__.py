from .actions import (
    AddElement,
    DeleteElement,
    DeleteElementFail,
    DeleteElementSuccess,
    LoadPage,
    LoadPageFail,
    LoadPageSuccess,
    PagerAction,
    SearchForElement,
    SearchForElementFail,
    SearchForElementSuccess,
    SetConfig,
    SetPage,
    SetSearchKeyword,
)
from .cache import MemorySessionStore, PageCache, SessionStore
from .config import PagerOptions
from .contracts import FunctionBackend, LoggingNotifier, NotificationKind, Notifier, PagerBackend
from .dynamo_store import DynamoSessionStore
from .exceptions import (
    CacheStoreError,
    ContractError,
    DeleteError,
    LoadError,
    PagerConfigurationError,
    PagerError,
    SearchError,
)
from .models import ElementsPage, Filters, PagerConfig, PagerList
from .orchestrator import PagerOrchestrator
from .pager import Pager, create_pager
from .pagination import PageResult, flatten_pages, repaginate
from .query import PagerQuery
from .state import PagerReducer, initial_state
from .store import PagerStore

__all__ = [
    "create_pager",
    "Pager",
    "PagerOptions",
    # State
    "PagerList",
    "PagerConfig",
    "Filters",
    "ElementsPage",
    "PagerReducer",
    "PagerStore",
    "PagerQuery",
    "PagerOrchestrator",
    "initial_state",
    # Actions
    "PagerAction",
    "SetPage",
    "SetConfig",
    "LoadPage",
    "LoadPageSuccess",
    "LoadPageFail",
    "SetSearchKeyword",
    "SearchForElement",
    "SearchForElementSuccess",
    "SearchForElementFail",
    "AddElement",
    "DeleteElement",
    "DeleteElementSuccess",
    "DeleteElementFail",
    # Pagination
    "PageResult",
    "flatten_pages",
    "repaginate",
    # Cache
    "PageCache",
    "SessionStore",
    "MemorySessionStore",
    "DynamoSessionStore",
    # Contracts
    "PagerBackend",
    "FunctionBackend",
    "Notifier",
    "NotificationKind",
    "LoggingNotifier",
    # Exceptions
    "PagerError",
    "PagerConfigurationError",
    "ContractError",
    "LoadError",
    "SearchError",
    "DeleteError",
    "CacheStoreError",
]

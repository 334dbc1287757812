import threading
from collections.abc import Iterable
from typing import Any, Protocol, runtime_checkable

from ._logging import logger
from .config import PagerOptions
from .exceptions import CacheStoreError
from .serializer import CacheSerializer


@runtime_checkable
class SessionStore(Protocol):
    """
    String key-value store whose lifetime is tied to one browsing session.

    Implementations raise CacheStoreError when the backend is unavailable.
    """

    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...

    def keys(self) -> Iterable[str]: ...


class MemorySessionStore:
    """In-process session store. Construct once per process and pass it to every pager."""

    def __init__(self) -> None:
        self._items: dict[str, str] = {}
        self._lock = threading.Lock()

    def get_item(self, key: str) -> str | None:
        with self._lock:
            return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        with self._lock:
            self._items[key] = value

    def remove_item(self, key: str) -> None:
        with self._lock:
            self._items.pop(key, None)

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._items)

    def clear(self) -> None:
        with self._lock:
            self._items.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)


class PageCache:
    """
    Session cache of fetched pages for one subject.

    Pages are keyed by (subject, page, limit); the last known total count lives
    under "{subject}_TOTAL_EL". Every store failure and every corrupt entry is
    treated as a miss: the cache never fails the workflow that consults it.
    """

    def __init__(
        self,
        options: PagerOptions,
        store: SessionStore,
        serializer: CacheSerializer | None = None,
    ):
        self.options = options
        self.store = store
        self.serializer = serializer or CacheSerializer(options.element_type)

    def get(self, page: int, limit: int) -> list[Any] | None:
        key = self.options.page_key(page, limit)
        try:
            raw = self.store.get_item(key)
        except CacheStoreError as e:
            self._fail_open("get", e)
            return None

        elements = self.serializer.load_elements(raw)
        if raw is not None and elements is None:
            logger.warning(
                "Discarding malformed cache entry",
                extra={"subject": self.options.subject, "operation": "get", "page": page},
            )
        logger.debug(
            "Cache hit" if elements is not None else "Cache miss",
            extra={"subject": self.options.subject, "page": page, "limit": limit},
        )
        return elements

    def get_total(self) -> int | None:
        try:
            raw = self.store.get_item(self.options.total_key)
        except CacheStoreError as e:
            self._fail_open("get_total", e)
            return None
        return self.serializer.load_total(raw)

    def put(self, page: int, limit: int, elements: list[Any]) -> None:
        """Overwrites the entry of a page; no merge with what was stored."""
        key = self.options.page_key(page, limit)
        try:
            payload = self.serializer.dump_elements(elements)
        except (TypeError, ValueError) as e:
            # pydantic_core.PydanticSerializationError is a ValueError subclass
            self._skip_write("put", page, e)
            return
        try:
            self.store.set_item(key, payload)
        except CacheStoreError as e:
            self._fail_open("put", e)

    def put_total(self, total: int) -> None:
        try:
            payload = self.serializer.dump_total(total)
        except (TypeError, ValueError) as e:
            self._skip_write("put_total", None, e)
            return
        try:
            self.store.set_item(self.options.total_key, payload)
        except CacheStoreError as e:
            self._fail_open("put_total", e)

    def invalidate_above(self, page_threshold: int) -> int:
        """
        Removes every stored page of this subject whose page number is strictly
        greater than page_threshold.

        An insert or delete shifts the membership of every later page, so those
        entries no longer match the backend. Pages at or below the threshold keep
        the prior ordering and stay.

        Returns:
            Number of removed entries
        """
        removed = 0
        try:
            keys = list(self.store.keys())
            for key in keys:
                page = self.options.parse_page_key(key)
                if page is not None and page > page_threshold:
                    self.store.remove_item(key)
                    removed += 1
        except CacheStoreError as e:
            self._fail_open("invalidate_above", e)

        logger.info(
            "Cache invalidated",
            extra={
                "subject": self.options.subject,
                "operation": "invalidate_above",
                "page": page_threshold,
                "removed": removed,
            },
        )
        return removed

    def _fail_open(self, operation: str, error: CacheStoreError) -> None:
        logger.warning(
            "Session store unavailable, continuing without cache",
            extra={"subject": self.options.subject, "operation": operation, "error": error.message},
        )

    def _skip_write(self, operation: str, page: int | None, error: Exception) -> None:
        logger.warning(
            "Cannot serialize cache entry, skipping write",
            extra={
                "subject": self.options.subject,
                "operation": operation,
                "page": page,
                "error": str(error),
            },
        )

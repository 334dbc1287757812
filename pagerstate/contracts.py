"""
Contracts between a pager and the code that embeds it.

The backend supplies three functions (load, search, delete); the notifier
receives user-facing messages about deletes. Both are injected at
construction, no subclassing required.
"""

import inspect
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol, TypeVar, runtime_checkable

from ._logging import logger
from .models import PagerConfig

R = TypeVar("R")


@runtime_checkable
class PagerBackend(Protocol):
    """
    Remote source of truth for one pager.

    load/search return a PageResult or an (elements, total_elements) pair.
    Any method may be a coroutine function.
    """

    def load(self, config: PagerConfig) -> Any: ...

    def search(self, keyword: str, page: int, limit: int) -> Any: ...

    def delete(self, element_id: Any, config: PagerConfig) -> Any: ...


@dataclass
class FunctionBackend:
    """
    Builds a PagerBackend from three plain callables.

    Usage:
        backend = FunctionBackend(
            load=lambda config: api.list_images(config.current_page, config.filters.limit),
            search=api.search_images,
            delete=lambda element_id, config: api.delete_image(element_id),
        )
    """

    load_func: Callable[[PagerConfig], Any]
    search_func: Callable[[str, int, int], Any]
    delete_func: Callable[[Any, PagerConfig], Any]

    def load(self, config: PagerConfig) -> Any:
        return self.load_func(config)

    def search(self, keyword: str, page: int, limit: int) -> Any:
        return self.search_func(keyword, page, limit)

    def delete(self, element_id: Any, config: PagerConfig) -> Any:
        return self.delete_func(element_id, config)


async def resolve(value: R | Awaitable[R]) -> R:
    """Awaits the result of a contract call if it is awaitable."""
    if inspect.isawaitable(value):
        return await value
    return value


class NotificationKind(str, Enum):
    INFO = "info"
    ERROR = "error"


@runtime_checkable
class Notifier(Protocol):
    def notify(self, kind: NotificationKind, title: str, message: str) -> None: ...


class LoggingNotifier:
    """Default notifier: writes notifications to the library logger."""

    def notify(self, kind: NotificationKind, title: str, message: str) -> None:
        level = logger.error if kind is NotificationKind.ERROR else logger.info
        level(f"{title}: {message}", extra={"operation": "notify", "kind": kind.value})

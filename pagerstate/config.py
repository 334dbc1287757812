from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from .exceptions import PagerConfigurationError

TOTAL_SUFFIX = "TOTAL_EL"


def read_field(element: Any, name: str) -> Any:
    """Reads a field from a mapping element by key or from an object by attribute."""
    if isinstance(element, dict):
        return element.get(name)
    return getattr(element, name, None)


@dataclass
class PagerOptions:
    """
    Per-subject configuration for one pager instance.

    The subject namespaces both the state and the session cache keys,
    so two pagers sharing a store never read each other's pages.
    """

    subject: str
    limit: int = 12
    sort_key: str | Callable[[Any], Any] = "tag"
    identity_key: str = "id"
    element_type: type | None = None

    def __post_init__(self) -> None:
        if not self.subject:
            raise PagerConfigurationError("Pager subject must be a non-empty string")
        if TOTAL_SUFFIX in self.subject:
            raise PagerConfigurationError(
                f"Pager subject '{self.subject}' must not contain '{TOTAL_SUFFIX}'"
            )
        if self.limit <= 0:
            raise PagerConfigurationError(f"Page limit must be positive, got {self.limit}")

    @property
    def total_key(self) -> str:
        """Session store key holding the last known total count."""
        return f"{self.subject}_{TOTAL_SUFFIX}"

    def page_key(self, page: int, limit: int) -> str:
        """
        Get the session store key of a page using the page number, limit and subject.

        Args:
            page: Zero-based page number
            limit: Page size the page was fetched with

        Returns:
            A key of the form "{subject}_{page}_{limit}"
        """
        return f"{self.subject}_{page}_{limit}"

    def parse_page_key(self, key: str) -> int | None:
        """
        Returns the page number encoded in a page key of this subject.

        Keys of other subjects, the total key and anything malformed return None.
        """
        prefix = f"{self.subject}_"
        if not key.startswith(prefix):
            return None
        parts = key[len(prefix) :].split("_")
        if len(parts) != 2:
            return None
        try:
            page, _limit = int(parts[0]), int(parts[1])
        except ValueError:
            return None
        return page

    def element_id(self, element: Any) -> Any:
        return read_field(element, self.identity_key)

    def sort_value(self, element: Any) -> tuple[bool, Any]:
        """
        Ordering key used before repagination.
        Elements without a value sort last instead of failing the comparison.
        """
        if callable(self.sort_key):
            value = self.sort_key(element)
        else:
            value = read_field(element, self.sort_key)
        return (value is None, value)

"""
Pagination support for pagerstate.

This module provides the page-splitting algorithm used after a local insert
or delete, and the result type returned by caller-supplied load/search functions.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from .models import ElementsPage

T = TypeVar("T")


@dataclass
class PageResult(Generic[T]):
    """
    Represents one page of elements returned by a load or search function.

    Attributes:
        elements: Elements of the requested page
        total_elements: Total number of elements across all pages
    """

    elements: list[T]
    total_elements: int
    count: int = field(init=False)

    def __post_init__(self) -> None:
        self.count = len(self.elements)

    @classmethod
    def coerce(cls, response: Any) -> "PageResult[Any]":
        """
        Accepts a PageResult or an (elements, total_elements) pair.

        Raises:
            TypeError: If the response has any other shape
        """
        if isinstance(response, PageResult):
            return response
        if isinstance(response, tuple) and len(response) == 2:
            elements, total = response
            if isinstance(total, int) and not isinstance(total, bool) and total >= 0:
                return cls(elements=list(elements), total_elements=total)
        raise TypeError(
            f"Expected PageResult or (elements, total_elements), got {type(response).__name__}"
        )


def flatten_pages(pages: Iterable[ElementsPage]) -> list[Any]:
    """Concatenates the elements of all pages in increasing page-number order."""
    flat: list[Any] = []
    for page in sorted(pages, key=lambda p: p.page):
        flat.extend(page.elements)
    return flat


def repaginate(
    elements: Sequence[Any], reference_pages: Iterable[ElementsPage], limit: int
) -> list[ElementsPage]:
    """
    Split a flat sequence back into pages given the original pages as reference.

    Page numbers are kept; only the membership of each page changes. When there
    are fewer than len(reference_pages) * limit elements, the last pages come out
    short or empty and are refilled by the next reload.

    Args:
        elements: Ordered elements to distribute
        reference_pages: The original pages
        limit: Page size

    Returns:
        The new pages, sorted by page number
    """
    if limit <= 0:
        raise ValueError(f"limit must be positive, got {limit}")

    new_pages: list[ElementsPage] = []
    offset = 0
    for reference in sorted(reference_pages, key=lambda p: p.page):
        new_pages.append(
            ElementsPage(page=reference.page, elements=list(elements[offset : offset + limit]))
        )
        offset += limit
    return new_pages

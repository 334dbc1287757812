import math
from typing import Any

from .models import PagerConfig, PagerList


class PagerQuery:
    """Read-only projections over a PagerList."""

    @staticmethod
    def elements(state: PagerList) -> list[Any]:
        """Elements of the current page, or an empty list if it is not loaded."""
        page = state.find_page(state.config.current_page)
        return list(page.elements) if page is not None else []

    @staticmethod
    def pager_config(state: PagerList) -> PagerConfig:
        return state.config

    @staticmethod
    def is_loading(state: PagerList) -> bool:
        return state.loading

    @staticmethod
    def total_elements(state: PagerList) -> int:
        return state.total_elements

    @staticmethod
    def total_pages(state: PagerList) -> int:
        return math.ceil(state.total_elements / state.config.filters.limit)

    @classmethod
    def page_numbers(cls, state: PagerList) -> list[int]:
        """One-based page numbers for rendering a page selector."""
        return list(range(1, cls.total_pages(state) + 1))

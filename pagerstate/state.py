from collections.abc import Callable
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
    PagerAction,
    SearchForElement,
    SearchForElementFail,
    SearchForElementSuccess,
    SetConfig,
    SetPage,
    SetSearchKeyword,
)
from .config import PagerOptions
from .models import Filters, PagerConfig, PagerList
from .pagination import flatten_pages, repaginate


def initial_state(limit: int = 12) -> PagerList:
    """Returns the state a pager starts a session with: page 0, no pages, nothing loaded."""
    return PagerList(config=PagerConfig(current_page=0, filters=Filters(limit=limit)))


class PagerReducer:
    """
    Pure transitions of the pager state machine.

    One reducer is bound to one subject (through its options). It performs no
    I/O: cache invalidation after add/delete is the orchestrator's job.
    """

    def __init__(self, options: PagerOptions):
        self.options = options
        self._handlers: dict[type[PagerAction], Callable[[PagerList, Any], PagerList]] = {
            SetPage: self.set_page,
            SetConfig: self.set_config,
            LoadPage: self.begin_loading,
            LoadPageSuccess: self.load_page_success,
            LoadPageFail: self.load_page_fail,
            SetSearchKeyword: self.set_search_keyword,
            SearchForElement: self.begin_loading,
            SearchForElementSuccess: self.search_for_element_success,
            SearchForElementFail: self.search_for_element_fail,
            AddElement: self.add_element,
            DeleteElement: self.begin_loading,
            DeleteElementSuccess: self.delete_element_success,
            DeleteElementFail: self.delete_element_fail,
        }

    def reduce(self, state: PagerList, action: PagerAction) -> PagerList:
        """Applies one action and returns the new state."""
        handler = self._handlers.get(type(action))
        if handler is None:
            raise TypeError(f"Unknown pager action {type(action).__name__}")

        logger.debug(
            "Applying transition",
            extra={"subject": self.options.subject, "operation": action.name},
        )
        return handler(state, action)

    # --- CONFIGURATION ---

    def set_page(self, state: PagerList, action: SetPage) -> PagerList:
        filters = state.config.filters.model_copy(update={"id": action.id})
        config = state.config.model_copy(update={"current_page": action.page, "filters": filters})
        return state.model_copy(update={"config": config})

    def set_config(self, state: PagerList, action: SetConfig) -> PagerList:
        return state.model_copy(update={"config": action.config})

    def set_search_keyword(self, state: PagerList, action: SetSearchKeyword) -> PagerList:
        # Search results are a different element universe than browse results
        filters = state.config.filters.model_copy(update={"keyword": action.keyword})
        config = state.config.model_copy(update={"current_page": 0, "filters": filters})

        logger.debug(
            "Search keyword set",
            extra={
                "subject": self.options.subject,
                "operation": "set_search_keyword",
                "keyword_hash": redact_keyword(action.keyword),
            },
        )
        return state.model_copy(update={"pages": [], "config": config})

    # --- LOAD / SEARCH ---

    def begin_loading(self, state: PagerList, action: PagerAction) -> PagerList:
        return state.model_copy(update={"loading": True})

    def load_page_success(self, state: PagerList, action: LoadPageSuccess) -> PagerList:
        return self._receive_pages(state, action.pages, action.total_elements)

    def load_page_fail(self, state: PagerList, action: LoadPageFail) -> PagerList:
        # Fall back to the last known-good page
        previous = max(state.config.current_page - 1, 0)
        config = state.config.model_copy(update={"current_page": previous})
        return state.model_copy(update={"config": config, "loading": False, "loaded": True})

    def search_for_element_success(
        self, state: PagerList, action: SearchForElementSuccess
    ) -> PagerList:
        return self._receive_pages(state, action.pages, action.total_elements)

    def search_for_element_fail(self, state: PagerList, action: SearchForElementFail) -> PagerList:
        return state.model_copy(update={"loading": False, "loaded": True})

    def _receive_pages(self, state: PagerList, pages: list, total_elements: int) -> PagerList:
        # Repeated success signals for the current page must not duplicate it
        if state.find_page(state.config.current_page) is not None:
            return state.model_copy(update={"loading": False, "loaded": True})

        known = {p.page for p in state.pages}
        new_pages = [p for p in pages if p.page not in known]
        return state.model_copy(
            update={
                "pages": [*state.pages, *new_pages],
                "total_elements": max(total_elements, 0),
                "loading": False,
                "loaded": True,
            }
        )

    # --- MUTATIONS ---

    def add_element(self, state: PagerList, action: AddElement) -> PagerList:
        elements = flatten_pages(state.pages)
        elements.append(action.element)
        elements.sort(key=self.options.sort_value)

        pages = repaginate(elements, state.pages, state.config.filters.limit)
        return state.model_copy(
            update={"pages": pages, "total_elements": state.total_elements + 1}
        )

    def delete_element_success(self, state: PagerList, action: DeleteElementSuccess) -> PagerList:
        elements = flatten_pages(state.pages)
        target = self.options.element_id(action.element)
        index = next(
            (i for i, el in enumerate(elements) if self.options.element_id(el) == target), None
        )
        if index is not None:
            del elements[index]
        else:
            logger.warning(
                "Deleted element not found in local pages",
                extra={"subject": self.options.subject, "operation": "delete_element_success"},
            )

        total = state.total_elements - 1
        if total < 0:
            logger.warning(
                "Total element count would go negative, keeping 0",
                extra={"subject": self.options.subject, "operation": "delete_element_success"},
            )
            total = 0

        pages = repaginate(elements, state.pages, state.config.filters.limit)
        return state.model_copy(update={"pages": pages, "total_elements": total, "loading": False})

    def delete_element_fail(self, state: PagerList, action: DeleteElementFail) -> PagerList:
        return state.model_copy(update={"loading": False})

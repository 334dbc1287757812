"""
Transition events of the pager state machine.

Each action is an immutable record; PagerReducer maps every action type
to exactly one pure transition.
"""

from dataclasses import dataclass
from typing import Any

from .models import ElementsPage, PagerConfig


@dataclass(frozen=True)
class PagerAction:
    """Base class for all pager actions."""

    @property
    def name(self) -> str:
        return type(self).__name__


@dataclass(frozen=True)
class SetPage(PagerAction):
    page: int
    id: str | None = None


@dataclass(frozen=True)
class SetConfig(PagerAction):
    config: PagerConfig


@dataclass(frozen=True)
class LoadPage(PagerAction):
    pass


@dataclass(frozen=True)
class LoadPageSuccess(PagerAction):
    pages: list[ElementsPage]
    total_elements: int


@dataclass(frozen=True)
class LoadPageFail(PagerAction):
    error: Exception | None = None


@dataclass(frozen=True)
class SetSearchKeyword(PagerAction):
    keyword: str | None


@dataclass(frozen=True)
class SearchForElement(PagerAction):
    keyword: str


@dataclass(frozen=True)
class SearchForElementSuccess(PagerAction):
    pages: list[ElementsPage]
    total_elements: int


@dataclass(frozen=True)
class SearchForElementFail(PagerAction):
    error: Exception | None = None


@dataclass(frozen=True)
class AddElement(PagerAction):
    element: Any


@dataclass(frozen=True)
class DeleteElement(PagerAction):
    element: Any


@dataclass(frozen=True)
class DeleteElementSuccess(PagerAction):
    element: Any


@dataclass(frozen=True)
class DeleteElementFail(PagerAction):
    error: Exception | None = None

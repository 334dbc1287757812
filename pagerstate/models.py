"""
State data model for pagerstate.

All models are frozen: transitions build new instances with model_copy()
instead of mutating the current state.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Filters(BaseModel):
    """Active filters of a pager; part of its fingerprint."""

    model_config = ConfigDict(frozen=True)

    keyword: str | None = None
    limit: int = Field(default=12, gt=0)
    type: str | None = None
    id: str | None = None


class PagerConfig(BaseModel):
    """Current page plus filters. Replaced wholesale by SetConfig."""

    model_config = ConfigDict(frozen=True)

    current_page: int = Field(default=0, ge=0)
    filters: Filters = Field(default_factory=Filters)


class ElementsPage(BaseModel):
    """The elements of one fetched page, labelled with its page number."""

    model_config = ConfigDict(frozen=True)

    page: int
    elements: list[Any] = Field(default_factory=list)


class PagerList(BaseModel):
    """
    Aggregate state of one pager instance.

    Attributes:
        config: Current page and filters
        pages: Fetched pages, at most one per page number
        total_elements: Last authoritative count, adjusted by local add/delete
        loading: True while a workflow is in flight
        loaded: True once any load/search has completed
    """

    model_config = ConfigDict(frozen=True)

    config: PagerConfig = Field(default_factory=PagerConfig)
    pages: list[ElementsPage] = Field(default_factory=list)
    total_elements: int = Field(default=0, ge=0)
    loading: bool = False
    loaded: bool = False

    def find_page(self, page: int) -> ElementsPage | None:
        return next((p for p in self.pages if p.page == page), None)

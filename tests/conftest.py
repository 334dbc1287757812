"""
Shared pytest fixtures and configuration for pagerstate tests.

This module provides common fixtures used across the unit tests,
including an in-memory session store, a mocked backend, a recording
notifier and a mocked boto3 DynamoDB client.
"""

from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from pagerstate import (
    ElementsPage,
    MemorySessionStore,
    NotificationKind,
    PagerOptions,
    PagerReducer,
    create_pager,
    initial_state,
)


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests with mocked dependencies")


def make_element(tag: str, id: str | None = None) -> dict[str, Any]:
    """Element shaped like an image meta record: identified by id, ordered by tag."""
    return {"id": id or f"id-{tag}", "tag": tag}


class RecordingNotifier:
    """Notifier that keeps every notification for assertions."""

    def __init__(self) -> None:
        self.notifications: list[tuple[NotificationKind, str, str]] = []

    def notify(self, kind: NotificationKind, title: str, message: str) -> None:
        self.notifications.append((kind, title, message))


@pytest.fixture
def options() -> PagerOptions:
    return PagerOptions(subject="IMAGE_META", limit=2)


@pytest.fixture
def reducer(options) -> PagerReducer:
    return PagerReducer(options)


@pytest.fixture
def empty_state():
    """Initial state with a page size of 2."""
    return initial_state(limit=2)


@pytest.fixture
def session_store() -> MemorySessionStore:
    return MemorySessionStore()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def catalog() -> list[dict[str, Any]]:
    """Five elements as the backend stores them, already ordered by tag."""
    return [make_element(tag) for tag in ("a", "b", "c", "d", "e")]


@pytest.fixture
def backend(catalog):
    """
    Mocked backend serving `catalog` in pages.

    load/search/delete are AsyncMocks so tests can assert on calls
    and swap in side effects.
    """

    async def load(config):
        limit = config.filters.limit
        start = config.current_page * limit
        return catalog[start : start + limit], len(catalog)

    async def search(keyword, page, limit):
        matches = [el for el in catalog if keyword in el["tag"]]
        return matches[page * limit : (page + 1) * limit], len(matches)

    mock = MagicMock()
    mock.load = AsyncMock(side_effect=load)
    mock.search = AsyncMock(side_effect=search)
    mock.delete = AsyncMock(return_value=None)
    return mock


@pytest.fixture
def pager(backend, session_store, notifier):
    """A pager over the mocked backend with a page size of 2."""
    return create_pager(
        "IMAGE_META", backend, cache_store=session_store, notifier=notifier, limit=2
    )


@pytest.fixture
def loaded_pages() -> list[ElementsPage]:
    return [
        ElementsPage(page=0, elements=[make_element("a"), make_element("b")]),
        ElementsPage(page=1, elements=[make_element("c"), make_element("d")]),
    ]


@pytest.fixture
def mock_client():
    """
    Creates a fully mocked boto3 DynamoDB client.

    This fixture provides a mock client for unit tests that don't need
    real DynamoDB interactions.
    """
    client = MagicMock()
    client.get_paginator.return_value = MagicMock()
    return client


@pytest.fixture(name="make_element")
def make_element_fixture():
    """Factory for test elements: make_element("c") -> {"id": "id-c", "tag": "c"}."""
    return make_element

"""
Image gallery pager example

An in-memory catalog stands in for the remote API; swap the three
functions for real HTTP calls in an application.
"""

import asyncio
import logging

from pagerstate import FunctionBackend, MemorySessionStore, PageResult, create_pager

logging.basicConfig(level=logging.INFO)

CATALOG = [{"id": f"img-{i}", "tag": f"tag-{i:02d}"} for i in range(7)]


async def load(config):
    limit = config.filters.limit
    start = config.current_page * limit
    return PageResult(elements=CATALOG[start : start + limit], total_elements=len(CATALOG))


async def search(keyword, page, limit):
    matches = [img for img in CATALOG if keyword in img["tag"]]
    return matches[page * limit : (page + 1) * limit], len(matches)


async def delete(element_id, config):
    CATALOG[:] = [img for img in CATALOG if img["id"] != element_id]


async def main() -> None:
    # One session store per process, shared by every pager
    session_store = MemorySessionStore()
    gallery = create_pager(
        "IMAGE_META",
        FunctionBackend(load_func=load, search_func=search, delete_func=delete),
        cache_store=session_store,
        limit=3,
    )
    gallery.subscribe(lambda state: print(f"  state: page={state.config.current_page} loading={state.loading}"))

    await gallery.set_page(0)
    print(f"Page 1 of {gallery.total_pages}: {[img['id'] for img in gallery.elements]}")

    # Served from the session cache, no backend call
    await gallery.set_page(1)
    await gallery.set_page(0)

    await gallery.delete_element(gallery.elements[0])
    print(f"After delete: {[img['id'] for img in gallery.elements]} ({gallery.total_elements} total)")

    await gallery.add_element({"id": "img-new", "tag": "tag-00a"})
    print(f"After add: {[img['id'] for img in gallery.elements]} ({gallery.total_elements} total)")

    await gallery.search_for_element("tag-0")
    print(f"Search results: {[img['id'] for img in gallery.elements]}")


if __name__ == "__main__":
    asyncio.run(main())

"""
Sharing a session page cache through DynamoDB

Create the table once (session_id HASH, cache_key RANGE) and enable TTL
on the expires_at attribute.
"""

import asyncio
import uuid

import boto3

from pagerstate import DynamoSessionStore, FunctionBackend, create_pager

client = boto3.client("dynamodb", region_name="eu-south-1")

store = DynamoSessionStore(
    "pager_sessions",
    session_id=str(uuid.uuid4()),
    ttl_seconds=3600,
    client=client,
)

backend = FunctionBackend(
    load_func=lambda config: ([{"id": "1", "tag": "a"}], 1),
    search_func=lambda keyword, page, limit: ([], 0),
    delete_func=lambda element_id, config: None,
)

pager = create_pager("DOCUMENTS", backend, cache_store=store, limit=20)

asyncio.run(pager.set_page(0))
print(f"Loaded {len(pager.elements)} of {pager.total_elements} documents")
print(f"Cached keys: {store.keys()}")

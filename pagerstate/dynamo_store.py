import time
from typing import Any

import boto3

from ._logging import logger
from .exceptions import handle_store_errors


class DynamoSessionStore:
    """
    Session store backed by a DynamoDB table.

    Table layout (one partition per browsing session):
        session_id  (S, HASH)
        cache_key   (S, RANGE)
        payload     (S)
        expires_at  (N, epoch seconds; enable DynamoDB TTL on this attribute)

    Architectural Note:
    -------------------
    DynamoDB TTL deletes expired items lazily (up to days later), so reads also
    check expires_at and report expired items as missing.
    """

    def __init__(
        self,
        table_name: str,
        session_id: str,
        ttl_seconds: int = 86400,
        client: Any | None = None,
    ):
        self.table_name = table_name
        self.session_id = session_id
        self.ttl_seconds = ttl_seconds
        self._client = client

    def _get_client(self) -> Any:
        """Returns the injected client or lazily creates a default boto3 DynamoDB client."""
        if self._client is None:
            self._client = boto3.client("dynamodb")
        return self._client

    def _key(self, key: str) -> dict[str, dict[str, str]]:
        return {"session_id": {"S": self.session_id}, "cache_key": {"S": key}}

    def get_item(self, key: str) -> str | None:
        client = self._get_client()

        with handle_store_errors(store_name=self.table_name):
            response = client.get_item(
                TableName=self.table_name, Key=self._key(key), ConsistentRead=True
            )

        item = response.get("Item")
        if not item:
            return None

        expires_at = item.get("expires_at", {}).get("N")
        if expires_at is not None and float(expires_at) <= time.time():
            logger.debug(
                "Session item expired",
                extra={"table": self.table_name, "operation": "get_item"},
            )
            return None

        payload = item.get("payload", {}).get("S")
        return payload

    def set_item(self, key: str, value: str) -> None:
        client = self._get_client()
        expires_at = int(time.time()) + self.ttl_seconds

        with handle_store_errors(store_name=self.table_name):
            client.put_item(
                TableName=self.table_name,
                Item={
                    **self._key(key),
                    "payload": {"S": value},
                    "expires_at": {"N": str(expires_at)},
                },
            )

    def remove_item(self, key: str) -> None:
        client = self._get_client()

        with handle_store_errors(store_name=self.table_name):
            client.delete_item(TableName=self.table_name, Key=self._key(key))

    def keys(self) -> list[str]:
        """Lists every cache key of this session, following the query paginator."""
        client = self._get_client()
        paginator = client.get_paginator("query")

        keys: list[str] = []
        with handle_store_errors(store_name=self.table_name):
            for page in paginator.paginate(
                TableName=self.table_name,
                KeyConditionExpression="#sid = :sid",
                ExpressionAttributeNames={"#sid": "session_id", "#ck": "cache_key"},
                ExpressionAttributeValues={":sid": {"S": self.session_id}},
                ProjectionExpression="#ck",
            ):
                keys.extend(item["cache_key"]["S"] for item in page.get("Items", []))

        logger.debug(
            "Listed session keys",
            extra={"table": self.table_name, "operation": "keys", "count": len(keys)},
        )
        return keys

"""
Unit tests for CacheSerializer.

Covers element payloads of different shapes and the rule that malformed
payloads read back as None.
"""

from datetime import datetime, timezone
from uuid import UUID

import pytest
from pydantic import BaseModel

from pagerstate.serializer import CacheSerializer


class ImageMeta(BaseModel):
    id: UUID
    tag: str
    created_at: datetime


class TestElements:
    def test_plain_dicts(self):
        serializer = CacheSerializer()
        raw = serializer.dump_elements([{"id": "1", "tag": "a"}])

        assert raw == '[{"id":"1","tag":"a"}]'
        assert serializer.load_elements(raw) == [{"id": "1", "tag": "a"}]

    def test_typed_models(self):
        serializer = CacheSerializer(ImageMeta)
        meta = ImageMeta(
            id=UUID("12345678-1234-5678-1234-567812345678"),
            tag="cat",
            created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
        )

        loaded = serializer.load_elements(serializer.dump_elements([meta]))

        assert loaded == [meta]

    def test_untyped_serializer_dumps_models_as_objects(self):
        serializer = CacheSerializer()
        meta = ImageMeta(
            id=UUID("12345678-1234-5678-1234-567812345678"),
            tag="cat",
            created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
        )

        loaded = serializer.load_elements(serializer.dump_elements([meta]))

        assert loaded[0]["tag"] == "cat"
        assert loaded[0]["id"] == "12345678-1234-5678-1234-567812345678"

    @pytest.mark.parametrize("raw", ["not json", "{", '{"a": 1}', "null", "42"])
    def test_malformed_reads_as_none(self, raw):
        assert CacheSerializer().load_elements(raw) is None

    def test_schema_mismatch_reads_as_none(self):
        assert CacheSerializer(ImageMeta).load_elements('[{"tag": "cat"}]') is None

    def test_missing_reads_as_none(self):
        assert CacheSerializer().load_elements(None) is None


class TestTotal:
    def test_total(self):
        serializer = CacheSerializer()
        assert serializer.dump_total(5) == "5"
        assert serializer.load_total("5") == 5

    @pytest.mark.parametrize("raw", [None, "-1", "abc", "[1]", "null"])
    def test_invalid_total_reads_as_none(self, raw):
        assert CacheSerializer().load_total(raw) is None

from typing import Any

from pydantic import NonNegativeInt, TypeAdapter


class CacheSerializer:
    """
    Handles the conversion between elements and the JSON text kept in a session store.

    Architectural Note:
    -------------------
    Session stores only hold strings. Elements may be plain dicts, pydantic models
    or dataclasses, so both directions go through pydantic TypeAdapters: dumping
    handles datetimes, UUIDs, enums and decimals, and loading validates the payload
    so a corrupt entry is reported as None (a cache miss) instead of raising.
    """

    def __init__(self, element_type: type | None = None) -> None:
        self.element_type = element_type
        item_type: Any = element_type if element_type is not None else Any
        self._elements_adapter: TypeAdapter[list[Any]] = TypeAdapter(list[item_type])
        self._total_adapter: TypeAdapter[int] = TypeAdapter(NonNegativeInt)

    def dump_elements(self, elements: list[Any]) -> str:
        """Serializes elements to a JSON array."""
        return self._elements_adapter.dump_json(elements).decode("utf-8")

    def load_elements(self, raw: str | None) -> list[Any] | None:
        """Parses a JSON array of elements; malformed or missing payloads return None."""
        if raw is None:
            return None
        try:
            return self._elements_adapter.validate_json(raw)
        except ValueError:
            # pydantic.ValidationError is a ValueError subclass
            return None

    def dump_total(self, total: int) -> str:
        return self._total_adapter.dump_json(total).decode("utf-8")

    def load_total(self, raw: str | None) -> int | None:
        if raw is None:
            return None
        try:
            return self._total_adapter.validate_json(raw)
        except ValueError:
            return None

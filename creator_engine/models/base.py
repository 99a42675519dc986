"""
creator_engine/models/base.py -- Base model shared by every store entity.

Entities arrive as snapshots exported by the application store, which uses
camelCase keys and frequently omits or nulls optional fields.  The base model
accepts both the camelCase aliases and the snake_case attribute names, keeps
unknown keys (the store carries many presentation-only fields), and cleans
the raw data before validation:

    - ``null`` values are dropped so that field defaults apply instead
    - ``null`` entries inside lists are removed
    - numeric ``id`` and ``name`` values are read as strings
"""

from __future__ import annotations

import logging
from typing import Any, Iterable

from pydantic import BaseModel, ConfigDict, ValidationError, model_validator
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)

_STRING_KEYS = ("id", "name")


def _clean_value(key: str, value: Any) -> Any:
    if isinstance(value, list):
        return [item for item in value if item is not None]
    if key in _STRING_KEYS and isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


class EntityBase(BaseModel):
    """Common fields and parsing rules for Characters, Worlds and Projects."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    id: str = ""
    name: str = ""
    genre: str = ""
    aliases: list[str] = []

    @model_validator(mode="before")
    @classmethod
    def _clean_store_data(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {
                key: _clean_value(key, value)
                for key, value in data.items()
                if value is not None
            }
        return data

    @classmethod
    def coerce_many(cls, items: Iterable[Any] | None) -> list:
        """Accept model instances or raw store dicts.

        Anything that is neither, or a dict that still fails validation, is
        skipped with a debug message so one bad record never blocks the rest.
        """
        result = []
        for item in items or ():
            if isinstance(item, cls):
                result.append(item)
                continue
            if not isinstance(item, dict):
                logger.debug("Skipping %r: not a %s", item, cls.__name__)
                continue
            try:
                result.append(cls.model_validate(item))
            except ValidationError as exc:
                logger.debug(
                    "Skipping %s %r: %d validation error(s)",
                    cls.__name__, item.get("id"), exc.error_count(),
                )
        return result

    def to_store_dict(self) -> dict[str, Any]:
        """Serialise back to the store's camelCase layout."""
        return self.model_dump(by_alias=True, exclude_none=True)

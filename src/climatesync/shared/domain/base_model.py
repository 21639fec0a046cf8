"""
Base domain model with REST JSON compatibility.

The work-tracking REST API speaks camelCase; domain models are snake_case
dataclasses. BaseDomainModel converts between the two.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Dict, Type, TypeVar

T = TypeVar("T", bound="BaseDomainModel")


def to_camel_case(snake_str: str) -> str:
    """
    Convert snake_case to camelCase.

    Examples:
        >>> to_camel_case("reference_name")
        'referenceName'
        >>> to_camel_case("is_queryable")
        'isQueryable'
    """
    components = snake_str.split("_")
    return components[0] + "".join(x.title() for x in components[1:])


@dataclass
class BaseDomainModel:
    """
    Base class for REST-facing domain models.

    - to_json() serializes to camelCase, dropping None values
    - from_json() deserializes camelCase JSON, ignoring unknown keys
    - Enum values are serialized by value
    """

    def to_json(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {}

        for field in fields(self):
            value = getattr(self, field.name)
            if value is None:
                continue

            json_key = field.metadata.get("json_key", to_camel_case(field.name))

            if isinstance(value, Enum):
                result[json_key] = value.value
            elif isinstance(value, list):
                result[json_key] = [
                    item.to_json() if isinstance(item, BaseDomainModel) else item
                    for item in value
                ]
            elif isinstance(value, BaseDomainModel):
                result[json_key] = value.to_json()
            else:
                result[json_key] = value

        return result

    @classmethod
    def from_json(cls: Type[T], data: Dict[str, Any]) -> T:
        """
        Deserialize from REST JSON (camelCase).

        Nested models are left as raw values; subclasses override to parse them.

        Raises:
            ValueError: If a required field is missing
        """
        kwargs: Dict[str, Any] = {}

        for field in fields(cls):
            json_key = field.metadata.get("json_key", to_camel_case(field.name))

            if json_key not in data:
                if field.default is not dataclasses.MISSING or field.default_factory is not dataclasses.MISSING:  # type: ignore[attr-defined]
                    continue
                raise ValueError(f"Missing required field: {json_key}")

            kwargs[field.name] = data[json_key]

        return cls(**kwargs)

"""
Entities exchanged with the downstream services. Immutable value objects;
the composite never persists them. Wire format is camelCase JSON.
"""
from __future__ import annotations

import dataclasses
import re
from dataclasses import dataclass
from typing import Any, TypeVar

E = TypeVar("E", bound="ValueObject")


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def _snake(name: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", name).lower()


@dataclass(frozen=True)
class ValueObject:
    """Value object: equality by all fields (via dataclass)."""

    def to_json(self) -> dict[str, Any]:
        return {_camel(f.name): getattr(self, f.name) for f in dataclasses.fields(self)}

    @classmethod
    def from_json(cls: type[E], data: dict[str, Any]) -> E:
        """Build from a wire dict. Unknown keys are ignored; missing required keys raise TypeError."""
        if not isinstance(data, dict):
            raise TypeError(f"{cls.__name__} expects a JSON object, got {type(data).__name__}")
        names = {f.name for f in dataclasses.fields(cls)}
        kwargs = {}
        for key, value in data.items():
            name = _snake(key)
            if name in names:
                kwargs[name] = value
        return cls(**kwargs)


@dataclass(frozen=True)
class Product(ValueObject):
    product_id: int
    name: str
    weight: int
    service_address: str = ""


@dataclass(frozen=True)
class Recommendation(ValueObject):
    product_id: int
    recommendation_id: int
    author: str
    rate: int
    content: str
    service_address: str = ""


@dataclass(frozen=True)
class Review(ValueObject):
    product_id: int
    review_id: int
    author: str
    subject: str
    content: str
    service_address: str = ""


Entity = Product | Recommendation | Review

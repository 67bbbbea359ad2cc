"""
Change events: typed notifications built from write requests.
key is always the product id; it becomes the partition key of the outgoing message.
"""
from __future__ import annotations

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, ClassVar

from product_composite.domain.entities import Entity


class EventType(str, Enum):
    CREATE = "CREATE"
    DELETE = "DELETE"


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class ChangeEvent(ABC):
    """Base change event. Use CreateEvent or DeleteEvent; they cannot carry the wrong payload."""

    event_type: ClassVar[EventType]

    @property
    @abstractmethod
    def key(self) -> int:
        """Product id; the partition key of the outgoing message."""

    @property
    def payload(self) -> Entity | None:
        return None

    def to_message(self) -> dict[str, Any]:
        return {
            "eventType": self.event_type.value,
            "key": self.key,
            "data": self.payload.to_json() if self.payload is not None else None,
            "eventCreatedAt": self.created_at.isoformat(),
        }

    def to_bytes(self) -> bytes:
        return json.dumps(self.to_message()).encode()


@dataclass(frozen=True)
class CreateEvent(ChangeEvent):
    """CREATE: payload required; key is taken from the payload's product id."""

    event_type: ClassVar[EventType] = EventType.CREATE

    entity: Entity
    created_at: datetime = field(default_factory=_now, kw_only=True)

    @property
    def key(self) -> int:
        return self.entity.product_id

    @property
    def payload(self) -> Entity:
        return self.entity


@dataclass(frozen=True)
class DeleteEvent(ChangeEvent):
    """DELETE: only the product id, never a payload."""

    event_type: ClassVar[EventType] = EventType.DELETE

    product_id: int
    created_at: datetime = field(default_factory=_now, kw_only=True)

    @property
    def key(self) -> int:
        return self.product_id


def build_event(event_type: EventType | str, key: int, payload: Entity | None = None) -> ChangeEvent:
    """Build a change event when the type is held as data."""
    event_type = EventType(event_type)
    if event_type is EventType.DELETE:
        if payload is not None:
            raise ValueError("DELETE events carry no payload")
        return DeleteEvent(key)
    if payload is None:
        raise ValueError("CREATE events require a payload")
    if payload.product_id != key:
        raise ValueError(f"CREATE key {key} does not match payload product id {payload.product_id}")
    return CreateEvent(payload)

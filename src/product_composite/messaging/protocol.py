"""Message channel protocol: send one keyed message to a named channel."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

PARTITION_KEY_HEADER = "partitionKey"


@dataclass(frozen=True)
class Message:
    """Serialized change event plus headers. headers[partitionKey] orders messages per aggregate."""

    payload: bytes
    headers: dict[str, str] = field(default_factory=dict)

    @property
    def partition_key(self) -> str | None:
        return self.headers.get(PARTITION_KEY_HEADER)


@runtime_checkable
class MessageChannel(Protocol):
    """
    Channel-publishing client. User supplies implementation (in-memory, Redis Streams).
    send() may block; it is only ever called from the dispatcher's worker lanes.
    Must be safe to call from several threads.
    """

    def send(self, channel: str, message: Message) -> None:
        ...

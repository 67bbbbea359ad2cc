"""
Channel adapters: in-memory for tests and prototypes, Redis Streams for deployments.
"""
from __future__ import annotations

import threading

import redis

from product_composite.core.logger import get_logger
from product_composite.messaging.protocol import Message

log = get_logger(__name__)


class InMemoryChannel:
    """Appends messages to per-channel lists in arrival order."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._messages: dict[str, list[Message]] = {}

    def send(self, channel: str, message: Message) -> None:
        with self._lock:
            self._messages.setdefault(channel, []).append(message)

    def messages(self, channel: str) -> list[Message]:
        with self._lock:
            return list(self._messages.get(channel, []))

    def clear(self) -> None:
        with self._lock:
            self._messages.clear()


class RedisStreamChannel:
    """
    One Redis stream per channel. Each entry holds the serialized event under "payload"
    and every header as its own field, so consumers can group by partitionKey.
    Uses the blocking client: send() runs on a dispatcher lane, never on the event loop.
    """

    def __init__(
        self,
        redis_url: str = "redis://localhost:6379/0",
        *,
        stream_prefix: str = "",
        max_stream_length: int = 10_000,
        client: redis.Redis | None = None,
    ) -> None:
        self._client = client if client is not None else redis.Redis.from_url(redis_url)
        self._stream_prefix = stream_prefix
        self._max_len = max_stream_length

    def send(self, channel: str, message: Message) -> None:
        stream = f"{self._stream_prefix}{channel}"
        fields = {"payload": message.payload, **message.headers}
        entry_id = self._client.xadd(stream, fields, maxlen=self._max_len, approximate=True)
        log.debug("stream_entry_added", stream=stream, entry_id=entry_id, partition_key=message.partition_key)

    def close(self) -> None:
        self._client.close()

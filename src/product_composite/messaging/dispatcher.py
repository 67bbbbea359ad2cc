"""
CommandDispatcher: hands change events to the message channel off the caller's event loop.

The publish pool is a fixed set of single-thread lanes. An event's lane is picked from its key,
so events for one product are sent in dispatch order while other products proceed in parallel.
dispatch() returns as soon as the send is queued; the returned future completes after the
channel accepted the message, or fails with ChannelDispatchError.
"""
from __future__ import annotations

import asyncio
import time
from concurrent.futures import ThreadPoolExecutor

from product_composite.core.logger import get_logger
from product_composite.domain.events import ChangeEvent
from product_composite.errors import ChannelDispatchError
from product_composite.messaging.protocol import PARTITION_KEY_HEADER, Message, MessageChannel

log = get_logger(__name__)


class CommandDispatcher:
    def __init__(
        self,
        channel: MessageChannel,
        workers: int = 4,
        *,
        slow_send_threshold: float = 5.0,
    ) -> None:
        if workers < 1:
            raise ValueError("workers must be at least 1")
        self._channel = channel
        self._slow_send_threshold = slow_send_threshold
        self._lanes = [
            ThreadPoolExecutor(max_workers=1, thread_name_prefix=f"publish-lane-{i}")
            for i in range(workers)
        ]
        self._closed = False

    @property
    def workers(self) -> int:
        return len(self._lanes)

    def lane_for(self, key: int) -> int:
        return key % len(self._lanes)

    def dispatch(self, channel_name: str, event: ChangeEvent) -> asyncio.Future[None]:
        """Queue one send of event onto channel_name. Must be called from a running event loop."""
        if self._closed:
            raise RuntimeError("CommandDispatcher is closed")
        loop = asyncio.get_running_loop()
        lane = self._lanes[self.lane_for(event.key)]
        log.debug(
            "dispatch_queued",
            channel=channel_name,
            event_type=event.event_type.value,
            key=event.key,
        )
        return loop.run_in_executor(lane, self._send, channel_name, event)

    def _send(self, channel_name: str, event: ChangeEvent) -> None:
        message = Message(
            payload=event.to_bytes(),
            headers={PARTITION_KEY_HEADER: str(event.key)},
        )
        started = time.monotonic()
        try:
            self._channel.send(channel_name, message)
        except Exception as exc:
            log.error(
                "dispatch_failed",
                channel=channel_name,
                event_type=event.event_type.value,
                key=event.key,
                error=str(exc),
            )
            raise ChannelDispatchError(
                f"Could not send {event.event_type.value} event for key {event.key} to {channel_name!r}: {exc}",
                channel=channel_name,
                key=event.key,
            ) from exc
        elapsed = time.monotonic() - started
        if elapsed > self._slow_send_threshold:
            log.warning("dispatch_slow", channel=channel_name, key=event.key, seconds=round(elapsed, 3))
        log.debug("dispatch_sent", channel=channel_name, event_type=event.event_type.value, key=event.key)

    def close(self, wait: bool = True) -> None:
        """Stop accepting dispatches; with wait=True, block until queued sends finish."""
        self._closed = True
        for lane in self._lanes:
            lane.shutdown(wait=wait)

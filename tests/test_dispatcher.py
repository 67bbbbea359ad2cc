"""Tests for CommandDispatcher: off-loop handoff, per-key ordering, failure propagation."""

from __future__ import annotations

import asyncio
import json
import random
import threading
import time

import pytest

from conftest import FailingChannel, GatedChannel
from product_composite.domain.entities import Recommendation
from product_composite.domain.events import CreateEvent, DeleteEvent
from product_composite.errors import ChannelDispatchError
from product_composite.messaging.channels import InMemoryChannel
from product_composite.messaging.dispatcher import CommandDispatcher
from product_composite.messaging.protocol import PARTITION_KEY_HEADER, Message


def _rec(product_id: int, seq: int) -> Recommendation:
    return Recommendation(product_id, seq, "author", 1, "content")


class JitterChannel(InMemoryChannel):
    """Sleeps a random few milliseconds per send to shake out ordering bugs."""

    def send(self, channel: str, message: Message) -> None:
        time.sleep(random.uniform(0, 0.005))
        super().send(channel, message)


class KeyGatedChannel(InMemoryChannel):
    """Blocks sends for one partition key only."""

    def __init__(self, blocked_key: str) -> None:
        super().__init__()
        self.blocked_key = blocked_key
        self.gate = threading.Event()

    def send(self, channel: str, message: Message) -> None:
        if message.partition_key == self.blocked_key:
            self.gate.wait(timeout=5)
        super().send(channel, message)


class TestDispatch:
    @pytest.mark.asyncio
    async def test_message_carries_partition_key_and_event(self, dispatcher, channel):
        await dispatcher.dispatch("products", DeleteEvent(42))

        [message] = channel.messages("products")
        assert message.headers[PARTITION_KEY_HEADER] == "42"
        body = json.loads(message.payload)
        assert body["eventType"] == "DELETE"
        assert body["key"] == 42
        assert body["data"] is None

    @pytest.mark.asyncio
    async def test_returns_before_channel_accepts(self):
        channel = GatedChannel()
        dispatcher = CommandDispatcher(channel, workers=1)
        try:
            future = dispatcher.dispatch("reviews", DeleteEvent(1))
            await asyncio.sleep(0.01)
            assert not future.done()
            assert channel.messages("reviews") == []

            channel.gate.set()
            await asyncio.wait_for(future, timeout=2)
            assert len(channel.messages("reviews")) == 1
        finally:
            channel.gate.set()
            dispatcher.close()

    @pytest.mark.asyncio
    async def test_exactly_one_message_per_call(self, dispatcher, channel):
        await asyncio.gather(*(dispatcher.dispatch("recommendations", CreateEvent(_rec(1, i))) for i in range(5)))
        assert len(channel.messages("recommendations")) == 5


class TestOrdering:
    @pytest.mark.asyncio
    async def test_same_key_keeps_dispatch_order(self):
        channel = JitterChannel()
        dispatcher = CommandDispatcher(channel, workers=4)
        try:
            futures = [
                dispatcher.dispatch("recommendations", CreateEvent(_rec(product_id, seq)))
                for seq in range(30)
                for product_id in (1, 2, 3)
            ]
            await asyncio.gather(*futures)
        finally:
            dispatcher.close()

        messages = channel.messages("recommendations")
        assert len(messages) == 90
        for product_id in (1, 2, 3):
            seqs = [
                json.loads(m.payload)["data"]["recommendationId"]
                for m in messages
                if m.partition_key == str(product_id)
            ]
            assert seqs == list(range(30))

    @pytest.mark.asyncio
    async def test_blocked_key_does_not_hold_up_other_keys(self):
        channel = KeyGatedChannel(blocked_key="0")
        dispatcher = CommandDispatcher(channel, workers=2)
        try:
            assert dispatcher.lane_for(0) != dispatcher.lane_for(1)
            blocked = dispatcher.dispatch("products", DeleteEvent(0))
            free = dispatcher.dispatch("products", DeleteEvent(1))

            await asyncio.wait_for(free, timeout=2)
            assert not blocked.done()

            channel.gate.set()
            await asyncio.wait_for(blocked, timeout=2)
        finally:
            channel.gate.set()
            dispatcher.close()

    def test_lane_is_stable_per_key(self):
        dispatcher = CommandDispatcher(InMemoryChannel(), workers=3)
        try:
            assert dispatcher.workers == 3
            assert dispatcher.lane_for(7) == dispatcher.lane_for(7) == 1
        finally:
            dispatcher.close()


class TestFailures:
    @pytest.mark.asyncio
    async def test_channel_error_lands_on_future(self):
        channel = FailingChannel(failures=1)
        dispatcher = CommandDispatcher(channel, workers=1)
        try:
            with pytest.raises(ChannelDispatchError) as info:
                await dispatcher.dispatch("products", DeleteEvent(9))
            assert info.value.channel == "products"
            assert info.value.key == 9
            assert isinstance(info.value.__cause__, ConnectionError)

            # the lane keeps working after a failed send
            await dispatcher.dispatch("products", DeleteEvent(9))
            assert len(channel.messages("products")) == 1
        finally:
            dispatcher.close()

    @pytest.mark.asyncio
    async def test_closed_dispatcher_rejects(self):
        dispatcher = CommandDispatcher(InMemoryChannel(), workers=1)
        dispatcher.close()
        with pytest.raises(RuntimeError, match="closed"):
            dispatcher.dispatch("products", DeleteEvent(1))

    def test_needs_at_least_one_worker(self):
        with pytest.raises(ValueError):
            CommandDispatcher(InMemoryChannel(), workers=0)

from product_composite.messaging.channels import InMemoryChannel, RedisStreamChannel
from product_composite.messaging.dispatcher import CommandDispatcher
from product_composite.messaging.protocol import PARTITION_KEY_HEADER, Message, MessageChannel

__all__ = [
    "CommandDispatcher",
    "InMemoryChannel",
    "Message",
    "MessageChannel",
    "PARTITION_KEY_HEADER",
    "RedisStreamChannel",
]

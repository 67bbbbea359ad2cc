"""
IntegrationModule: building block that wires the integration facade.
Configure via .config(...) and .channel(...) or .in_memory(); attach with module.register_into(container).
"""
from __future__ import annotations

import asyncio

import httpx

from product_composite.core.config import IntegrationConfig
from product_composite.core.container import Container
from product_composite.core.module import Module
from product_composite.http.query_client import build_http_client
from product_composite.integration.facade import ProductCompositeIntegration
from product_composite.messaging.channels import InMemoryChannel
from product_composite.messaging.dispatcher import CommandDispatcher
from product_composite.messaging.protocol import MessageChannel


class IntegrationModule(Module):
    """
    Registers the process-wide singletons: IntegrationConfig, httpx.AsyncClient, MessageChannel,
    CommandDispatcher and ProductCompositeIntegration.
    """

    def __init__(self) -> None:
        self._config: IntegrationConfig | None = None
        self._channel: MessageChannel | None = None
        self._http_client: httpx.AsyncClient | None = None

    def config(self, config: IntegrationConfig) -> IntegrationModule:
        self._config = config
        return self

    def channel(self, impl: MessageChannel) -> IntegrationModule:
        """Use a channel adapter (protocol: send(channel, message))."""
        self._channel = impl
        return self

    def in_memory(self) -> IntegrationModule:
        """In-memory channel out of the box for prototypes."""
        self._channel = InMemoryChannel()
        return self

    def http_client(self, client: httpx.AsyncClient) -> IntegrationModule:
        """Use a preconfigured client (transport, auth) instead of the default one."""
        self._http_client = client
        return self

    def register_into(self, container: Container) -> None:
        config = self._config if self._config is not None else IntegrationConfig.from_env()
        channel = self._channel if self._channel is not None else InMemoryChannel()
        container.register_instance(IntegrationConfig, config)
        container.register_instance(MessageChannel, channel)

        if self._http_client is not None:
            container.register_instance(httpx.AsyncClient, self._http_client)
        else:
            container.register(httpx.AsyncClient, lambda: build_http_client(config))
        container.register(
            CommandDispatcher,
            lambda: CommandDispatcher(container.resolve(MessageChannel), workers=config.publish_workers),
        )
        container.register_class(ProductCompositeIntegration)


async def close_integration(container: Container) -> None:
    """Release the HTTP client, drain the publish lanes and close the channel, if they were resolved."""
    if container.is_resolved(httpx.AsyncClient):
        await container.resolve(httpx.AsyncClient).aclose()
    if container.is_resolved(CommandDispatcher):
        await asyncio.to_thread(container.resolve(CommandDispatcher).close)
    if container.is_resolved(MessageChannel):
        close = getattr(container.resolve(MessageChannel), "close", None)
        if callable(close):
            await asyncio.to_thread(close)

"""Shared fixtures: config, fake downstream services, channels and the integration facade."""

from __future__ import annotations

import threading
from datetime import datetime, timezone
from typing import Callable

import httpx
import pytest
import pytest_asyncio
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

from product_composite.core.config import IntegrationConfig, ServiceEndpoint
from product_composite.integration.facade import ProductCompositeIntegration
from product_composite.messaging.channels import InMemoryChannel
from product_composite.messaging.dispatcher import CommandDispatcher
from product_composite.messaging.protocol import Message

PRODUCT_ID_OK = 1
PRODUCT_ID_NOT_FOUND = 2
PRODUCT_ID_INVALID = 3


# ---------------------------------------------------------------------------
# Fake downstream services
# ---------------------------------------------------------------------------

def _error(request: Request, status: int, message: str) -> JSONResponse:
    return JSONResponse(
        {
            "path": request.url.path,
            "message": message,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
        status_code=status,
    )


def build_downstream_app(*, failing: frozenset[str] = frozenset()) -> Starlette:
    """
    One ASGI app answering for all three services (ASGITransport ignores the host).
    Services named in failing answer 500 on every route, health included.
    """

    def guard(service: str, request: Request) -> JSONResponse | None:
        if service in failing:
            return _error(request, 500, f"{service} service is broken")
        return None

    async def product(request: Request) -> JSONResponse:
        if (broken := guard("product", request)) is not None:
            return broken
        product_id = request.path_params["product_id"]
        if product_id == PRODUCT_ID_NOT_FOUND:
            return _error(request, 404, f"NOT FOUND: {product_id}")
        if product_id == PRODUCT_ID_INVALID:
            return _error(request, 422, f"INVALID: {product_id}")
        return JSONResponse({
            "productId": product_id,
            "name": "name",
            "weight": 1,
            "serviceAddress": "product-7001",
        })

    async def recommendations(request: Request) -> JSONResponse:
        if (broken := guard("recommendation", request)) is not None:
            return broken
        product_id = int(request.query_params["productId"])
        return JSONResponse([
            {
                "productId": product_id,
                "recommendationId": 1,
                "author": "author",
                "rate": 1,
                "content": "content",
                "serviceAddress": "recommendation-7002",
            }
        ])

    async def reviews(request: Request) -> JSONResponse:
        if (broken := guard("review", request)) is not None:
            return broken
        product_id = int(request.query_params["productId"])
        return JSONResponse([
            {
                "productId": product_id,
                "reviewId": 1,
                "author": "author",
                "subject": "subject",
                "content": "content",
                "serviceAddress": "review-7003",
            }
        ])

    async def health(request: Request) -> JSONResponse:
        host = request.url.hostname or ""
        if host in failing:
            return _error(request, 503, "DOWN")
        return JSONResponse({"status": "UP"})

    return Starlette(routes=[
        Route("/product/{product_id:int}", product),
        Route("/recommendation", recommendations),
        Route("/review", reviews),
        Route("/actuator/health", health),
    ])


def asgi_client(app: Starlette) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.ASGITransport(app=app), timeout=2.0)


def mock_client(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler), timeout=2.0)


# ---------------------------------------------------------------------------
# Channels
# ---------------------------------------------------------------------------

class GatedChannel(InMemoryChannel):
    """Blocks every send until the gate opens (models a slow broker handoff)."""

    def __init__(self) -> None:
        super().__init__()
        self.gate = threading.Event()

    def send(self, channel: str, message: Message) -> None:
        if not self.gate.wait(timeout=5):
            raise TimeoutError("gate never opened")
        super().send(channel, message)


class FailingChannel(InMemoryChannel):
    """Raises for the first `failures` sends, then behaves normally."""

    def __init__(self, failures: int = 1) -> None:
        super().__init__()
        self.failures = failures

    def send(self, channel: str, message: Message) -> None:
        if self.failures > 0:
            self.failures -= 1
            raise ConnectionError("broker unavailable")
        super().send(channel, message)


# ---------------------------------------------------------------------------
# Integration
# ---------------------------------------------------------------------------

@pytest.fixture
def config() -> IntegrationConfig:
    return IntegrationConfig(
        services={
            "product": ServiceEndpoint("product", 7001),
            "recommendation": ServiceEndpoint("recommendation", 7002),
            "review": ServiceEndpoint("review", 7003),
        },
        timeout=2.0,
        publish_workers=2,
    )


@pytest.fixture
def channel() -> InMemoryChannel:
    return InMemoryChannel()


@pytest.fixture
def dispatcher(channel):
    d = CommandDispatcher(channel, workers=2)
    yield d
    d.close()


@pytest_asyncio.fixture
async def integration_for(config):
    """Builds facades over the given client and dispatcher; closes every client afterwards."""
    clients: list[httpx.AsyncClient] = []

    def build(client: httpx.AsyncClient, dispatcher: CommandDispatcher) -> ProductCompositeIntegration:
        clients.append(client)
        return ProductCompositeIntegration(config, client, dispatcher)

    yield build
    for client in clients:
        await client.aclose()


@pytest_asyncio.fixture
async def integration(integration_for, dispatcher) -> ProductCompositeIntegration:
    return integration_for(asgi_client(build_downstream_app()), dispatcher)

"""
One capability set for all three downstream services, parameterized by EntityKind.
Writes become change events on the kind's channel; reads go over HTTP.
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Generic, TypeVar

from product_composite.core.config import PRODUCT, RECOMMENDATION, REVIEW
from product_composite.domain.entities import Product, Recommendation, Review, ValueObject
from product_composite.domain.events import CreateEvent, DeleteEvent
from product_composite.health import Health, HealthProber
from product_composite.http.query_client import QueryClient
from product_composite.messaging.dispatcher import CommandDispatcher

E = TypeVar("E", bound=ValueObject)


async def _after(handoff: asyncio.Future[None], entity: E) -> E:
    await handoff
    return entity


@dataclass(frozen=True)
class EntityKind(Generic[E]):
    """service: key into IntegrationConfig (base URL and channel). resource: downstream API path segment."""

    service: str
    entity_type: type[E]
    resource: str


PRODUCTS: EntityKind[Product] = EntityKind(PRODUCT, Product, "product")
RECOMMENDATIONS: EntityKind[Recommendation] = EntityKind(RECOMMENDATION, Recommendation, "recommendation")
REVIEWS: EntityKind[Review] = EntityKind(REVIEW, Review, "review")


class DownstreamService(Generic[E]):
    def __init__(
        self,
        kind: EntityKind[E],
        base_url: str,
        channel: str,
        queries: QueryClient,
        dispatcher: CommandDispatcher,
        prober: HealthProber,
    ) -> None:
        self.kind = kind
        self.base_url = base_url.rstrip("/")
        self.channel = channel
        self._queries = queries
        self._dispatcher = dispatcher
        self._prober = prober

    def create(self, entity: E) -> asyncio.Future[E]:
        """Queue a CREATE event; the future resolves to entity once the channel took it."""
        handoff = self._dispatcher.dispatch(self.channel, CreateEvent(entity))
        return asyncio.ensure_future(_after(handoff, entity))

    def delete(self, product_id: int) -> asyncio.Future[None]:
        """Queue a DELETE event for every entity of this kind belonging to product_id."""
        return self._dispatcher.dispatch(self.channel, DeleteEvent(product_id))

    def url_for(self, entity_id: int) -> str:
        return f"{self.base_url}/{self.kind.resource}/{entity_id}"

    def url_for_parent(self, product_id: int) -> str:
        return f"{self.base_url}/{self.kind.resource}?productId={product_id}"

    async def read(self, entity_id: int) -> E:
        return await self._queries.fetch_one(self.url_for(entity_id), self.kind.entity_type)

    async def read_many(self, product_id: int) -> list[E]:
        return await self._queries.fetch_many(self.url_for_parent(product_id), self.kind.entity_type)

    async def health(self) -> Health:
        return await self._prober.probe(self.base_url)

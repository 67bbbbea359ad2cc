"""
ProductCompositeIntegration: the only surface the composite service talks to.

Writes (create/delete) are fire-and-forget: they return a future right after the change
event is queued for the message channel, i.e. "202 Accepted" semantics. Reads go to the
downstream HTTP APIs; a missing product is an error, missing satellites are an empty list.
Reads right after a write may not see it yet: propagation is asynchronous.
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any

import httpx

from product_composite.core.config import IntegrationConfig
from product_composite.domain.entities import Product, Recommendation, Review
from product_composite.health import CompositeHealth, Health, HealthProber
from product_composite.http.error_translator import ErrorTranslator
from product_composite.http.query_client import QueryClient
from product_composite.integration.services import (
    PRODUCTS,
    RECOMMENDATIONS,
    REVIEWS,
    DownstreamService,
    EntityKind,
)
from product_composite.messaging.dispatcher import CommandDispatcher


@dataclass(frozen=True)
class CompositeView:
    """One product with whatever recommendations and reviews could be read."""

    product: Product
    recommendations: list[Recommendation]
    reviews: list[Review]

    def to_json(self) -> dict[str, Any]:
        return {
            **self.product.to_json(),
            "recommendations": [r.to_json() for r in self.recommendations],
            "reviews": [r.to_json() for r in self.reviews],
        }


class ProductCompositeIntegration:
    def __init__(
        self,
        config: IntegrationConfig,
        http_client: httpx.AsyncClient,
        dispatcher: CommandDispatcher,
        translator: ErrorTranslator | None = None,
    ) -> None:
        queries = QueryClient(http_client, translator)
        prober = HealthProber(http_client, config.health_path)

        def service(kind: EntityKind[Any]) -> DownstreamService[Any]:
            return DownstreamService(
                kind,
                base_url=config.base_url(kind.service),
                channel=config.channel(kind.service),
                queries=queries,
                dispatcher=dispatcher,
                prober=prober,
            )

        self.products: DownstreamService[Product] = service(PRODUCTS)
        self.recommendations: DownstreamService[Recommendation] = service(RECOMMENDATIONS)
        self.reviews: DownstreamService[Review] = service(REVIEWS)
        self._prober = prober

    # products

    def create_product(self, product: Product) -> asyncio.Future[Product]:
        return self.products.create(product)

    async def get_product(self, product_id: int) -> Product:
        return await self.products.read(product_id)

    def delete_product(self, product_id: int) -> asyncio.Future[None]:
        return self.products.delete(product_id)

    # recommendations

    def create_recommendation(self, recommendation: Recommendation) -> asyncio.Future[Recommendation]:
        return self.recommendations.create(recommendation)

    async def get_recommendations(self, product_id: int) -> list[Recommendation]:
        return await self.recommendations.read_many(product_id)

    def delete_recommendations(self, product_id: int) -> asyncio.Future[None]:
        return self.recommendations.delete(product_id)

    # reviews

    def create_review(self, review: Review) -> asyncio.Future[Review]:
        return self.reviews.create(review)

    async def get_reviews(self, product_id: int) -> list[Review]:
        return await self.reviews.read_many(product_id)

    def delete_reviews(self, product_id: int) -> asyncio.Future[None]:
        return self.reviews.delete(product_id)

    # composite read

    async def get_composite(self, product_id: int) -> CompositeView:
        """Product plus satellites, read concurrently. Fails only if the product read fails."""
        product, recommendations, reviews = await asyncio.gather(
            self.get_product(product_id),
            self.get_recommendations(product_id),
            self.get_reviews(product_id),
        )
        return CompositeView(product, recommendations, reviews)

    # health

    async def product_health(self) -> Health:
        return await self.products.health()

    async def recommendation_health(self) -> Health:
        return await self.recommendations.health()

    async def review_health(self) -> Health:
        return await self.reviews.health()

    async def health(self) -> CompositeHealth:
        return await self._prober.probe_all({
            svc.kind.service: svc.base_url
            for svc in (self.products, self.recommendations, self.reviews)
        })

from product_composite.integration.facade import CompositeView, ProductCompositeIntegration
from product_composite.integration.module import IntegrationModule, close_integration
from product_composite.integration.services import (
    PRODUCTS,
    RECOMMENDATIONS,
    REVIEWS,
    DownstreamService,
    EntityKind,
)

__all__ = [
    "CompositeView",
    "DownstreamService",
    "EntityKind",
    "IntegrationModule",
    "PRODUCTS",
    "ProductCompositeIntegration",
    "RECOMMENDATIONS",
    "REVIEWS",
    "close_integration",
]

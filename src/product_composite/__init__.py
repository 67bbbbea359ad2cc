"""
Product composite integration: talks to the product, recommendation and review services.
Writes are published as change events; reads and health checks go over HTTP.
"""
from product_composite.core import Container, IntegrationConfig, ServiceEndpoint, setup_logging
from product_composite.domain import Product, Recommendation, Review
from product_composite.errors import (
    ChannelDispatchError,
    IntegrationError,
    InvalidInputError,
    NotFoundError,
    UnexpectedError,
)
from product_composite.health import CompositeHealth, Health, HealthStatus
from product_composite.integration import IntegrationModule, ProductCompositeIntegration, close_integration

__version__ = "0.1.0"

__all__ = [
    "ChannelDispatchError",
    "CompositeHealth",
    "Container",
    "Health",
    "HealthStatus",
    "IntegrationConfig",
    "IntegrationError",
    "IntegrationModule",
    "InvalidInputError",
    "NotFoundError",
    "Product",
    "ProductCompositeIntegration",
    "Recommendation",
    "Review",
    "ServiceEndpoint",
    "UnexpectedError",
    "close_integration",
    "setup_logging",
]

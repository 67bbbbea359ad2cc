from product_composite.core.config import IntegrationConfig, ServiceEndpoint
from product_composite.core.container import Container
from product_composite.core.logger import get_logger, setup_logging
from product_composite.core.module import Module

__all__ = [
    "Container",
    "IntegrationConfig",
    "Module",
    "ServiceEndpoint",
    "get_logger",
    "setup_logging",
]

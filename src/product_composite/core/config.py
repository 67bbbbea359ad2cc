"""Single config object: built once at startup and passed to the integration facade."""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Mapping

PRODUCT = "product"
RECOMMENDATION = "recommendation"
REVIEW = "review"

SERVICE_NAMES = (PRODUCT, RECOMMENDATION, REVIEW)


@dataclass(frozen=True)
class ServiceEndpoint:
    """Host and port of one downstream service."""

    host: str
    port: int

    @property
    def base_url(self) -> str:
        return f"http://{self.host}:{self.port}"


def _default_channels() -> dict[str, str]:
    return {
        PRODUCT: "products",
        RECOMMENDATION: "recommendations",
        REVIEW: "reviews",
    }


@dataclass(frozen=True)
class IntegrationConfig:
    """
    Downstream endpoints, outbound channel names and call limits.
    Immutable; base URLs are resolved from it once when the facade is created.
    """

    services: Mapping[str, ServiceEndpoint]
    channels: Mapping[str, str] = field(default_factory=_default_channels)
    timeout: float = 5.0
    health_path: str = "/actuator/health"
    publish_workers: int = 4

    def __post_init__(self) -> None:
        missing = [name for name in SERVICE_NAMES if name not in self.services]
        if missing:
            raise ValueError(f"Missing downstream endpoints: {', '.join(missing)}")
        if self.publish_workers < 1:
            raise ValueError("publish_workers must be at least 1")

    def base_url(self, service_name: str) -> str:
        return self.services[service_name].base_url

    def channel(self, service_name: str) -> str:
        return self.channels[service_name]

    @staticmethod
    def load_from_env(prefix: str = "APP_", **defaults: Any) -> dict[str, Any]:
        """Load from os.environ with prefix and defaults. Keys are lowercased without the prefix."""
        result = dict(defaults)
        for key, value in os.environ.items():
            if key.startswith(prefix):
                name = key[len(prefix):].lower()
                result[name] = value
        return result

    @staticmethod
    def services_from_env(suffix: str = "_SERVICE") -> dict[str, ServiceEndpoint]:
        """
        Build service name -> endpoint from env.
        PRODUCT_SERVICE_HOST=product PRODUCT_SERVICE_PORT=8080 -> {"product": ServiceEndpoint("product", 8080)}.
        Port defaults to 80 when only the host is set.
        """
        out: dict[str, ServiceEndpoint] = {}
        for name in SERVICE_NAMES:
            env_name = f"{name.upper()}{suffix}"
            host = os.environ.get(f"{env_name}_HOST", "").strip()
            if not host:
                continue
            port = os.environ.get(f"{env_name}_PORT", "80").strip()
            out[name] = ServiceEndpoint(host=host, port=int(port))
        return out

    @classmethod
    def from_env(cls, prefix: str = "APP_") -> IntegrationConfig:
        settings = cls.load_from_env(prefix)
        channels = _default_channels()
        for name in SERVICE_NAMES:
            override = settings.get(f"{name}_channel")
            if override:
                channels[name] = override
        return cls(
            services=cls.services_from_env(),
            channels=channels,
            timeout=float(settings.get("http_timeout", 5.0)),
            health_path=settings.get("health_path", "/actuator/health"),
            publish_workers=int(settings.get("publish_workers", 4)),
        )

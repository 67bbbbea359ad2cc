"""Health probing of downstream services. Advisory only: probes never raise."""
from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping

import httpx

from product_composite.core.logger import get_logger

log = get_logger(__name__)


class HealthStatus(str, Enum):
    UP = "UP"
    DOWN = "DOWN"


@dataclass(frozen=True)
class Health:
    status: HealthStatus
    details: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def up(cls) -> Health:
        return cls(HealthStatus.UP)

    @classmethod
    def down(cls, error: BaseException) -> Health:
        return cls(HealthStatus.DOWN, {"error": f"{type(error).__name__}: {error}"})

    @property
    def is_up(self) -> bool:
        return self.status is HealthStatus.UP

    def to_json(self) -> dict[str, Any]:
        out: dict[str, Any] = {"status": self.status.value}
        if self.details:
            out["details"] = dict(self.details)
        return out


@dataclass(frozen=True)
class CompositeHealth:
    """Per-downstream health; UP only when every component is UP."""

    components: dict[str, Health]

    @property
    def status(self) -> HealthStatus:
        if all(h.is_up for h in self.components.values()):
            return HealthStatus.UP
        return HealthStatus.DOWN

    def to_json(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "components": {name: h.to_json() for name, h in self.components.items()},
        }


class HealthProber:
    """GET {base_url}{health_path}: any 2xx is UP; errors, timeouts and other statuses are DOWN."""

    def __init__(self, http_client: httpx.AsyncClient, health_path: str = "/actuator/health") -> None:
        self._http = http_client
        self._health_path = "/" + health_path.lstrip("/")

    async def probe(self, base_url: str) -> Health:
        url = base_url.rstrip("/") + self._health_path
        log.debug("health_probe", url=url)
        try:
            response = await self._http.get(url)
            response.raise_for_status()
        except Exception as exc:
            log.info("health_down", url=url, error=repr(exc))
            return Health.down(exc)
        return Health.up()

    async def probe_all(self, base_urls: Mapping[str, str]) -> CompositeHealth:
        names = list(base_urls)
        results = await asyncio.gather(*(self.probe(base_urls[name]) for name in names))
        return CompositeHealth(dict(zip(names, results)))

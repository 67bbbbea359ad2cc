"""
QueryClient: non-blocking reads from downstream services over a shared httpx.AsyncClient.
fetch_one surfaces failures (translated); fetch_many degrades any failure to an empty list.
"""
from __future__ import annotations

from typing import Any, Awaitable, TypeVar

import httpx

from product_composite.core.config import IntegrationConfig
from product_composite.core.logger import get_logger
from product_composite.domain.entities import ValueObject
from product_composite.http.error_translator import ErrorTranslator

log = get_logger(__name__)

E = TypeVar("E", bound=ValueObject)
T = TypeVar("T")


def build_http_client(config: IntegrationConfig, **kwargs: Any) -> httpx.AsyncClient:
    """Process-wide client; every request is bounded by config.timeout."""
    kwargs.setdefault("timeout", httpx.Timeout(config.timeout))
    kwargs.setdefault("headers", {"Accept": "application/json"})
    return httpx.AsyncClient(**kwargs)


async def degrade_to_empty(call: Awaitable[list[T]], *, url: str) -> list[T]:
    """Fallback for list reads: any failure becomes an empty result so a partial view can render."""
    try:
        return await call
    except Exception as exc:
        log.warning("list_read_degraded", url=url, error=repr(exc))
        return []


class QueryClient:
    def __init__(self, http_client: httpx.AsyncClient, translator: ErrorTranslator | None = None) -> None:
        self._http = http_client
        self._translator = translator or ErrorTranslator()

    async def fetch_one(self, url: str, entity_type: type[E]) -> E:
        """GET url and build one entity. Raises NotFoundError / InvalidInputError / UnexpectedError or the transport error."""
        log.debug("fetch_one", url=url)
        try:
            response = await self._http.get(url)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            translated = self._translator.translate(exc)
            if translated is exc:
                raise
            raise translated from exc
        return entity_type.from_json(response.json())

    async def fetch_many(self, url: str, entity_type: type[E]) -> list[E]:
        """GET url and build a list of entities; [] on any failure."""
        return await degrade_to_empty(self._fetch_list(url, entity_type), url=url)

    async def _fetch_list(self, url: str, entity_type: type[E]) -> list[E]:
        log.debug("fetch_many", url=url)
        response = await self._http.get(url)
        response.raise_for_status()
        body = response.json()
        if not isinstance(body, list):
            raise TypeError(f"expected a JSON array from {url}, got {type(body).__name__}")
        return [entity_type.from_json(item) for item in body]

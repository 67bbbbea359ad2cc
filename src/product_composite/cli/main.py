"""
CLI for operating the integration: probe downstream health, read a composite view.
Endpoints come from the environment (PRODUCT_SERVICE_HOST, PRODUCT_SERVICE_PORT, ...).
"""
from __future__ import annotations

import asyncio
import json
from typing import Any, Awaitable, Callable

import typer

from product_composite.core.config import IntegrationConfig
from product_composite.core.container import Container
from product_composite.core.logger import setup_logging
from product_composite.errors import IntegrationError
from product_composite.health import HealthStatus
from product_composite.integration.facade import ProductCompositeIntegration
from product_composite.integration.module import IntegrationModule, close_integration

app = typer.Typer(help="Product composite integration: health and read access to downstream services.")


def _load_config() -> IntegrationConfig:
    try:
        return IntegrationConfig.from_env()
    except ValueError as exc:
        typer.echo(f"Invalid configuration: {exc}", err=True)
        raise typer.Exit(2)


def _run(action: Callable[[ProductCompositeIntegration], Awaitable[Any]]) -> Any:
    config = _load_config()

    async def runner() -> Any:
        container = Container()
        IntegrationModule().config(config).in_memory().register_into(container)
        try:
            return await action(container.resolve(ProductCompositeIntegration))
        finally:
            await close_integration(container)

    return asyncio.run(runner())


@app.callback()
def configure(
    log_level: str = typer.Option("WARNING", "--log-level", "-l", help="DEBUG, INFO, WARNING, ERROR"),
    log_format: str = typer.Option("console", "--log-format", help="json or console"),
) -> None:
    setup_logging(log_level, log_format)


@app.command()
def health() -> None:
    """Probe every downstream service; exit code 1 when any is DOWN."""
    result = _run(lambda integration: integration.health())
    typer.echo(json.dumps(result.to_json(), indent=2))
    if result.status is not HealthStatus.UP:
        raise typer.Exit(1)


@app.command()
def get_product(
    product_id: int = typer.Argument(..., help="Product id"),
) -> None:
    """Print the product with its recommendations and reviews (partial when a satellite is down)."""
    try:
        view = _run(lambda integration: integration.get_composite(product_id))
    except IntegrationError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1)
    typer.echo(json.dumps(view.to_json(), indent=2))


def main() -> None:
    """Entry point for the product-composite console command."""
    app()


if __name__ == "__main__":
    main()

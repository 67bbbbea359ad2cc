"""Module protocol: any object with register_into(container) can be attached to a container."""
from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from product_composite.core.container import Container


@runtime_checkable
class Module(Protocol):
    """Building block: configured externally, attached via module.register_into(container)."""

    def register_into(self, container: Container) -> None:
        """Attach the module: singletons, adapters, facades."""
        ...

"""Minimal DI container: register by type/protocol, resolve dependencies."""
from __future__ import annotations

import inspect
import typing
from typing import Any, Callable, TypeVar

T = TypeVar("T")


def _instantiate_with_container(container: Container, cls: type[T]) -> T:
    """Create an instance of cls, resolving required __init__ dependencies from the container."""
    init = cls.__init__
    hints = typing.get_type_hints(init)
    kwargs: dict[str, Any] = {}
    for name, param in inspect.signature(init).parameters.items():
        if name == "self" or param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD):
            continue
        # optional collaborators keep their defaults
        if param.default is not inspect.Parameter.empty or name not in hints:
            continue
        kwargs[name] = container.resolve(hints[name])
    return cls(**kwargs)


class Container:
    """
    Register by type (or key) and resolve via factory.
    Holds the process-wide singletons: HTTP client, dispatcher, facade.
    """

    def __init__(self) -> None:
        self._registry: dict[type[Any] | str, Callable[[], Any]] = {}
        self._singletons: dict[type[Any] | str, Any] = {}
        self._singleton_keys: set[type[Any] | str] = set()

    def register(self, key: type[T] | type[Any] | str, factory: Callable[[], T], singleton: bool = True) -> None:
        """Register a factory for a type or string key."""
        self._registry[key] = factory
        if singleton:
            self._singleton_keys.add(key)
            self._singletons[key] = None  # placeholder until first resolve

    def register_instance(self, key: type[T] | type[Any] | str, instance: T) -> None:
        """Register a ready-made instance."""
        self._registry[key] = lambda: instance
        self._singletons[key] = instance
        self._singleton_keys.add(key)

    def register_class(self, cls: type[T], singleton: bool = True) -> None:
        """Register a class: on resolve an instance is created with dependencies from the container."""
        self.register(key=cls, factory=lambda: _instantiate_with_container(self, cls), singleton=singleton)

    def resolve(self, key: type[T] | type[Any] | str) -> T:
        """Resolve an instance by type or key."""
        if key not in self._registry:
            raise KeyError(f"No registration for {key}")
        if key in self._singleton_keys and self._singletons.get(key) is not None:
            return self._singletons[key]
        instance = self._registry[key]()
        if key in self._singleton_keys:
            self._singletons[key] = instance
        return instance

    def is_resolved(self, key: type[Any] | str) -> bool:
        """True once a singleton for key exists (registered instance or first resolve)."""
        return self._singletons.get(key) is not None

import asyncio
from abc import ABC, abstractmethod
from typing import Any, Callable, Mapping, Optional, Tuple

from forkable_di.domain.models import Provider


class IRegistry(ABC):
    """Abstract interface for an immutable provider registry.

    Every registration method returns a new registry; the receiver is never modified.
    """

    @abstractmethod
    def ctor(self, name: str, ctor: Callable[..., Any], **options: Any) -> "IRegistry":
        """Register a constructor invoked with its resolved dependencies.

        Args:
            name: The registry name of the provider.
            ctor: The class or other callable to instantiate.
            **options: Registration options (override, using, is_cacheable, dependencies).
        """

    @abstractmethod
    def fn(self, name: str, fn: Callable[..., Any], **options: Any) -> "IRegistry":
        """Register a callable invoked with its resolved dependencies.

        Args:
            name: The registry name of the provider.
            fn: The callable to invoke.
            **options: Registration options (override, using, is_cacheable, dependencies).
        """

    @abstractmethod
    def constant(self, name: str, value: Any, **options: Any) -> "IRegistry":
        """Register a fixed value.

        Args:
            name: The registry name of the provider.
            value: The value to provide; must not be None.
            **options: Registration options (override, using).
        """

    @abstractmethod
    def finalize(self, validate: bool = False) -> "IInjector":
        """Create an injector bound to the current snapshot of this registry."""

    @property
    @abstractmethod
    def providers(self) -> Mapping[str, Provider]:
        """Read-only view of the registered providers."""


class IInjector(ABC):
    """Abstract interface for building values from a registry snapshot."""

    @abstractmethod
    async def build(self, name: str) -> Any:
        """Build the value of the named provider and its dependencies.

        Args:
            name: The provider to build.

        Returns:
            The built value.

        Raises:
            ProviderNotFoundError: If the provider or one of its dependencies is missing.
            CycleDetectedError: If the dependency graph contains a cycle.
        """

    @abstractmethod
    def clear_cache(self) -> None:
        """Forget every memoized value."""


class IDependencyNameResolver(ABC):
    """Abstract interface for reading the dependency names of a factory."""

    @abstractmethod
    def extract(self, factory: Callable[..., Any]) -> Tuple[str, ...]:
        """Return the ordered dependency names of a factory.

        Args:
            factory: A class or callable.
        """


class IResultCache(ABC):
    """Abstract interface for memoizing built values across builds."""

    @abstractmethod
    def lookup(self, name: str) -> Tuple[bool, Any]:
        """Return ``(True, value)`` when cached, ``(False, None)`` otherwise."""

    @abstractmethod
    def store(self, name: str, value: Any) -> Any:
        """Store a value unless one is already cached; return the cached value."""

    @abstractmethod
    def pending(self, name: str) -> Optional["asyncio.Future[Any]"]:
        """Return the unfinished resolution of ``name``, if one is tracked."""

    @abstractmethod
    def track(self, name: str, future: "asyncio.Future[Any]") -> None:
        """Track an in-flight resolution of ``name`` until it finishes."""

    @abstractmethod
    def clear(self) -> None:
        """Clear every cached value and in-flight resolution."""

    @abstractmethod
    def __contains__(self, name: object) -> bool:
        """Whether a value is cached under ``name``."""

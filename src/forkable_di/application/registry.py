import logging
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterator, Mapping, Optional, Sequence

from pydantic import ValidationError

from forkable_di.application.dependency_names import DependencyNameResolver
from forkable_di.application.graph_validator import GraphValidator
from forkable_di.application.injector import Injector
from forkable_di.domain import (
    IDependencyNameResolver,
    InvalidProviderError,
    IRegistry,
    Provider,
    ProviderKind,
    RegistrationConflictError,
    RegistrationOptions,
)

logger = logging.getLogger(__name__)


class Registry(IRegistry):
    """Immutable collection of providers.

    Registries are usually global to an application, and are forked for
    different environments: a test run, for instance, will often replace the
    low-level data providers. Every registration returns a new registry and
    leaves the receiver untouched, so each fork evolves independently from
    the point where it was created.

    Attributes:
        _providers: Read-only mapping of provider names to providers.
        _name_resolver: Reads dependency names from factories.
    """

    def __init__(
        self,
        providers: Optional[Mapping[str, Provider]] = None,
        name_resolver: Optional[IDependencyNameResolver] = None,
    ) -> None:
        """Initialize the registry.

        Args:
            providers: Optional initial providers, copied into the registry.
            name_resolver: Optional resolver for factory dependency names.
        """
        self._providers: Mapping[str, Provider] = MappingProxyType(dict(providers or {}))
        self._name_resolver = name_resolver if name_resolver is not None else DependencyNameResolver()

    def ctor(
        self,
        name: str,
        ctor: Callable[..., Any],
        *,
        override: bool = False,
        using: Optional[Mapping[str, str]] = None,
        is_cacheable: bool = False,
        dependencies: Optional[Sequence[str]] = None,
    ) -> "Registry":
        """Register a constructor provider.

        The class is instantiated with its dependencies as positional arguments.

        Args:
            name: The registry name of the provider.
            ctor: The class (or other constructor callable) to instantiate.
            override: Replace an existing provider with the same name.
            using: Maps the constructor's dependency names to registry names.
            is_cacheable: Keep the built instance for the injector's lifetime.
            dependencies: Explicit dependency names, instead of introspection.

        Returns:
            A new registry holding the provider.

        Raises:
            InvalidProviderError: If ``ctor`` is not callable or the options are invalid.
            RegistrationConflictError: If ``name`` is registered and ``override`` is False.

        Example:
            >>> registry = Registry().constant("dsn", "sqlite://").ctor(
            ...     "database", Database, is_cacheable=True
            ... )
        """
        self._check_name(name)
        if not callable(ctor):
            raise InvalidProviderError(name, "Constructor provider requires a callable")
        options = self._options(name, override, using, is_cacheable, dependencies)
        return self._add(name, ProviderKind.CONSTRUCTOR, ctor, self._dependencies_of(ctor, options), options)

    def fn(
        self,
        name: str,
        fn: Callable[..., Any],
        *,
        override: bool = False,
        using: Optional[Mapping[str, str]] = None,
        is_cacheable: bool = False,
        dependencies: Optional[Sequence[str]] = None,
    ) -> "Registry":
        """Register a function provider.

        The function is called with its dependencies as positional arguments;
        coroutine functions and other awaitable results are awaited.

        Args:
            name: The registry name of the provider.
            fn: The callable to invoke.
            override: Replace an existing provider with the same name.
            using: Maps the function's parameter names to registry names.
            is_cacheable: Keep the result for the injector's lifetime.
            dependencies: Explicit dependency names, instead of introspection.

        Returns:
            A new registry holding the provider.

        Raises:
            InvalidProviderError: If ``fn`` is not callable or the options are invalid.
            RegistrationConflictError: If ``name`` is registered and ``override`` is False.

        Example:
            >>> registry = Registry().constant("port", 8080).fn(
            ...     "greeting", lambda port: f"listening on {port}", is_cacheable=True
            ... )
        """
        self._check_name(name)
        if not callable(fn):
            raise InvalidProviderError(name, "Function provider requires a callable")
        options = self._options(name, override, using, is_cacheable, dependencies)
        return self._add(name, ProviderKind.FUNCTION, fn, self._dependencies_of(fn, options), options)

    def constant(
        self,
        name: str,
        value: Any,
        *,
        override: bool = False,
        using: Optional[Mapping[str, str]] = None,
    ) -> "Registry":
        """Register a constant provider.

        Args:
            name: The registry name of the provider.
            value: The value to provide, returned unmodified by builds.
            override: Replace an existing provider with the same name.
            using: Accepted for symmetry; constants have no dependencies to map.

        Returns:
            A new registry holding the provider.

        Raises:
            InvalidProviderError: If ``value`` is None.
            RegistrationConflictError: If ``name`` is registered and ``override`` is False.
        """
        self._check_name(name)
        if value is None:
            raise InvalidProviderError(name, "Constant provider cannot provide None")
        options = self._options(name, override, using, False, None)
        return self._add(name, ProviderKind.CONSTANT, value, (), options)

    def finalize(self, validate: bool = False) -> Injector:
        """Create an injector bound to the current snapshot of this registry.

        Registrations made later on this registry's lineage are not visible
        to the returned injector.

        Args:
            validate: Check the graph for missing dependencies and cycles first.

        Returns:
            A new injector with an empty cache.

        Raises:
            ProviderNotFoundError: If ``validate`` is set and a dependency is missing.
            CycleDetectedError: If ``validate`` is set and the graph has a cycle.
        """
        if validate:
            GraphValidator().validate(self._providers)
        return Injector(self._providers)

    @property
    def providers(self) -> Mapping[str, Provider]:
        """Read-only view of the registered providers."""
        return self._providers

    def get(self, name: str) -> Optional[Provider]:
        """Return the provider registered under ``name``, if any."""
        return self._providers.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._providers

    def __iter__(self) -> Iterator[str]:
        return iter(self._providers)

    def __len__(self) -> int:
        return len(self._providers)

    def __repr__(self) -> str:
        return f"Registry({list(self._providers)!r})"

    def _add(
        self,
        name: str,
        kind: ProviderKind,
        factory: Any,
        dependencies: Sequence[str],
        options: RegistrationOptions,
    ) -> "Registry":
        """Return a new registry with the provider added or replaced.

        Raises:
            RegistrationConflictError: If already registered without override.
        """
        if name in self._providers and not options.override:
            raise RegistrationConflictError(name)

        try:
            provider = Provider(
                name=name,
                kind=kind,
                factory=factory,
                dependencies=options.map_dependencies(tuple(dependencies)),
                is_cacheable=options.is_cacheable,
            )
        except ValidationError as e:
            raise InvalidProviderError(name, str(e)) from e

        if name in self._providers:
            logger.debug("Overriding provider %r", name)
        logger.debug("Registered %s provider %r with dependencies %s", kind, name, provider.dependencies)

        providers: Dict[str, Provider] = dict(self._providers)
        providers[name] = provider
        return Registry(providers, self._name_resolver)

    def _dependencies_of(self, factory: Callable[..., Any], options: RegistrationOptions) -> Sequence[str]:
        if options.dependencies is not None:
            return options.dependencies
        return self._name_resolver.extract(factory)

    @staticmethod
    def _check_name(name: Any) -> None:
        if not isinstance(name, str) or not name:
            raise InvalidProviderError(name, "Provider name must be a non-empty string")

    @staticmethod
    def _options(
        name: str,
        override: bool,
        using: Optional[Mapping[str, str]],
        is_cacheable: bool,
        dependencies: Optional[Sequence[str]],
    ) -> RegistrationOptions:
        if isinstance(dependencies, str):
            raise InvalidProviderError(name, "dependencies must be a sequence of names, not a string")
        try:
            return RegistrationOptions(
                override=override,
                using=dict(using) if using else {},
                is_cacheable=is_cacheable,
                dependencies=tuple(dependencies) if dependencies is not None else None,
            )
        except (TypeError, ValueError) as e:
            raise InvalidProviderError(name, f"Invalid registration options: {e}") from e

import logging
from typing import Any, Mapping, Optional

from forkable_di.application.build_session import BuildSession, new_cycle_detector
from forkable_di.application.result_cache import ResultCache
from forkable_di.domain import DIException, IInjector, IResultCache, Provider

logger = logging.getLogger(__name__)


class Injector(IInjector):
    """Builds values from one finalized registry snapshot.

    Injectors hold state and typically live as long as the application. They
    keep the values of cacheable providers (a database connection, say) for
    their whole lifetime, while everything else is built anew on each call to
    ``build``. A provider is never built twice within one call, even when
    several dependents require it, and overlapping calls join the same
    in-flight resolution of a cacheable provider.

    Injectors should be created with ``Registry.finalize()``.

    Attributes:
        _providers: Read-only provider mapping of the registry snapshot.
        _cache: Values and in-flight resolutions of cacheable providers.
        _cycle_detector: Wait-for graph shared by concurrent builds.
    """

    def __init__(self, providers: Mapping[str, Provider], cache: Optional[IResultCache] = None) -> None:
        """Initialize the injector.

        Args:
            providers: Read-only mapping of provider names to providers.
            cache: Optional cache to use instead of a fresh ResultCache.
        """
        self._providers = providers
        self._cache: IResultCache = cache if cache is not None else ResultCache()
        self._cycle_detector = new_cycle_detector()

    @property
    def providers(self) -> Mapping[str, Provider]:
        """The provider mapping this injector builds from."""
        return self._providers

    async def build(self, name: str) -> Any:
        """Build the named provider, resolving its dependencies first.

        Dependencies resolve concurrently. When one of them fails, the build
        fails at once with that error, but sibling resolutions already started
        are not cancelled: they run to completion in the background, and a
        cacheable sibling that succeeds is still cached.

        Args:
            name: The provider to build.

        Returns:
            The built value, or the cached value for cacheable providers.

        Raises:
            ProviderNotFoundError: If the provider or a dependency is missing. The
                error's ``chain`` runs from the missing name back to ``name``.
            CycleDetectedError: If the dependency graph of ``name`` has a cycle.
            Exception: Any error raised by a factory, unmodified.

        Example:
            >>> injector = Registry().constant("port", 8080).finalize()
            >>> await injector.build("port")
            8080
        """
        logger.debug("Building provider %r", name)
        session = BuildSession(self._providers, self._cache, self._cycle_detector)
        try:
            return await session.resolve(name)
        except DIException as e:
            logger.debug("Build of provider %r failed: %s", name, e)
            raise

    def is_cached(self, name: str) -> bool:
        """Whether a value is cached for ``name``."""
        return name in self._cache

    def clear_cache(self) -> None:
        """Forget every cached value and in-flight cacheable resolution.

        Useful for testing or resetting injector state.
        """
        self._cache.clear()

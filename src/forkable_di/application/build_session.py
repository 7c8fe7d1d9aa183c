import asyncio
import inspect
import logging
from operator import itemgetter
from typing import Any, Dict, Hashable, Mapping, Optional, Sequence

from forkable_di.application.cycle_detector import CycleDetector
from forkable_di.domain import IResultCache, Provider, ProviderKind, ProviderNotFoundError

logger = logging.getLogger(__name__)


def new_cycle_detector() -> CycleDetector:
    """Create a detector for the ``(scope, name)`` nodes used by build sessions."""
    return CycleDetector(label=itemgetter(1))


class BuildSession:
    """Resolves one top-level build request against a provider snapshot.

    Dependencies are resolved concurrently and joined before the provider's
    construction rule runs. Each provider is built at most once per session:
    the in-flight task is shared by every provider that needs it. Cacheable
    providers go further: their in-flight tasks and values live in the
    injector's cache, so overlapping sessions join one resolution and the
    factory runs once per injector.

    Wait-for nodes are ``(None, name)`` for cacheable providers, shared by
    every session of the injector, and ``(session, name)`` for the others.

    Attributes:
        _providers: Read-only provider mapping of the injector.
        _cache: The injector's result cache.
        _in_flight: Tasks of non-cacheable providers started during this session.
        _cycle_detector: Wait-for graph of the providers in progress.
    """

    def __init__(
        self,
        providers: Mapping[str, Provider],
        cache: IResultCache,
        cycle_detector: Optional[CycleDetector] = None,
    ) -> None:
        """Initialize a session.

        Args:
            providers: The providers the session may build.
            cache: The injector's cache for cacheable providers.
            cycle_detector: Detector shared with the injector's other sessions.
        """
        self._providers = providers
        self._cache = cache
        self._in_flight: Dict[str, "asyncio.Future[Any]"] = {}
        self._cycle_detector = cycle_detector if cycle_detector is not None else new_cycle_detector()

    async def resolve(self, name: str, requester: Optional[str] = None) -> Any:
        """Resolve the value of a provider.

        Args:
            name: The provider to resolve.
            requester: The provider that depends on ``name``, None for the root request.

        Returns:
            The built (or cached) value.

        Raises:
            ProviderNotFoundError: If ``name`` or one of its dependencies is not registered.
            CycleDetectedError: If resolving ``name`` requires ``name`` itself.
        """
        provider = self._providers.get(name)
        if provider is None:
            raise ProviderNotFoundError(name)

        if provider.is_cacheable:
            found, value = self._cache.lookup(name)
            if found:
                logger.debug("Using cached value for provider %r", name)
                return value
            task = self._cache.pending(name)
        else:
            task = self._in_flight.get(name)

        if task is None:
            task = asyncio.ensure_future(self._build(provider))
            if provider.is_cacheable:
                self._cache.track(name, task)
            else:
                self._in_flight[name] = task
        elif requester is not None:
            self._cycle_detector.check_join(self._node(requester), self._node(name))

        if provider.is_cacheable:
            # Cancelling one caller must not cancel work other builds are joined to.
            return await asyncio.shield(task)
        return await task

    def _node(self, name: str) -> Hashable:
        provider = self._providers.get(name)
        if provider is not None and provider.is_cacheable:
            return (None, name)
        return (self, name)

    async def _build(self, provider: Provider) -> Any:
        node = self._node(provider.name)
        self._cycle_detector.enter(node, [self._node(dependency) for dependency in provider.dependencies])
        try:
            arguments = await asyncio.gather(
                *(self.resolve(dependency, provider.name) for dependency in provider.dependencies)
            )
        except ProviderNotFoundError as e:
            raise e.with_parent(provider.name) from None
        finally:
            self._cycle_detector.leave(node)

        try:
            value = await self._construct(provider, arguments)
        except Exception:
            logger.debug("Construction of provider %r failed", provider.name, exc_info=True)
            raise
        logger.debug("Built provider %r (%s)", provider.name, provider.kind)

        if provider.is_cacheable:
            value = self._cache.store(provider.name, value)
        return value

    @staticmethod
    async def _construct(provider: Provider, arguments: Sequence[Any]) -> Any:
        """Apply the construction rule of the provider's kind.

        Constants are returned as registered. Constructors and functions are
        invoked with the dependency values positionally, and an awaitable
        result is awaited.
        """
        if provider.kind == ProviderKind.CONSTANT:
            return provider.factory

        if provider.kind == ProviderKind.CONSTRUCTOR:
            value = provider.factory(*arguments)
        elif provider.kind == ProviderKind.FUNCTION:
            value = provider.factory(*arguments)
        else:
            raise ValueError(f"Unsupported provider kind: {provider.kind}")

        if inspect.isawaitable(value):
            value = await value
        return value

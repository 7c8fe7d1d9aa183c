"""Application layer - Ahead-of-time validation of a provider graph."""

from typing import Dict, List, Mapping

from forkable_di.domain import CycleDetectedError, Provider, ProviderNotFoundError

_VISITING = 1
_DONE = 2


class GraphValidator:
    """Checks a provider graph for missing dependencies and cycles before any build.

    Injectors detect both problems lazily while building; the validator lets an
    application fail fast at startup instead.
    """

    def validate(self, providers: Mapping[str, Provider]) -> None:
        """Validate that every dependency is registered and the graph is acyclic.

        Args:
            providers: Mapping of provider names to providers.

        Raises:
            ProviderNotFoundError: If a dependency is not registered. The chain
                is ``[missing, dependent]``.
            CycleDetectedError: If the graph contains a cycle.
        """
        for provider in providers.values():
            for dependency in provider.dependencies:
                if dependency not in providers:
                    raise ProviderNotFoundError(dependency, [dependency, provider.name])
        self.topological_order(providers)

    def topological_order(self, providers: Mapping[str, Provider]) -> List[str]:
        """Order provider names so that dependencies come before their dependents.

        Args:
            providers: Mapping of provider names to providers. Unregistered
                dependency names are ignored.

        Returns:
            Provider names in build order, ties broken by registration order.

        Raises:
            CycleDetectedError: If the graph contains a cycle.

        Example:
            >>> registry = Registry().constant("port", 8080).fn("server", lambda port: port)
            >>> GraphValidator().topological_order(registry.providers)
            ['port', 'server']
        """
        state: Dict[str, int] = {}
        order: List[str] = []
        for name in providers:
            self._visit(name, providers, state, [], order)
        return order

    def _visit(
        self,
        name: str,
        providers: Mapping[str, Provider],
        state: Dict[str, int],
        path: List[str],
        order: List[str],
    ) -> None:
        if state.get(name) == _DONE or name not in providers:
            return
        if state.get(name) == _VISITING:
            raise CycleDetectedError(path[path.index(name) :] + [name])

        state[name] = _VISITING
        path.append(name)
        for dependency in providers[name].dependencies:
            self._visit(dependency, providers, state, path, order)
        path.pop()
        state[name] = _DONE
        order.append(name)

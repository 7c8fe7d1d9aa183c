"""Application layer - Cycle detection among in-flight resolutions."""

from typing import Callable, Dict, Hashable, List, Optional, Sequence, Set, Tuple

from forkable_di.domain import CycleDetectedError


class CycleDetector:
    """Detects dependency cycles among resolutions in progress.

    Dependencies are resolved concurrently and a provider already being built
    is joined rather than rebuilt. The detector keeps a wait-for graph of the
    nodes currently in progress: joining an in-flight node that
    (transitively) waits on the joiner is a cycle, while joining shared work
    in a diamond is not.

    Nodes are any hashable keys. An injector shares one detector between its
    builds and keys nodes so that cacheable providers are shared and the
    others are private to a build; ``label`` turns a node back into the
    provider name reported in errors.

    Attributes:
        _waiting_on: Nodes awaited by each in-progress node.
        _label: Maps a node to the name used in cycle paths.
    """

    def __init__(self, label: Optional[Callable[[Hashable], str]] = None) -> None:
        """Initialize the detector with an empty wait-for graph.

        Args:
            label: Optional function naming a node; nodes are used as is otherwise.
        """
        self._waiting_on: Dict[Hashable, Tuple[Hashable, ...]] = {}
        self._label = label if label is not None else str

    def enter(self, node: Hashable, dependencies: Sequence[Hashable]) -> None:
        """Record that ``node`` is about to wait on its dependencies.

        Args:
            node: The node starting its fan-out.
            dependencies: The nodes it will wait on.
        """
        self._waiting_on[node] = tuple(dependencies)

    def leave(self, node: Hashable) -> None:
        """Record that ``node`` no longer waits on anything."""
        self._waiting_on.pop(node, None)

    def check_join(self, requester: Hashable, target: Hashable) -> None:
        """Verify that ``requester`` may wait on the in-flight ``target``.

        Args:
            requester: The node that needs the value of ``target``.
            target: A node whose resolution is already in flight.

        Raises:
            CycleDetectedError: If ``target`` transitively waits on ``requester``.

        Example:
            >>> detector = CycleDetector()
            >>> detector.enter("a", ["b"])
            >>> detector.enter("b", ["a"])
            >>> detector.check_join("b", "a")  # Raises CycleDetectedError(a -> b -> a)
        """
        path = self._find_path(target, requester)
        if path is not None:
            raise CycleDetectedError([self._label(node) for node in path + [target]])

    def _find_path(self, start: Hashable, goal: Hashable) -> Optional[List[Hashable]]:
        # Depth-first search over the wait-for edges.
        stack: List[Tuple[Hashable, List[Hashable]]] = [(start, [start])]
        visited: Set[Hashable] = set()
        while stack:
            node, path = stack.pop()
            if node == goal:
                return path
            if node in visited:
                continue
            visited.add(node)
            for dependency in reversed(self._waiting_on.get(node, ())):
                if dependency not in visited:
                    stack.append((dependency, path + [dependency]))
        return None

import asyncio
from typing import Any, Dict, Optional, Tuple

from forkable_di.domain import IResultCache


class ResultCache(IResultCache):
    """Holds the values of cacheable providers for an injector's lifetime.

    Besides finished values, the cache tracks the resolutions of cacheable
    providers that are still in flight, so that overlapping builds join the
    same work instead of running the factory again. Only successfully built
    values are stored: a resolution that fails stops being tracked and leaves
    no value behind.

    Attributes:
        _values: Cached values keyed by provider name.
        _pending: In-flight resolutions keyed by provider name.
    """

    def __init__(self, values: Optional[Dict[str, Any]] = None) -> None:
        """Initialize the cache.

        Args:
            values: Optional pre-populated values, copied into the cache.
        """
        self._values: Dict[str, Any] = dict(values) if values else {}
        self._pending: Dict[str, "asyncio.Future[Any]"] = {}

    def lookup(self, name: str) -> Tuple[bool, Any]:
        """Look up a cached value.

        Args:
            name: The provider name.

        Returns:
            ``(True, value)`` when a value is cached, ``(False, None)`` otherwise.
        """
        if name in self._values:
            return True, self._values[name]
        return False, None

    def store(self, name: str, value: Any) -> Any:
        """Store a built value unless one is already cached.

        Args:
            name: The provider name.
            value: The freshly built value.

        Returns:
            The value now held by the cache.
        """
        return self._values.setdefault(name, value)

    def pending(self, name: str) -> Optional["asyncio.Future[Any]"]:
        """Return the unfinished resolution tracked for ``name``, if any."""
        future = self._pending.get(name)
        if future is None or future.done():
            return None
        return future

    def track(self, name: str, future: "asyncio.Future[Any]") -> None:
        """Track an in-flight resolution until it finishes.

        Args:
            name: The provider name.
            future: The resolution building the provider's value.
        """
        self._pending[name] = future
        future.add_done_callback(lambda done: self._untrack(name, done))

    def clear(self) -> None:
        """Clear every cached value and stop tracking in-flight resolutions."""
        self._values.clear()
        self._pending.clear()

    def _untrack(self, name: str, future: "asyncio.Future[Any]") -> None:
        # A clear() followed by a new build may have replaced the entry.
        if self._pending.get(name) is future:
            del self._pending[name]

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def __len__(self) -> int:
        return len(self._values)

import inspect
from typing import Any, Callable, Tuple, TypeVar

from forkable_di.domain import IDependencyNameResolver, InvalidProviderError

F = TypeVar("F", bound=Callable[..., Any])

INJECT_ATTRIBUTE = "__inject__"

_SKIPPED_KINDS = (
    inspect.Parameter.VAR_POSITIONAL,
    inspect.Parameter.VAR_KEYWORD,
    inspect.Parameter.KEYWORD_ONLY,
)


def inject(*names: str) -> Callable[[F], F]:
    """Attach an explicit, ordered list of dependency names to a factory.

    Explicit names take precedence over signature introspection, which makes
    them the way to wire factories whose parameter names differ from the
    registry names, or whose signature cannot be inspected.

    Args:
        *names: Registry names, in positional argument order.

    Returns:
        A decorator returning the factory unchanged apart from the attached names.

    Example:
        >>> @inject("primary_db", "settings")
        ... def make_repository(db, config):
        ...     return Repository(db, config)
    """
    for name in names:
        if not isinstance(name, str) or not name:
            raise TypeError(f"Dependency names must be non-empty strings, got {name!r}")

    def decorator(factory: F) -> F:
        setattr(factory, INJECT_ATTRIBUTE, tuple(names))
        return factory

    return decorator


class DependencyNameResolver(IDependencyNameResolver):
    """Reads dependency names from explicit metadata or from a factory's signature.

    Uses Python's inspect module to list the required positional parameters of
    a callable, or of a class constructor.
    """

    def extract(self, factory: Callable[..., Any]) -> Tuple[str, ...]:
        """Return the ordered dependency names of a factory.

        Args:
            factory: A class or callable.

        Returns:
            Names attached with ``@inject`` when present, otherwise the names of
            the required positional parameters. Empty for no-argument factories.

        Raises:
            InvalidProviderError: If the explicit names are malformed or the
                signature cannot be inspected.

        Example:
            >>> class UserService:
            ...     def __init__(self, repository, clock=None):
            ...         ...
            >>> DependencyNameResolver().extract(UserService)
            ('repository',)
        """
        explicit = getattr(factory, INJECT_ATTRIBUTE, None)
        if explicit is not None:
            return self._validate_explicit(factory, explicit)

        if inspect.isclass(factory) and factory.__init__ is object.__init__:
            return ()

        try:
            signature = inspect.signature(factory)
        except (TypeError, ValueError) as e:
            raise InvalidProviderError(
                _describe(factory),
                f"Cannot inspect signature ({e}); declare dependencies explicitly with @inject",
            ) from e

        return tuple(
            param_name
            for param_name, param in signature.parameters.items()
            if param.kind not in _SKIPPED_KINDS and param.default is inspect.Parameter.empty
        )

    @staticmethod
    def _validate_explicit(factory: Callable[..., Any], explicit: Any) -> Tuple[str, ...]:
        if isinstance(explicit, str) or not isinstance(explicit, (list, tuple)):
            raise InvalidProviderError(
                _describe(factory),
                f"{INJECT_ATTRIBUTE} must be a list or tuple of names",
            )
        for name in explicit:
            if not isinstance(name, str) or not name:
                raise InvalidProviderError(
                    _describe(factory),
                    f"{INJECT_ATTRIBUTE} contains an invalid name: {name!r}",
                )
        return tuple(explicit)


def _describe(factory: Any) -> str:
    return getattr(factory, "__qualname__", None) or repr(factory)

from typing import Optional, Sequence, Tuple


class DIException(Exception):
    """Base exception for DI-related errors."""


class InvalidProviderError(DIException):
    """Raised when a provider cannot be registered.

    This occurs when:
    - The factory given to ``ctor`` or ``fn`` is not callable.
    - The value given to ``constant`` is None.
    - The name or the registration options are malformed.

    Attributes:
        name: The provider name being registered.
        reason: Optional reason for the failure.
    """

    def __init__(self, name: object, reason: Optional[str] = None) -> None:
        self.name = name
        self.reason = reason
        message = f"Invalid provider {name!r}"
        if reason:
            message += f". Reason: {reason}"
        super().__init__(message)


class RegistrationConflictError(DIException):
    """Raised when a name is registered twice without ``override=True``.

    Attributes:
        name: The provider name already present in the registry.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Provider {name!r} is already registered; pass override=True to replace it")


class ProviderNotFoundError(DIException):
    """Raised during a build when a referenced provider is not registered.

    Attributes:
        name: The provider name that could not be found.
        chain: Names from the failure point back to the requested root.
    """

    def __init__(self, name: str, chain: Optional[Sequence[str]] = None) -> None:
        self.name = name
        self.chain: Tuple[str, ...] = tuple(chain) if chain else (name,)
        message = f"Provider not found for {name!r}"
        if len(self.chain) > 1:
            message += f" (in dependency chain: {' -> '.join(self.chain)})"
        super().__init__(message)

    def with_parent(self, parent: str) -> "ProviderNotFoundError":
        """Return a copy of this error with ``parent`` appended to the chain."""
        return ProviderNotFoundError(self.name, self.chain + (parent,))


class CycleDetectedError(DIException):
    """Raised when the dependency graph contains a cycle.

    Attributes:
        cycle: Provider names forming the cycle, first name repeated last.
    """

    def __init__(self, cycle: Sequence[str]) -> None:
        self.cycle: Tuple[str, ...] = tuple(cycle)
        super().__init__(f"Circular dependency detected: {' -> '.join(self.cycle)}")

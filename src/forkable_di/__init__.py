"""
forkable-di: Asynchronous dependency injection over immutable, forkable registries.

Public API exports for the forkable-di package.
"""

# Application exports
from forkable_di.application.dependency_names import inject
from forkable_di.application.graph_validator import GraphValidator
from forkable_di.application.injector import Injector
from forkable_di.application.registry import Registry

# Domain exports
from forkable_di.domain.enums import ProviderKind
from forkable_di.domain.exceptions import (
    CycleDetectedError,
    DIException,
    InvalidProviderError,
    ProviderNotFoundError,
    RegistrationConflictError,
)
from forkable_di.domain.models import Provider

__version__ = "0.1.0"

__all__ = [
    # Registry and injector
    "Registry",
    "Injector",
    "GraphValidator",
    "inject",
    # Models
    "Provider",
    "ProviderKind",
    # Exceptions
    "DIException",
    "InvalidProviderError",
    "RegistrationConflictError",
    "ProviderNotFoundError",
    "CycleDetectedError",
]

"""
Domain layer - Core models, errors and contracts.

This layer describes providers, registration options and the error taxonomy.
It has no dependencies on other layers.
"""

from .enums import ProviderKind
from .exceptions import (
    CycleDetectedError,
    DIException,
    InvalidProviderError,
    ProviderNotFoundError,
    RegistrationConflictError,
)
from .interfaces import IDependencyNameResolver, IInjector, IRegistry, IResultCache
from .models import Provider, RegistrationOptions

__all__ = [
    # Enums
    "ProviderKind",
    # Exceptions
    "DIException",
    "InvalidProviderError",
    "RegistrationConflictError",
    "ProviderNotFoundError",
    "CycleDetectedError",
    # Interfaces
    "IRegistry",
    "IInjector",
    "IDependencyNameResolver",
    "IResultCache",
    # Models
    "Provider",
    "RegistrationOptions",
]

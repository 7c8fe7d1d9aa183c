"""
Application layer - Registration and resolution.

This layer contains the registry, the injector and the resolution engine.
It depends only on the Domain layer.
"""

from .build_session import BuildSession
from .cycle_detector import CycleDetector
from .dependency_names import DependencyNameResolver, inject
from .graph_validator import GraphValidator
from .injector import Injector
from .registry import Registry
from .result_cache import ResultCache

__all__ = [
    "Registry",
    "Injector",
    "BuildSession",
    "ResultCache",
    "CycleDetector",
    "DependencyNameResolver",
    "GraphValidator",
    "inject",
]

"""
Testing utilities module.

Provides helpers for testing applications that use forkable-di.
"""

from .utilities import create_mock_injector, override_providers

__all__ = [
    "override_providers",
    "create_mock_injector",
]

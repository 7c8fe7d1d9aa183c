"""
FastAPI integration module.

Provides helpers for building providers inside FastAPI applications.
"""

from .integration import (
    RequestInjectorMiddleware,
    create_fastapi_dependency,
    create_request_dependency,
)

__all__ = [
    "create_fastapi_dependency",
    "create_request_dependency",
    "RequestInjectorMiddleware",
]

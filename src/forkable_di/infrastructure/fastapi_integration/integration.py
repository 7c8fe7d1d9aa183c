from typing import Any, Awaitable, Callable

from fastapi import FastAPI, Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from forkable_di.domain import IInjector, IRegistry


def create_fastapi_dependency(injector: IInjector, name: str) -> Callable[[], Awaitable[Any]]:
    """Create a FastAPI Depends() callable that builds a provider from an injector.

    Cacheable providers are shared across requests, since the injector
    outlives them; every other provider is built anew for each request.

    Args:
        injector: The injector to build from.
        name: The provider to build when the dependency is called.

    Returns:
        An async callable that FastAPI can use with Depends().

    Example:
        >>> injector = registry.finalize()
        >>> get_users = create_fastapi_dependency(injector, "user_repository")
        >>>
        >>> @app.get("/users")
        >>> async def list_users(repo=Depends(get_users)):
        ...     return await repo.get_all()
    """

    async def dependency() -> Any:
        """Build the provider from the injector."""
        return await injector.build(name)

    return dependency


def create_request_dependency(name: str) -> Callable[[Request], Awaitable[Any]]:
    """Create a FastAPI dependency that builds from the request's injector.

    Requires the RequestInjectorMiddleware to be installed.

    Args:
        name: The provider to build.

    Returns:
        An async callable that builds from the request-bound injector.

    Example:
        >>> app.add_middleware(RequestInjectorMiddleware, registry=registry)
        >>>
        >>> get_context = create_request_dependency("request_context")
        >>>
        >>> @app.get("/process")
        >>> async def process(ctx=Depends(get_context)):
        ...     return {"request_id": ctx.request_id}
    """

    async def request_dependency(request: Request) -> Any:
        """Build from the request's injector."""
        injector = getattr(request.state, "injector", None)
        if injector is None:
            raise RuntimeError(
                "Request does not have an injector. Did you forget to add RequestInjectorMiddleware?"
            )
        return await injector.build(name)

    return request_dependency


class RequestInjectorMiddleware(BaseHTTPMiddleware):
    """Middleware that finalizes a fresh injector for each request.

    Cacheable providers therefore live for exactly one request. The injector
    is accessible via ``request.state.injector``.

    Attributes:
        registry: The registry injectors are finalized from.

    Example:
        >>> app = FastAPI()
        >>> app.add_middleware(RequestInjectorMiddleware, registry=registry)
        >>>
        >>> @app.get("/")
        >>> async def root(request: Request):
        ...     settings = await request.state.injector.build("settings")
        ...     return {"name": settings.name}
    """

    def __init__(self, app: FastAPI, registry: IRegistry):
        """Initialize the middleware with a registry.

        Args:
            app: The FastAPI/Starlette application.
            registry: The registry to finalize an injector from on each request.
        """
        super().__init__(app)
        self.registry = registry

    async def dispatch(self, request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
        """Attach a request injector and execute the endpoint.

        Args:
            request: The incoming HTTP request.
            call_next: The next middleware or endpoint handler.

        Returns:
            The response from the endpoint.
        """
        injector = self.registry.finalize()
        request.state.injector = injector

        try:
            return await call_next(request)
        finally:
            injector.clear_cache()

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING, Optional

from fastapi import FastAPI, Request, Response
from starlette.concurrency import run_in_threadpool
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

if TYPE_CHECKING:
    from .client import Client

__all__ = ["ErrorReportingMiddleware", "setup_error_reporting"]

logger = logging.getLogger(__name__)


class ErrorReportingMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, *, client: "Client") -> None:
        super().__init__(app)
        self.client = client

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            result = await run_in_threadpool(self.client.report_error, exc)
            if not result:
                logger.debug(
                    "Unhandled %s on %s %s was not reported",
                    type(exc).__name__,
                    request.method,
                    self._resolve_route(request),
                )
            raise

    def _resolve_route(self, request: Request) -> str:
        route = request.scope.get("route")
        if route and hasattr(route, "path"):
            return route.path  # type: ignore[attr-defined]
        return request.url.path


def setup_error_reporting(
    app: FastAPI,
    access_token: Optional[str] = None,
    environment: Optional[str] = None,
    endpoint: Optional[str] = None,
    enabled: Optional[bool] = None,
    install_hook: bool = False,
) -> Optional["Client"]:
    """
    Set up error reporting for a FastAPI application.

    Unhandled exceptions raised by request handlers are reported and then
    re-raised so FastAPI still produces its normal error response.
    All parameters are optional and default to environment variables.

    Args:
        app: The FastAPI application instance
        access_token: Project access token (default: ROLLBAR_ACCESS_TOKEN env var)
        environment: Environment name (default: ROLLBAR_ENVIRONMENT, then ENV, fallback to "production")
        endpoint: Item endpoint URL (default: ROLLBAR_ENDPOINT env var, fallback to the public API)
        enabled: Whether to enable reporting (default: from ROLLBAR_ENABLED env var, default True)
        install_hook: Also report uncaught exceptions outside request handling

    Returns:
        Client instance if enabled and configured, None otherwise
    """
    from .client import Client
    from .config import ReporterConfig

    if enabled is None:
        enabled = os.environ.get("ROLLBAR_ENABLED", "true").lower() == "true"

    if not enabled:
        return None

    if not (access_token or os.environ.get("ROLLBAR_ACCESS_TOKEN")):
        logger.warning("No Rollbar access token configured; error reporting skipped.")
        return None

    config = ReporterConfig.from_env(
        access_token=access_token,
        environment=environment,
        endpoint=endpoint,
    )

    client = Client(config)
    app.add_middleware(ErrorReportingMiddleware, client=client)
    if install_hook:
        client.report_panics()

    @app.on_event("shutdown")
    async def shutdown_error_reporting():
        if install_hook:
            from .hooks import installed_client, uninstall

            if installed_client() is client:
                uninstall()
        client.close()

    return client

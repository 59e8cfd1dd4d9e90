"""FastAPI application factory."""

import base64
import logging
import secrets
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from config.settings import settings
from src.api.routes import router
from src.chat import ChatService
from src.db.session import close_pool, get_pool
from src.errors import SmartSplitError
from src.llm.gateway import LLMGateway
from src.planner import TaxPlanner

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup: init DB pool, build services. Shutdown: close pool."""
    logging.basicConfig(level=logging.INFO)
    logger.info("Starting up...")

    pool = await get_pool()
    llm = LLMGateway()
    app.state.pool = pool
    app.state.planner = TaxPlanner(llm, pool=pool)
    app.state.chat = ChatService(llm, pool)

    yield

    logger.info("Shutting down...")
    await close_pool()


UNAUTHORIZED = Response(
    content="Unauthorized",
    status_code=401,
    headers={"WWW-Authenticate": "Basic"},
)


AUTH_USERNAME = settings.auth_username.encode()
AUTH_PASSWORD = settings.auth_password.encode()


class BasicAuthMiddleware(BaseHTTPMiddleware):
    """Enforce HTTP Basic Auth on all requests except the health check."""

    async def dispatch(self, request: Request, call_next):  # type: ignore[override]
        if request.url.path == "/health":
            return await call_next(request)
        auth = request.headers.get("Authorization")
        if auth and auth.startswith("Basic "):
            try:
                decoded = base64.b64decode(auth[6:]).decode()
                username, password = decoded.split(":", 1)
            except ValueError:
                return UNAUTHORIZED
            if secrets.compare_digest(username.encode(), AUTH_USERNAME) and secrets.compare_digest(
                password.encode(), AUTH_PASSWORD
            ):
                return await call_next(request)
        return UNAUTHORIZED


async def _smartsplit_error(request: Request, exc: SmartSplitError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s on %s: %s", type(exc).__name__, request.url.path, exc.message)
    return JSONResponse({"error": exc.message}, status_code=exc.status_code)


def install_error_handlers(app: FastAPI) -> None:
    """Map application errors onto ``{"error": message}`` JSON responses."""
    app.add_exception_handler(SmartSplitError, _smartsplit_error)  # type: ignore[arg-type]


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(title="SmartSplit Tax Planner", lifespan=lifespan)
    if AUTH_USERNAME:
        app.add_middleware(BasicAuthMiddleware)
    install_error_handlers(app)
    app.include_router(router)
    return app

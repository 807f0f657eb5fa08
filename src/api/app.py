"""FastAPI application factory and configuration.

Main application entry point with lifespan management, middleware,
error handlers and router registration.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.api.chat import router as chat_router
from src.models.schemas import ErrorResponse
from src.relay.errors import InvalidRequestError, RelayError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Manage application startup and shutdown lifecycle.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control to the application while it runs.
    """
    logger.info("Starting chat relay API...")
    yield
    logger.info("Shutting down chat relay API...")


def _error_response(error: RelayError) -> JSONResponse:
    body = ErrorResponse(error=error.message, details=error.details)
    return JSONResponse(
        status_code=error.status_code,
        content=body.model_dump(exclude_none=True),
    )


async def relay_error_handler(request: Request, exc: RelayError) -> JSONResponse:
    """Render a RelayError as a single JSON error object."""
    logger.error(f"Chat API error ({exc.status_code}): {exc.message}")
    return _error_response(exc)


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report a malformed request body as a 400 JSON error."""
    summary = "; ".join(
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
        for err in exc.errors()
    )
    logger.warning(f"Rejected malformed chat request: {summary}")
    return _error_response(InvalidRequestError(details=summary or None))


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    application = FastAPI(
        title="Chat Relay API",
        description=(
            "Streaming relay between a browser chat UI and the Anthropic "
            "Messages API. Forwards the conversation history and streams the "
            "reply back as newline-delimited JSON."
        ),
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["*"],
    )

    application.add_exception_handler(RelayError, relay_error_handler)
    application.add_exception_handler(RequestValidationError, validation_error_handler)

    application.include_router(chat_router)

    @application.get("/health")
    async def health_check() -> dict[str, str]:
        """Check service health status."""
        return {"status": "healthy", "service": "chat-relay"}

    return application


app = create_app()

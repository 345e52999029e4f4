import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from notify_chat.config import get_settings
from notify_chat.infrastructure.database import engine, initialize_database
from notify_chat.infrastructure.push import reset_push_gateway
from notify_chat.interfaces.api.routes import register_routes
from notify_chat.utils import isoformat_utc

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the database tables on startup and release resources on shutdown."""

    initialize_database()
    yield
    reset_push_gateway()
    engine.dispose()


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error processing %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "details": str(exc),
            "timestamp": isoformat_utc(),
        },
    )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    settings = get_settings()
    app = FastAPI(title="notify-chat", lifespan=lifespan)

    origins = settings.cors_origins()
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
    )
    app.add_exception_handler(Exception, unhandled_exception_handler)

    register_routes(app)
    return app


app = create_app()

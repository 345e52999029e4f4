from fastapi import FastAPI

from .notify_chat import router as notify_chat_router
from .welcome_email import router as welcome_email_router


def register_routes(app: FastAPI) -> None:
    """Register every API router on the FastAPI application."""

    app.include_router(notify_chat_router)
    app.include_router(welcome_email_router)

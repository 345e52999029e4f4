"""Pydantic models for the welcome email endpoint."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class WelcomeEmailRequest(BaseModel):
    """Signup event forwarded by the client after registration.

    Every field is optional at the schema level so that missing data is
    reported as a 400 by the endpoint instead of a validation error.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    user_id: str | None = None
    user_email: str | None = None
    user_name: str | None = None
    login_method: str | None = None
    timestamp: str | None = None


class WelcomeEmailResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool
    message: str
    user_id: str
    user_email: str
    user_name: str
    login_method: str | None = None
    timestamp: str | None = None


__all__ = ["WelcomeEmailRequest", "WelcomeEmailResponse"]

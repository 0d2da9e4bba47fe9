"""Request body models for the HTTP API."""

from typing import Any

from pydantic import BaseModel, ConfigDict


class CredentialsPayload(BaseModel):
    """Name and password submitted to register or log in.

    Values are left untyped; the auth service coerces them to strings.
    """

    model_config = ConfigDict(extra="ignore")

    name: Any = None
    password: Any = None

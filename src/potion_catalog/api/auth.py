"""Registration, login and logout endpoints with cookie sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Request, Response, status

from potion_catalog.api.models import CredentialsPayload
from potion_catalog.domain.users import SessionUser  # noqa: TC001
from potion_catalog.services.security import TOKEN_TTL

if TYPE_CHECKING:
    from potion_catalog.containers import AppContainer

router = APIRouter(prefix="/auth", tags=["auth"])


async def require_session(request: Request) -> SessionUser:
    """Reject the request unless it carries a valid session cookie."""
    container: AppContainer = request.app.state.container
    token = request.cookies.get(container.settings.cookie_name)
    return container.auth_service.authenticate(token)


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(
    request: Request, payload: CredentialsPayload | None = None
) -> dict[str, str]:
    """Create a user account."""
    container: AppContainer = request.app.state.container
    credentials = payload or CredentialsPayload()
    container.auth_service.register(credentials.name, credentials.password)
    return {"message": "User created"}


@router.post("/login")
def login(
    request: Request, response: Response, payload: CredentialsPayload | None = None
) -> dict[str, str]:
    """Log in and deliver the session token as an HTTP-only cookie."""
    container: AppContainer = request.app.state.container
    credentials = payload or CredentialsPayload()
    token = container.auth_service.login(credentials.name, credentials.password)
    response.set_cookie(
        container.settings.cookie_name,
        token,
        max_age=int(TOKEN_TTL.total_seconds()),
        path="/",
        httponly=True,
        samesite="strict",
        secure=container.settings.cookie_secure,
    )
    return {"message": "Logged in"}


@router.get("/logout")
def logout(request: Request, response: Response) -> dict[str, str]:
    """Clear the session cookie; succeeds without a session too."""
    container: AppContainer = request.app.state.container
    response.delete_cookie(
        container.settings.cookie_name,
        path="/",
        httponly=True,
        samesite="strict",
        secure=container.settings.cookie_secure,
    )
    return {"message": "Logged out"}

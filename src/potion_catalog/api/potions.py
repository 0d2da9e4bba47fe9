"""Potion catalog endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from fastapi import APIRouter, Body, Depends, Query, Request, status

from potion_catalog.api.auth import require_session
from potion_catalog.domain.users import SessionUser  # noqa: TC001
from potion_catalog.services.catalog import serialize_potion

if TYPE_CHECKING:
    from potion_catalog.containers import AppContainer

router = APIRouter(prefix="/potions", tags=["potions"])


@router.get("")
def list_potions(request: Request) -> list[dict[str, object]]:
    """Return every potion."""
    container: AppContainer = request.app.state.container
    return [serialize_potion(p) for p in container.catalog_service.list_all()]


@router.get("/names")
def list_names(request: Request) -> list[str]:
    """Return potion names only."""
    container: AppContainer = request.app.state.container
    return container.catalog_service.list_names()


@router.get("/vendor/{vendor_id}")
def list_by_vendor(vendor_id: str, request: Request) -> list[dict[str, object]]:
    """Return potions for a vendor."""
    container: AppContainer = request.app.state.container
    potions = container.catalog_service.list_by_vendor(vendor_id)
    return [serialize_potion(p) for p in potions]


@router.get("/price-range")
def list_by_price_range(
    request: Request,
    min_price: str | None = Query(default=None, alias="min"),
    max_price: str | None = Query(default=None, alias="max"),
) -> list[dict[str, object]]:
    """Return potions within optional price bounds."""
    container: AppContainer = request.app.state.container
    potions = container.catalog_service.list_by_price_range(min_price, max_price)
    return [serialize_potion(p) for p in potions]


@router.get("/{potion_id}")
def get_potion(potion_id: str, request: Request) -> dict[str, object]:
    """Return a single potion."""
    container: AppContainer = request.app.state.container
    return serialize_potion(container.catalog_service.get(potion_id))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_potion(
    request: Request,
    payload: Any = Body(default=None),
    actor: SessionUser = Depends(require_session),
) -> dict[str, object]:
    """Create a potion."""
    container: AppContainer = request.app.state.container
    return serialize_potion(container.catalog_service.create(payload, actor))


@router.post("/{potion_id}")
def update_potion(
    potion_id: str,
    request: Request,
    payload: Any = Body(default=None),
    actor: SessionUser = Depends(require_session),
) -> dict[str, object]:
    """Apply a partial update to a potion."""
    container: AppContainer = request.app.state.container
    potion = container.catalog_service.update(potion_id, payload or {}, actor)
    return serialize_potion(potion)


@router.delete("/{potion_id}")
def delete_potion(
    potion_id: str,
    request: Request,
    actor: SessionUser = Depends(require_session),
) -> dict[str, str]:
    """Delete a potion."""
    container: AppContainer = request.app.state.container
    return container.catalog_service.delete(potion_id, actor)

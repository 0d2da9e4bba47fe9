"""Aggregation endpoints over the potion catalog."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Query, Request

if TYPE_CHECKING:
    from potion_catalog.containers import AppContainer

router = APIRouter(prefix="/analytics", tags=["analytics"])


@router.get("/distinct-categories")
def distinct_categories(request: Request) -> dict[str, object]:
    """Return distinct categories with their count."""
    container: AppContainer = request.app.state.container
    return container.analytics_service.distinct_categories()


@router.get("/average-score-by-vendor")
def average_score_by_vendor(request: Request) -> list[dict[str, object]]:
    """Return the mean score per vendor."""
    container: AppContainer = request.app.state.container
    return container.analytics_service.average_score_by_vendor()


@router.get("/average-score-by-category")
def average_score_by_category(request: Request) -> list[dict[str, object]]:
    """Return the mean score per category."""
    container: AppContainer = request.app.state.container
    return container.analytics_service.average_score_by_category()


@router.get("/strength-flavor-ratio")
def strength_flavor_ratio(request: Request) -> list[dict[str, object]]:
    """Return the strength to flavor ratio of each potion."""
    container: AppContainer = request.app.state.container
    return container.analytics_service.strength_flavor_ratio()


@router.get("/search")
def search(
    request: Request,
    group_by: str | None = Query(default=None, alias="groupBy"),
    metric: str | None = None,
    field: str | None = None,
) -> list[dict[str, object]]:
    """Run a dynamic group-and-metric aggregation."""
    container: AppContainer = request.app.state.container
    return container.analytics_service.search(group_by, metric, field)

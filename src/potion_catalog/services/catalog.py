"""Catalog service for potion CRUD and filtered listings."""

import logging
import re
from dataclasses import dataclass
from typing import Protocol

from pydantic import ValidationError

from potion_catalog.domain.potions import Potion, PotionDocument
from potion_catalog.domain.users import SessionUser
from potion_catalog.errors import NotFound, ValidationFailed

logger = logging.getLogger(__name__)

# Longest leading decimal; anything after it is ignored.
_LEADING_NUMBER = re.compile(
    r"[+-]?(?:Infinity|(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?)"
)


class PotionRepository(Protocol):
    """Persistence interface for potion documents."""

    def find(self, query: dict[str, object]) -> list[Potion]:
        """Return potions matching a filter document."""

    def find_names(self) -> list[str]:
        """Return the name of every potion."""

    def get(self, potion_id: str) -> Potion | None:
        """Return a potion by id, if present."""

    def insert(self, document: dict[str, object]) -> Potion:
        """Insert a potion document and return it with its id."""

    def update(self, potion_id: str, changes: dict[str, object]) -> Potion | None:
        """Set the given fields on a potion and return the updated record."""

    def delete(self, potion_id: str) -> bool:
        """Delete a potion, returning whether it existed."""

    def distinct(self, field: str) -> list[object]:
        """Return the distinct values of a field across all potions."""

    def aggregate(self, pipeline: list[dict[str, object]]) -> list[dict[str, object]]:
        """Run an aggregation pipeline and return its raw output."""


@dataclass
class CatalogService:
    """Application service for potion catalog operations."""

    repository: PotionRepository

    def list_all(self) -> list[Potion]:
        """Return every potion."""
        return self.repository.find({})

    def list_names(self) -> list[str]:
        """Return potion names only."""
        return self.repository.find_names()

    def list_by_vendor(self, vendor_id: str) -> list[Potion]:
        """Return potions sold by a vendor."""
        return self.repository.find({"vendor_id": vendor_id})

    def list_by_price_range(
        self, min_price: str | None = None, max_price: str | None = None
    ) -> list[Potion]:
        """Return potions priced within the bounds.

        A bound is read from its leading number, so ``"10abc"`` means 10;
        a bound with no leading number is ignored.
        """
        query = build_price_filter(_parse_bound(min_price), _parse_bound(max_price))
        return self.repository.find(query)

    def get(self, potion_id: str) -> Potion:
        """Return a potion or raise NotFound."""
        potion = self.repository.get(potion_id)
        if potion is None:
            raise NotFound("Potion not found")
        return potion

    def create(self, payload: object, actor: SessionUser) -> Potion:
        """Validate and store a new potion."""
        document = _validate(payload)
        potion = self.repository.insert(document)
        logger.info(
            "Potion created", extra={"potion_id": potion.id, "actor": actor.name}
        )
        return potion

    def update(self, potion_id: str, payload: object, actor: SessionUser) -> Potion:
        """Apply the submitted fields to an existing potion."""
        changes = _validate(payload)
        if not changes:
            return self.get(potion_id)
        potion = self.repository.update(potion_id, changes)
        if potion is None:
            raise NotFound("Potion not found")
        logger.info(
            "Potion updated",
            extra={
                "potion_id": potion_id,
                "fields": sorted(changes),
                "actor": actor.name,
            },
        )
        return potion

    def delete(self, potion_id: str, actor: SessionUser) -> dict[str, str]:
        """Delete a potion and return a confirmation."""
        if not self.repository.delete(potion_id):
            raise NotFound("Potion not found")
        logger.info(
            "Potion deleted", extra={"potion_id": potion_id, "actor": actor.name}
        )
        return {"message": "Potion deleted"}


def build_price_filter(
    min_price: float | None, max_price: float | None
) -> dict[str, object]:
    """Build a price filter; absent bounds leave that side open."""
    price_filter: dict[str, float] = {}
    if min_price is not None:
        price_filter["$gte"] = min_price
    if max_price is not None:
        price_filter["$lte"] = max_price
    return {"price": price_filter} if price_filter else {}


def serialize_potion(potion: Potion) -> dict[str, object]:
    """Return the JSON representation of a potion."""
    return {
        "_id": potion.id,
        "name": potion.name,
        "price": potion.price,
        "score": potion.score,
        "ingredients": list(potion.ingredients),
        "ratings": potion.ratings,
        "tryDate": potion.try_date.isoformat() if potion.try_date else None,
        "categories": list(potion.categories),
        "vendor_id": potion.vendor_id,
    }


def _parse_bound(raw: str | None) -> float | None:
    if raw is None:
        return None
    match = _LEADING_NUMBER.match(raw.lstrip())
    if match is None:
        return None
    return float(match.group())


def _validate(payload: object) -> dict[str, object]:
    """Validate a potion payload and return only the submitted fields."""
    try:
        document = PotionDocument.model_validate(payload)
    except ValidationError as exc:
        raise ValidationFailed(_format_validation_error(exc)) from exc
    return document.model_dump(exclude_unset=True)


def _format_validation_error(exc: ValidationError) -> str:
    details = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"]) or "body"
        details.append(f"{location}: {error['msg']}")
    return "Potion validation failed: " + ", ".join(details)

"""Domain models for the potion catalog."""

from dataclasses import dataclass, field
from datetime import date

from pydantic import BaseModel, ConfigDict, Field


@dataclass(frozen=True)
class Potion:
    """Represents a potion stored in the catalog."""

    id: str
    name: str | None = None
    price: float | None = None
    score: float | None = None
    ingredients: list[str] = field(default_factory=list)
    ratings: dict[str, float | None] | None = None
    try_date: date | None = None
    categories: list[str] = field(default_factory=list)
    vendor_id: str | None = None


class Ratings(BaseModel):
    """Strength and flavor ratings of a potion."""

    strength: float | None = None
    flavor: float | None = None


class PotionDocument(BaseModel):
    """Accepted shape of a potion document.

    Unknown keys are dropped and the identifier cannot be supplied by
    callers. No field is required so the same schema validates partial
    updates.
    """

    model_config = ConfigDict(extra="ignore")

    name: str | None = None
    price: float | None = Field(default=None, ge=0)
    score: float | None = None
    ingredients: list[str] | None = None
    ratings: Ratings | None = None
    tryDate: date | None = None  # noqa: N815
    categories: list[str] | None = None
    vendor_id: str | None = None

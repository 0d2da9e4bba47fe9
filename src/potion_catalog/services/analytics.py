"""Read-only aggregations over the potion catalog."""

from dataclasses import dataclass

from potion_catalog.errors import ValidationFailed
from potion_catalog.services.catalog import PotionRepository

METRIC_OPERATORS = {
    "avg": "$avg",
    "sum": "$sum",
    "count": "$sum",
}

AVERAGE_SCORE_BY_VENDOR = [
    {"$group": {"_id": "$vendor_id", "averageScore": {"$avg": "$score"}}},
]

AVERAGE_SCORE_BY_CATEGORY = [
    {"$unwind": "$categories"},
    {"$group": {"_id": "$categories", "averageScore": {"$avg": "$score"}}},
]

STRENGTH_FLAVOR_RATIO = [
    {
        "$project": {
            "name": 1,
            "strengthFlavorRatio": {
                "$cond": [
                    {"$eq": ["$ratings.flavor", 0]},
                    None,
                    {"$divide": ["$ratings.strength", "$ratings.flavor"]},
                ]
            },
        }
    },
]


@dataclass
class AnalyticsService:
    """Application service for catalog statistics."""

    repository: PotionRepository

    def distinct_categories(self) -> dict[str, object]:
        """Return every category in use and how many there are."""
        categories = self.repository.distinct("categories")
        return {"count": len(categories), "categories": categories}

    def average_score_by_vendor(self) -> list[dict[str, object]]:
        """Return the mean score per vendor."""
        return self.repository.aggregate(AVERAGE_SCORE_BY_VENDOR)

    def average_score_by_category(self) -> list[dict[str, object]]:
        """Return the mean score per category, counting each membership."""
        return self.repository.aggregate(AVERAGE_SCORE_BY_CATEGORY)

    def strength_flavor_ratio(self) -> list[dict[str, object]]:
        """Return strength / flavor per potion, null where flavor is zero."""
        return self.repository.aggregate(STRENGTH_FLAVOR_RATIO)

    def search(
        self, group_by: str | None, metric: str | None, field: str | None = None
    ) -> list[dict[str, object]]:
        """Group potions by a field and apply a metric."""
        return self.repository.aggregate(build_search_pipeline(group_by, metric, field))


def build_search_pipeline(
    group_by: str | None, metric: str | None, field: str | None
) -> list[dict[str, object]]:
    """Build the single-stage pipeline for a dynamic search.

    ``count`` ignores ``field`` and counts grouped documents. Field names
    are passed through as given, so grouping by a missing field yields one
    null-keyed group.
    """
    if metric not in METRIC_OPERATORS or not group_by:
        raise ValidationFailed("Invalid parameters")
    if metric != "count" and not field:
        raise ValidationFailed("Invalid parameters")

    group_stage: dict[str, object] = {"_id": f"${group_by}"}
    if metric == "count":
        group_stage["count"] = {"$sum": 1}
    else:
        group_stage["result"] = {METRIC_OPERATORS[metric]: f"${field}"}
    return [{"$group": group_stage}]

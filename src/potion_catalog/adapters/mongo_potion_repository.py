"""MongoDB-backed potion repository."""

from dataclasses import dataclass
from datetime import UTC, date, datetime, time

from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.collection import Collection

from potion_catalog.domain.potions import Potion
from potion_catalog.services.catalog import PotionRepository


@dataclass
class MongoPotionRepository(PotionRepository):
    """MongoDB implementation for potion persistence and aggregation."""

    collection: Collection

    def find(self, query: dict[str, object]) -> list[Potion]:
        """Return potions matching the filter."""
        return [_parse_potion(doc) for doc in self.collection.find(query)]

    def find_names(self) -> list[str]:
        """Return potion names using a name-only projection."""
        cursor = self.collection.find({}, {"name": 1})
        return [doc["name"] for doc in cursor if doc.get("name") is not None]

    def get(self, potion_id: str) -> Potion | None:
        """Return a potion by id; malformed ids resolve to nothing."""
        object_id = _object_id(potion_id)
        if object_id is None:
            return None
        doc = self.collection.find_one({"_id": object_id})
        return _parse_potion(doc) if doc else None

    def insert(self, document: dict[str, object]) -> Potion:
        """Insert a potion document and return it with its id."""
        stored = _to_bson(document)
        result = self.collection.insert_one(stored)
        return _parse_potion({**stored, "_id": result.inserted_id})

    def update(self, potion_id: str, changes: dict[str, object]) -> Potion | None:
        """Set the given fields and return the updated potion."""
        object_id = _object_id(potion_id)
        if object_id is None:
            return None
        doc = self.collection.find_one_and_update(
            {"_id": object_id},
            {"$set": _to_bson(changes)},
            return_document=ReturnDocument.AFTER,
        )
        return _parse_potion(doc) if doc else None

    def delete(self, potion_id: str) -> bool:
        """Delete a potion by id."""
        object_id = _object_id(potion_id)
        if object_id is None:
            return False
        result = self.collection.delete_one({"_id": object_id})
        return result.deleted_count > 0

    def distinct(self, field: str) -> list[object]:
        """Return distinct values of a field, flattening arrays."""
        return [_jsonable(value) for value in self.collection.distinct(field)]

    def aggregate(self, pipeline: list[dict[str, object]]) -> list[dict[str, object]]:
        """Run a pipeline and return JSON-safe documents."""
        return [_jsonable(doc) for doc in self.collection.aggregate(pipeline)]


def _object_id(raw: str) -> ObjectId | None:
    if not ObjectId.is_valid(raw):
        return None
    return ObjectId(raw)


def _to_bson(value: object) -> object:
    """Convert calendar dates to datetimes, which BSON can store."""
    if isinstance(value, dict):
        return {key: _to_bson(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_to_bson(item) for item in value]
    if isinstance(value, date) and not isinstance(value, datetime):
        return datetime.combine(value, time.min, tzinfo=UTC)
    return value


def _jsonable(value: object) -> object:
    """Make store output JSON-safe, matching the potion serialization."""
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, datetime):
        # Catalog datetimes only hold calendar dates (tryDate).
        return value.date().isoformat()
    if isinstance(value, dict):
        return {key: _jsonable(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_jsonable(item) for item in value]
    return value


def _parse_potion(doc: dict[str, object]) -> Potion:
    try_date_raw = doc.get("tryDate")
    if isinstance(try_date_raw, datetime):
        try_date = try_date_raw.date()
    elif isinstance(try_date_raw, date):
        try_date = try_date_raw
    else:
        try_date = None
    ratings = doc.get("ratings")
    return Potion(
        id=str(doc["_id"]),
        name=doc.get("name"),
        price=doc.get("price"),
        score=doc.get("score"),
        ingredients=list(doc.get("ingredients") or []),
        ratings=dict(ratings) if isinstance(ratings, dict) else None,
        try_date=try_date,
        categories=list(doc.get("categories") or []),
        vendor_id=doc.get("vendor_id"),
    )

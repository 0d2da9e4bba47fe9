"""MongoDB-backed user repository."""

from dataclasses import dataclass

from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError, WriteError

from potion_catalog.domain.users import UserRecord
from potion_catalog.errors import DuplicateKeyFailure, StoreFailure
from potion_catalog.services.auth import UserRepository


@dataclass
class MongoUserRepository(UserRepository):
    """MongoDB implementation for user credentials."""

    collection: Collection

    def ensure_indexes(self) -> None:
        """Create the unique index that enforces name uniqueness."""
        self.collection.create_index("name", unique=True)

    def get_by_name(self, name: str) -> UserRecord | None:
        """Return the user with this exact name, if present."""
        doc = self.collection.find_one({"name": name})
        if doc is None:
            return None
        return UserRecord(
            id=str(doc["_id"]), name=doc["name"], password_hash=doc["password"]
        )

    def create_user(self, name: str, password_hash: str) -> UserRecord:
        """Insert a new user document and return it."""
        try:
            result = self.collection.insert_one(
                {"name": name, "password": password_hash}
            )
        except DuplicateKeyError as exc:
            raise DuplicateKeyFailure("User name already exists") from exc
        except WriteError as exc:
            raise StoreFailure(str(exc)) from exc
        return UserRecord(
            id=str(result.inserted_id), name=name, password_hash=password_hash
        )

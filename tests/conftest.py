"""Shared test fixtures."""

from dataclasses import dataclass, field
from uuid import uuid4

import pytest

from potion_catalog.config import Settings
from potion_catalog.containers import AppContainer
from potion_catalog.domain.potions import Potion
from potion_catalog.domain.users import UserRecord
from potion_catalog.errors import DuplicateKeyFailure
from potion_catalog.services.analytics import AnalyticsService
from potion_catalog.services.auth import AuthService, UserRepository
from potion_catalog.services.catalog import CatalogService, PotionRepository
from potion_catalog.services.security import BcryptPasswordHasher, JwtTokenCodec


@dataclass
class InMemoryPotionRepository(PotionRepository):
    """In-memory potion repository for tests.

    Supports equality filters and ``$gte``/``$lte`` ranges. Aggregations
    are recorded and answered from ``aggregate_results``.
    """

    documents: dict[str, dict[str, object]] = field(default_factory=dict)
    calls: list[str] = field(default_factory=list)
    queries: list[dict[str, object]] = field(default_factory=list)
    pipelines: list[list[dict[str, object]]] = field(default_factory=list)
    aggregate_results: list[dict[str, object]] = field(default_factory=list)

    def add(self, **document: object) -> Potion:
        potion_id = uuid4().hex
        self.documents[potion_id] = dict(document)
        return _to_potion(potion_id, self.documents[potion_id])

    def find(self, query: dict[str, object]) -> list[Potion]:
        self.calls.append("find")
        self.queries.append(query)
        return [
            _to_potion(potion_id, doc)
            for potion_id, doc in self.documents.items()
            if _matches(doc, query)
        ]

    def find_names(self) -> list[str]:
        self.calls.append("find_names")
        return [doc["name"] for doc in self.documents.values() if "name" in doc]

    def get(self, potion_id: str) -> Potion | None:
        self.calls.append("get")
        doc = self.documents.get(potion_id)
        return _to_potion(potion_id, doc) if doc is not None else None

    def insert(self, document: dict[str, object]) -> Potion:
        self.calls.append("insert")
        potion_id = uuid4().hex
        self.documents[potion_id] = dict(document)
        return _to_potion(potion_id, self.documents[potion_id])

    def update(self, potion_id: str, changes: dict[str, object]) -> Potion | None:
        self.calls.append("update")
        doc = self.documents.get(potion_id)
        if doc is None:
            return None
        doc.update(changes)
        return _to_potion(potion_id, doc)

    def delete(self, potion_id: str) -> bool:
        self.calls.append("delete")
        return self.documents.pop(potion_id, None) is not None

    def distinct(self, field_name: str) -> list[object]:
        self.calls.append("distinct")
        values: list[object] = []
        for doc in self.documents.values():
            raw = doc.get(field_name)
            for value in raw if isinstance(raw, list) else [raw]:
                if value is not None and value not in values:
                    values.append(value)
        return values

    def aggregate(self, pipeline: list[dict[str, object]]) -> list[dict[str, object]]:
        self.calls.append("aggregate")
        self.pipelines.append(pipeline)
        return self.aggregate_results


def _matches(doc: dict[str, object], query: dict[str, object]) -> bool:
    for key, condition in query.items():
        value = doc.get(key)
        if isinstance(condition, dict):
            if value is None:
                return False
            if "$gte" in condition and value < condition["$gte"]:
                return False
            if "$lte" in condition and value > condition["$lte"]:
                return False
        elif value != condition:
            return False
    return True


def _to_potion(potion_id: str, doc: dict[str, object]) -> Potion:
    return Potion(
        id=potion_id,
        name=doc.get("name"),
        price=doc.get("price"),
        score=doc.get("score"),
        ingredients=list(doc.get("ingredients") or []),
        ratings=doc.get("ratings"),
        try_date=doc.get("tryDate"),
        categories=list(doc.get("categories") or []),
        vendor_id=doc.get("vendor_id"),
    )


@dataclass
class InMemoryUserRepository(UserRepository):
    """In-memory user repository enforcing unique names."""

    users: dict[str, UserRecord] = field(default_factory=dict)

    def get_by_name(self, name: str) -> UserRecord | None:
        return self.users.get(name)

    def create_user(self, name: str, password_hash: str) -> UserRecord:
        if name in self.users:
            raise DuplicateKeyFailure("duplicate key")
        user = UserRecord(id=uuid4().hex, name=name, password_hash=password_hash)
        self.users[name] = user
        return user


@pytest.fixture
def settings() -> Settings:
    return Settings(
        mongo_uri="mongodb://localhost:27017",
        jwt_secret="test-secret",
    )


@pytest.fixture
def potion_repository() -> InMemoryPotionRepository:
    return InMemoryPotionRepository()


@pytest.fixture
def user_repository() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def auth_service(
    settings: Settings, user_repository: InMemoryUserRepository
) -> AuthService:
    return AuthService(
        repository=user_repository,
        hasher=BcryptPasswordHasher(rounds=4),
        tokens=JwtTokenCodec(secret=settings.jwt_secret),
    )


@pytest.fixture
def container(
    settings: Settings,
    potion_repository: InMemoryPotionRepository,
    auth_service: AuthService,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        catalog_service=CatalogService(potion_repository),
        auth_service=auth_service,
        analytics_service=AnalyticsService(potion_repository),
        prepare_storage=lambda: None,
        close_resources=close_resources,
    )

"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from pymongo import MongoClient

from potion_catalog.adapters.mongo_potion_repository import MongoPotionRepository
from potion_catalog.adapters.mongo_user_repository import MongoUserRepository
from potion_catalog.config import Settings
from potion_catalog.services.analytics import AnalyticsService
from potion_catalog.services.auth import AuthService
from potion_catalog.services.catalog import CatalogService
from potion_catalog.services.security import BcryptPasswordHasher, JwtTokenCodec


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    catalog_service: CatalogService
    auth_service: AuthService
    analytics_service: AnalyticsService
    prepare_storage: Callable[[], None]
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    mongo_client: MongoClient = MongoClient(resolved_settings.mongo_uri, tz_aware=True)
    database = mongo_client[resolved_settings.mongo_database]
    potion_repository = MongoPotionRepository(database["potions"])
    user_repository = MongoUserRepository(database["users"])
    catalog_service = CatalogService(potion_repository)
    analytics_service = AnalyticsService(potion_repository)
    auth_service = AuthService(
        repository=user_repository,
        hasher=BcryptPasswordHasher(),
        tokens=JwtTokenCodec(secret=resolved_settings.jwt_secret),
    )

    async def close_resources() -> None:
        mongo_client.close()

    return AppContainer(
        settings=resolved_settings,
        catalog_service=catalog_service,
        auth_service=auth_service,
        analytics_service=analytics_service,
        prepare_storage=user_repository.ensure_indexes,
        close_resources=close_resources,
    )

"""Dependency container wiring for the application."""

from dataclasses import dataclass

from supabase import create_client

from food_catalog.adapters.supabase_catalog_repository import (
    SupabaseCatalogRepository,
)
from food_catalog.adapters.supabase_like_repository import SupabaseLikeRepository
from food_catalog.config import Settings
from food_catalog.services.cache import CatalogCache, CatalogRepository
from food_catalog.services.feed import FeedSelector
from food_catalog.services.foods import FoodService
from food_catalog.services.resolver import NameResolver
from food_catalog.services.stats import StatsAggregator


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    catalog_repository: CatalogRepository
    catalog_cache: CatalogCache
    name_resolver: NameResolver
    feed_selector: FeedSelector
    stats_aggregator: StatsAggregator
    food_service: FoodService

    def load_cache(self) -> None:
        """Populate the catalog cache, raising if the store stays unavailable."""
        self.catalog_cache.load(
            self.catalog_repository,
            attempts=self.settings.cache_load_attempts,
            backoff_seconds=self.settings.cache_load_backoff_seconds,
        )


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    catalog_repository = SupabaseCatalogRepository(supabase_client)
    like_repository = SupabaseLikeRepository(supabase_client)
    catalog_cache = CatalogCache()
    stats_aggregator = StatsAggregator(catalog_repository, catalog_cache)

    return AppContainer(
        settings=resolved_settings,
        catalog_repository=catalog_repository,
        catalog_cache=catalog_cache,
        name_resolver=NameResolver(
            repository=catalog_repository,
            cache=catalog_cache,
            threshold=resolved_settings.similarity_threshold,
            max_suggestions=resolved_settings.max_suggestions,
        ),
        feed_selector=FeedSelector(catalog_cache),
        stats_aggregator=stats_aggregator,
        food_service=FoodService(
            repository=catalog_repository,
            like_repository=like_repository,
            cache=catalog_cache,
            stats=stats_aggregator,
        ),
    )

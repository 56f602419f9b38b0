"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from uuid import UUID

from fastapi import BackgroundTasks, FastAPI, Query, Request, status
from fastapi.responses import JSONResponse
from fastapi.concurrency import run_in_threadpool

from food_catalog.api.admin import router as admin_router
from food_catalog.api.models import (
    CustomFoodRequest,
    LikeRequest,
    ResolveNamesRequest,
    ReviewCreatedEvent,
    ReviewEditedEvent,
    standard_food_ids,
)
from food_catalog.api.serializers import (
    serialize_custom,
    serialize_result,
    serialize_standard,
)
from food_catalog.app_logging import configure_logging
from food_catalog.containers import AppContainer
from food_catalog.domain.errors import (
    DuplicateFoodError,
    NotFoundError,
    StoreError,
    ValidationError,
)


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        await run_in_threadpool(app.state.container.load_cache)
        yield

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(admin_router)

    @app.exception_handler(NotFoundError)
    async def not_found(request: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)}
        )

    @app.exception_handler(ValidationError)
    async def invalid(request: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": str(exc)},
        )

    @app.exception_handler(DuplicateFoodError)
    async def duplicate(request: Request, exc: DuplicateFoodError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT, content={"detail": str(exc)}
        )

    @app.exception_handler(StoreError)
    async def store_failure(request: Request, exc: StoreError) -> JSONResponse:
        logger.error("Store failure on %s: %s", request.url.path, exc)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": "Catalog store unavailable"},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/foods/resolve")
    def resolve_names(
        payload: ResolveNamesRequest, request: Request
    ) -> dict[str, object]:
        """Resolve submitted names to catalog entries."""
        state_container: AppContainer = request.app.state.container
        results = state_container.name_resolver.resolve(payload.names, payload.user_id)
        return {"results": [serialize_result(result) for result in results]}

    @app.get("/foods/feed")
    def main_feed(
        request: Request,
        food_type: str = Query(alias="type"),
        speed: str = Query(),
        count: int | None = Query(default=None, ge=0),
    ) -> dict[str, object]:
        """Return a category-diversified random sample of standard foods."""
        state_container: AppContainer = request.app.state.container
        if count is None:
            count = state_container.settings.default_feed_count
        foods = state_container.feed_selector.select(food_type, speed, count)
        return {"foods": [serialize_standard(food) for food in foods]}

    @app.get("/foods/{food_id}")
    def standard_food(food_id: UUID, request: Request) -> dict[str, object]:
        """Return a standard food with its average rating."""
        state_container: AppContainer = request.app.state.container
        return serialize_standard(
            state_container.food_service.get_standard_food(food_id)
        )

    @app.post("/foods/{food_id}/like")
    def like_food(
        food_id: UUID, payload: LikeRequest, request: Request
    ) -> dict[str, bool]:
        """Like a standard food; repeating a like is a no-op."""
        state_container: AppContainer = request.app.state.container
        changed = state_container.food_service.like_food(payload.user_id, food_id)
        return {"changed": changed}

    @app.delete("/foods/{food_id}/like")
    def unlike_food(
        food_id: UUID, payload: LikeRequest, request: Request
    ) -> dict[str, bool]:
        """Remove a like; removing a missing like is a no-op."""
        state_container: AppContainer = request.app.state.container
        changed = state_container.food_service.unlike_food(payload.user_id, food_id)
        return {"changed": changed}

    @app.get("/users/{user_id}/liked-foods")
    def liked_foods(user_id: UUID, request: Request) -> dict[str, list[str]]:
        """Return the ids of standard foods a user liked."""
        state_container: AppContainer = request.app.state.container
        food_ids = state_container.food_service.liked_food_ids(user_id)
        return {"food_ids": [str(food_id) for food_id in food_ids]}

    @app.post("/custom-foods")
    def find_or_create_custom_food(
        payload: CustomFoodRequest, request: Request
    ) -> dict[str, object]:
        """Return the custom food with this name, creating it if needed."""
        state_container: AppContainer = request.app.state.container
        food = state_container.food_service.find_or_create_custom_food(
            payload.name, payload.user_id
        )
        return serialize_custom(food)

    @app.post("/reviews/created", status_code=status.HTTP_202_ACCEPTED)
    def review_created(
        event: ReviewCreatedEvent, request: Request, background_tasks: BackgroundTasks
    ) -> dict[str, str]:
        """Queue stats propagation for a new review."""
        state_container: AppContainer = request.app.state.container
        food_ids = standard_food_ids(event.foods)
        if food_ids:
            background_tasks.add_task(
                state_container.stats_aggregator.propagate_review_created,
                food_ids,
                event.rating,
            )
        return {"status": "accepted"}

    @app.post("/reviews/edited", status_code=status.HTTP_202_ACCEPTED)
    def review_edited(
        event: ReviewEditedEvent, request: Request, background_tasks: BackgroundTasks
    ) -> dict[str, str]:
        """Queue stats propagation for an edited review rating."""
        state_container: AppContainer = request.app.state.container
        food_ids = standard_food_ids(event.foods)
        if food_ids:
            background_tasks.add_task(
                state_container.stats_aggregator.propagate_review_edited,
                food_ids,
                event.old_rating,
                event.new_rating,
            )
        return {"status": "accepted"}

    return app


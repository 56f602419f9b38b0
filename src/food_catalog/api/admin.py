"""Admin API endpoints with simple token auth."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

from food_catalog.api.models import NewStandardFoodRequest
from food_catalog.api.serializers import serialize_standard
from food_catalog.domain.foods import NewStandardFood

if TYPE_CHECKING:
    from food_catalog.containers import AppContainer

router = APIRouter(prefix="/admin", tags=["admin"])


def _get_admin_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.admin_token


async def require_admin(
    x_admin_token: str | None = Header(default=None),
    admin_token: str = Depends(_get_admin_token),
) -> None:
    """Ensure requests include a valid admin token."""
    if not x_admin_token or x_admin_token != admin_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


@router.get("/health", dependencies=[Depends(require_admin)])
async def admin_health() -> dict[str, str]:
    """Admin health check endpoint."""
    return {"status": "ok"}


@router.get("/cache", dependencies=[Depends(require_admin)])
def cache_summary(request: Request) -> dict[str, int]:
    """Return how many foods the in-process cache holds."""
    container: AppContainer = request.app.state.container
    snapshot = container.catalog_cache.snapshot()
    return {"standard": len(snapshot.standard), "custom": len(snapshot.custom)}


@router.post(
    "/foods",
    dependencies=[Depends(require_admin)],
    status_code=status.HTTP_201_CREATED,
)
def create_standard_food(
    payload: NewStandardFoodRequest, request: Request
) -> dict[str, object]:
    """Create a curated standard food."""
    container: AppContainer = request.app.state.container
    food = container.food_service.create_standard_food(
        NewStandardFood(
            name=payload.name,
            image_url=payload.image_url,
            speed=payload.speed,
            type=payload.type,
            categories=tuple(payload.categories),
        )
    )
    return serialize_standard(food)

"""Pydantic models for API request payloads."""

from typing import Annotated, Literal
from uuid import UUID

from pydantic import BaseModel, Field


class ResolveNamesRequest(BaseModel):
    """Batch of free-text names submitted by a user."""

    names: list[Annotated[str, Field(min_length=1)]] = Field(min_length=1)
    user_id: UUID


class CustomFoodRequest(BaseModel):
    """Explicit custom food registration."""

    name: str = Field(min_length=1)
    user_id: UUID


class LikeRequest(BaseModel):
    """User toggling a like on a standard food."""

    user_id: UUID


class ReviewFood(BaseModel):
    """Food tagged on a review."""

    food_id: UUID
    kind: Literal["standard", "custom"]


class ReviewCreatedEvent(BaseModel):
    """A review was created."""

    foods: list[ReviewFood]
    rating: int | None = None


class ReviewEditedEvent(BaseModel):
    """A review's rating was changed."""

    foods: list[ReviewFood]
    old_rating: int | None = None
    new_rating: int | None = None


class NewStandardFoodRequest(BaseModel):
    """Admin payload for a curated food."""

    name: str = Field(min_length=1)
    image_url: str = ""
    speed: Literal["fast", "slow"]
    type: Literal["meal", "dessert"]
    categories: list[str] = Field(default_factory=list)


def standard_food_ids(foods: list[ReviewFood]) -> list[UUID]:
    """Return ids of the standard foods only; custom foods carry no stats."""
    return [food.food_id for food in foods if food.kind == "standard"]

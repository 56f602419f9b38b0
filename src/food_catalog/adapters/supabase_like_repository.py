"""Supabase repository for standard food likes."""

from dataclasses import dataclass
from uuid import UUID

from postgrest.exceptions import APIError
from supabase import Client

from food_catalog.domain.errors import StoreError
from food_catalog.services.foods import LikeRepository

LIKES_TABLE = "food_likes"
_UNIQUE_VIOLATION = "23505"


@dataclass
class SupabaseLikeRepository(LikeRepository):
    """Supabase implementation of user likes, one row per (user, food)."""

    client: Client

    def add(self, user_id: UUID, food_id: UUID) -> bool:
        """Insert a like row; an existing row means nothing changed."""
        try:
            response = (
                self.client.table(LIKES_TABLE)
                .insert({"user_id": str(user_id), "food_id": str(food_id)})
                .execute()
            )
        except APIError as exc:
            if exc.code == _UNIQUE_VIOLATION:
                return False
            raise StoreError(f"Supabase add like failed: {exc}") from exc
        return bool(response.data)

    def remove(self, user_id: UUID, food_id: UUID) -> bool:
        """Delete a like row; return whether one was deleted."""
        try:
            response = (
                self.client.table(LIKES_TABLE)
                .delete()
                .eq("user_id", str(user_id))
                .eq("food_id", str(food_id))
                .execute()
            )
        except APIError as exc:
            raise StoreError(f"Supabase remove like failed: {exc}") from exc
        return bool(response.data)

    def list_food_ids(self, user_id: UUID) -> list[UUID]:
        """Return the ids of foods a user liked."""
        try:
            response = (
                self.client.table(LIKES_TABLE)
                .select("food_id")
                .eq("user_id", str(user_id))
                .execute()
            )
        except APIError as exc:
            raise StoreError(f"Supabase list likes failed: {exc}") from exc
        return [UUID(str(row["food_id"])) for row in response.data or []]

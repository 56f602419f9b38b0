"""Response serializers for API endpoints."""

from food_catalog.domain.foods import CustomFood, FoodRef, ResolutionResult, StandardFood


def serialize_ref(ref: FoodRef | None) -> dict[str, str] | None:
    if ref is None:
        return None
    return {"id": str(ref.id), "name": ref.name, "kind": ref.kind.value}


def serialize_result(result: ResolutionResult) -> dict[str, object]:
    return {
        "status": result.status.value,
        "original_name": result.original_name,
        "match": serialize_ref(result.match),
        "suggestions": [serialize_ref(ref) for ref in result.suggestions],
        "new_entry": serialize_ref(result.new_entry),
    }


def serialize_standard(food: StandardFood) -> dict[str, object]:
    return {
        "id": str(food.id),
        "name": food.name,
        "image_url": food.image_url,
        "speed": food.speed,
        "type": food.type,
        "categories": list(food.categories),
        "like_count": food.like_count,
        "review_count": food.review_count,
        "average_rating": food.average_rating,
    }


def serialize_custom(food: CustomFood) -> dict[str, object]:
    return {
        "id": str(food.id),
        "name": food.name,
        "using_user_ids": [str(user_id) for user_id in food.using_user_ids],
        "created_at": food.created_at.isoformat(),
    }

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from ayurdiet.api.deps import get_current_user, require_permission
from ayurdiet.models.food import Dosha, FoodCategory, FoodItemIn, FoodItemUpdate
from ayurdiet.services import food_service

router = APIRouter(prefix="/foods", tags=["foods"])


@router.get("/")
def list_foods(
    category: Optional[FoodCategory] = None,
    dosha: Optional[Dosha] = None,
    q: Optional[str] = None,
    user=Depends(get_current_user),
):
    """One filter at a time: name prefix, then category, then dosha."""
    if q:
        items = food_service.search_by_name(q)
    elif category:
        items = food_service.get_by_category(category)
    elif dosha:
        items = food_service.get_by_dosha_suitability(dosha)
    else:
        items = food_service.list_foods()
    return {"items": items}


@router.get("/{food_id}")
def get_food(food_id: str, user=Depends(get_current_user)):
    food = food_service.get_food(food_id)
    if food is None:
        raise HTTPException(status_code=404, detail="Food item not found")
    return food


@router.get("/{food_id}/alternatives")
def food_alternatives(food_id: str, user=Depends(get_current_user)):
    if food_service.get_food(food_id) is None:
        raise HTTPException(status_code=404, detail="Food item not found")
    return {"items": food_service.get_alternatives(food_id)}


@router.post("/", status_code=201)
def create_food(data: FoodItemIn, user=Depends(require_permission("canEditDietPlans"))):
    return food_service.create_food(data.model_dump(exclude_none=True))


@router.put("/{food_id}")
def update_food(food_id: str, data: FoodItemUpdate, user=Depends(require_permission("canEditDietPlans"))):
    updates = data.model_dump(exclude_unset=True)
    if not updates:
        raise HTTPException(status_code=400, detail="No fields to update")
    return food_service.update_food(food_id, updates)


@router.delete("/{food_id}")
def delete_food(food_id: str, user=Depends(require_permission("canEditDietPlans"))):
    if food_service.get_food(food_id) is None:
        raise HTTPException(status_code=404, detail="Food item not found")
    food_service.delete_food(food_id)
    return {"message": "Food item deleted"}

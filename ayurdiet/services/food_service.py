"""Ayurvedic food database (``foodDatabase``). Listings are sorted by name."""
from typing import Any, Dict, List, Optional

from ayurdiet.services import firestore_store as store

COLLECTION = "foodDatabase"
BY_NAME = ("name", store.ASCENDING)

# Private-use sentinel above any real character; name in [abc, abc+PREFIX_END] is a prefix match
PREFIX_END = "\uf8ff"


def list_foods() -> List[Dict[str, Any]]:
    return store.get_all(COLLECTION, order_by=BY_NAME)


def get_food(food_id: str) -> Optional[Dict[str, Any]]:
    return store.get_by_id(COLLECTION, food_id)


def get_by_category(category: str) -> List[Dict[str, Any]]:
    return store.get_all(COLLECTION, [("category", "==", category)], order_by=BY_NAME)


def search_by_name(term: str) -> List[Dict[str, Any]]:
    return store.get_all(
        COLLECTION,
        [("name", ">=", term), ("name", "<=", term + PREFIX_END)],
        order_by=BY_NAME,
    )


def get_by_dosha_suitability(dosha: str) -> List[Dict[str, Any]]:
    return store.get_all(COLLECTION, [(f"doshaSuitability.{dosha}", "==", True)], order_by=BY_NAME)


def get_alternatives(food_id: str) -> List[Dict[str, Any]]:
    """Resolve ``commonAlternatives`` ids, dropping ones that no longer exist."""
    food = store.get_by_id(COLLECTION, food_id)
    if not food or not food.get("commonAlternatives"):
        return []
    alternatives = [store.get_by_id(COLLECTION, alt_id) for alt_id in food["commonAlternatives"]]
    return [alt for alt in alternatives if alt is not None]


def create_food(data: Dict[str, Any]) -> Dict[str, Any]:
    return store.create(COLLECTION, data)


def update_food(food_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
    return store.update(COLLECTION, food_id, data)


def delete_food(food_id: str) -> None:
    store.delete(COLLECTION, food_id)

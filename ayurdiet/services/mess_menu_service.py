"""Hospital mess menus (``messMenus`` collection).

Each hospital keeps a history of menus; ``set_active_menu`` makes one menu
the only active one for its hospital. ``version`` is bumped by hand on every
update and ``nutritionalSummary`` is recomputed whenever meals change.
"""
from datetime import date
from typing import Any, Dict, List, Optional

from ayurdiet.services import firestore_store as store
from ayurdiet.services.logger import get_logger
from ayurdiet.services.time_utils import day_range, utcnow

logger = get_logger(__name__)

COLLECTION = "messMenus"
NEWEST_FIRST = ("date", store.DESCENDING)
MEAL_SLOTS = ("breakfast", "lunch", "dinner", "snacks")


def nutritional_summary(meals: Optional[Dict[str, Any]]) -> Dict[str, float]:
    """Sum calories / protein / carbs / fat over every available item."""
    totals = {"totalCalories": 0.0, "totalProtein": 0.0, "totalCarbs": 0.0, "totalFat": 0.0}
    for slot in MEAL_SLOTS:
        for item in (meals or {}).get(slot) or []:
            if item.get("isAvailable") is False:
                continue
            nutrition = item.get("nutritionalData") or {}
            totals["totalCalories"] += nutrition.get("calories") or 0
            totals["totalProtein"] += nutrition.get("protein") or 0
            totals["totalCarbs"] += nutrition.get("carbohydrates") or 0
            totals["totalFat"] += nutrition.get("fat") or 0
    return {k: round(v, 2) for k, v in totals.items()}


def list_menus() -> List[Dict[str, Any]]:
    return store.get_all(COLLECTION, order_by=NEWEST_FIRST)


def get_menu(menu_id: str) -> Optional[Dict[str, Any]]:
    return store.get_by_id(COLLECTION, menu_id)


def get_by_hospital(hospital_id: str) -> List[Dict[str, Any]]:
    return store.get_all(COLLECTION, [("hospitalId", "==", hospital_id)], order_by=NEWEST_FIRST)


def get_today_menus(hospital_id: str, day: Optional[date] = None) -> List[Dict[str, Any]]:
    start, end = day_range(day)
    return store.get_all(
        COLLECTION,
        [
            ("hospitalId", "==", hospital_id),
            ("isActive", "==", True),
            ("date", ">=", start),
            ("date", "<", end),
        ],
    )


def create_menu(data: Dict[str, Any], created_by: Optional[str] = None) -> Dict[str, Any]:
    payload = {
        **data,
        "date": data.get("date") or utcnow(),
        "isActive": data.get("isActive", True),
        "version": 1,
        "nutritionalSummary": nutritional_summary(data.get("meals")),
    }
    if created_by:
        payload["createdBy"] = created_by
    return store.create(COLLECTION, payload)


def update_menu(menu_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
    current = store.get_by_id(COLLECTION, menu_id)
    if current is None:
        raise store.DocumentNotFound(COLLECTION, menu_id)

    payload = {**data, "version": (current.get("version") or 1) + 1}
    if "meals" in data:
        payload["nutritionalSummary"] = nutritional_summary(data["meals"])
    return store.update(COLLECTION, menu_id, payload)


def set_active_menu(hospital_id: str, menu_id: str) -> None:
    active = store.get_all(COLLECTION, [("hospitalId", "==", hospital_id), ("isActive", "==", True)])
    for menu in active:
        if menu["id"] != menu_id:
            store.update(COLLECTION, menu["id"], {"isActive": False})
    store.update(COLLECTION, menu_id, {"isActive": True})
    logger.info("Menu %s is now active for hospital %s (%d deactivated)",
                menu_id, hospital_id, len([m for m in active if m["id"] != menu_id]))


def delete_menu(menu_id: str) -> None:
    store.delete(COLLECTION, menu_id)

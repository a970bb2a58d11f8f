"""Diet plans (``dietPlans`` collection).

A patient may hold several active plans at once; activating one does not
deactivate the others.
"""
from typing import Any, Dict, List, Optional

from ayurdiet.services import firestore_store as store
from ayurdiet.services import notification_service
from ayurdiet.services.logger import get_logger

logger = get_logger(__name__)

COLLECTION = "dietPlans"
NEWEST_FIRST = ("createdAt", store.DESCENDING)


def list_plans() -> List[Dict[str, Any]]:
    return store.get_all(COLLECTION, order_by=NEWEST_FIRST)


def get_plan(plan_id: str) -> Optional[Dict[str, Any]]:
    return store.get_by_id(COLLECTION, plan_id)


def get_by_patient(patient_id: str) -> List[Dict[str, Any]]:
    return store.get_all(COLLECTION, [("patientId", "==", patient_id)], order_by=NEWEST_FIRST)


def get_active_for_patient(patient_id: str) -> List[Dict[str, Any]]:
    return store.get_all(
        COLLECTION,
        [("patientId", "==", patient_id), ("isActive", "==", True)],
        order_by=NEWEST_FIRST,
    )


def get_by_dietitian(dietitian_id: str) -> List[Dict[str, Any]]:
    return store.get_all(COLLECTION, [("dietitianId", "==", dietitian_id)], order_by=NEWEST_FIRST)


def _notify(kind: str, plan: Dict[str, Any], dietitian_name: Optional[str]):
    """Tell the patient about a delivered/activated plan; never fails the caller."""
    patient_id = plan.get("patientId")
    if not patient_id:
        return
    try:
        if kind == "delivery":
            notification_service.create_diet_plan_delivery(
                patient_id, plan["id"], plan.get("title", ""), dietitian_name
            )
        else:
            notification_service.create_diet_plan_activation(
                patient_id, plan["id"], plan.get("title", ""), dietitian_name
            )
    except Exception as exc:
        logger.warning("Failed to send diet plan %s notification for %s: %s", kind, plan["id"], exc)


def create_plan(data: Dict[str, Any], dietitian_name: Optional[str] = None) -> Dict[str, Any]:
    payload = {**data, "isActive": data.get("isActive", True)}
    created = store.create(COLLECTION, payload)
    _notify("delivery", created, dietitian_name)
    return created


def update_plan(plan_id: str, data: Dict[str, Any], dietitian_name: Optional[str] = None) -> Dict[str, Any]:
    current = store.get_by_id(COLLECTION, plan_id)
    if current is None:
        raise store.DocumentNotFound(COLLECTION, plan_id)

    updated = store.update(COLLECTION, plan_id, data)

    if data.get("isActive") is True and not current.get("isActive"):
        _notify("activation", {**current, **updated}, dietitian_name)
    return {**current, **updated}


def activate_plan(plan_id: str, dietitian_name: Optional[str] = None) -> Dict[str, Any]:
    return update_plan(plan_id, {"isActive": True}, dietitian_name)


def deactivate_plan(plan_id: str) -> Dict[str, Any]:
    return update_plan(plan_id, {"isActive": False})


def duplicate_plan(plan_id: str, patient_id: Optional[str] = None, dietitian_id: Optional[str] = None) -> Dict[str, Any]:
    """Copy a plan (optionally onto another patient) as a new inactive draft."""
    source = store.get_by_id(COLLECTION, plan_id)
    if source is None:
        raise store.DocumentNotFound(COLLECTION, plan_id)

    copy = {k: v for k, v in source.items() if k not in ("id", "createdAt", "updatedAt")}
    copy["title"] = f"{source.get('title', 'Diet plan')} (copy)"
    copy["isActive"] = False
    copy["duplicatedFrom"] = plan_id
    if patient_id:
        copy["patientId"] = patient_id
    if dietitian_id:
        copy["dietitianId"] = dietitian_id
    return store.create(COLLECTION, copy)


def delete_plan(plan_id: str) -> None:
    store.delete(COLLECTION, plan_id)

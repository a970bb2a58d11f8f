from typing import Any, Dict, List, Optional

from ayurdiet.services import firestore_store as store
from ayurdiet.services.time_utils import utcnow

COLLECTION = "vitals"
NEWEST_FIRST = ("date", store.DESCENDING)


def compute_bmi(weight: Optional[float], height_cm: Optional[float]) -> Optional[float]:
    """BMI from kg / cm, rounded to 2 places. None when either is missing."""
    if not weight or not height_cm:
        return None
    meters = height_cm / 100
    return round(weight / (meters * meters), 2)


def get_by_patient(patient_id: str) -> List[Dict[str, Any]]:
    return store.get_all(COLLECTION, [("patientId", "==", patient_id)], order_by=NEWEST_FIRST)


def get_latest(patient_id: str) -> Optional[Dict[str, Any]]:
    items = store.get_all(COLLECTION, [("patientId", "==", patient_id)], order_by=NEWEST_FIRST, limit=1)
    return items[0] if items else None


def get_vitals(vitals_id: str) -> Optional[Dict[str, Any]]:
    return store.get_by_id(COLLECTION, vitals_id)


def create_vitals(data: Dict[str, Any]) -> Dict[str, Any]:
    payload = {**data, "date": data.get("date") or utcnow()}
    if payload.get("bmi") is None:
        payload["bmi"] = compute_bmi(payload.get("weight"), payload.get("height"))
    return store.create(COLLECTION, payload)


def update_vitals(vitals_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
    payload = dict(data)
    # Recompute when a body measurement changes and no explicit bmi was sent
    if ("weight" in payload or "height" in payload) and payload.get("bmi") is None:
        current = store.get_by_id(COLLECTION, vitals_id)
        if current is None:
            raise store.DocumentNotFound(COLLECTION, vitals_id)
        merged = {**current, **payload}
        payload["bmi"] = compute_bmi(merged.get("weight"), merged.get("height"))
    return store.update(COLLECTION, vitals_id, payload)


def delete_vitals(vitals_id: str) -> None:
    store.delete(COLLECTION, vitals_id)

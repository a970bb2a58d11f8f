"""
Meal adherence log (``mealTracking``).

Staff mark a scheduled meal as given, then the patient (or family) reports
how much was eaten. Status is written as asked: a record can be marked
eaten without ever being given. Such out-of-order writes are logged.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from ayurdiet.services import firestore_store as store
from ayurdiet.services.logger import get_logger
from ayurdiet.services.time_utils import day_range, utcnow

logger = get_logger(__name__)

COLLECTION = "mealTracking"
NEWEST_FIRST = ("scheduledDate", store.DESCENDING)

# status -> statuses it is normally reached from
EXPECTED_PREVIOUS = {
    "given": {"scheduled"},
    "eaten": {"given"},
    "skipped": {"given"},
}


def _warn_if_out_of_order(record_id: str, new_status: str):
    current = store.get_by_id(COLLECTION, record_id)
    if current is None:
        raise store.DocumentNotFound(COLLECTION, record_id)
    previous = current.get("status", "scheduled")
    if previous not in EXPECTED_PREVIOUS.get(new_status, {previous}):
        logger.warning(
            "Meal tracking %s moved %s -> %s out of order", record_id, previous, new_status
        )


def get_by_patient(patient_id: str) -> List[Dict[str, Any]]:
    return store.get_all(COLLECTION, [("patientId", "==", patient_id)], order_by=NEWEST_FIRST)


def get_by_diet_plan(diet_plan_id: str) -> List[Dict[str, Any]]:
    return store.get_all(COLLECTION, [("dietPlanId", "==", diet_plan_id)], order_by=NEWEST_FIRST)


def get_by_date_range(patient_id: str, start: datetime, end: datetime) -> List[Dict[str, Any]]:
    """Records scheduled within [start, end], both ends inclusive."""
    return store.get_all(
        COLLECTION,
        [
            ("patientId", "==", patient_id),
            ("scheduledDate", ">=", start),
            ("scheduledDate", "<=", end),
        ],
        order_by=NEWEST_FIRST,
    )


def get_today(patient_id: str) -> List[Dict[str, Any]]:
    start, end = day_range()
    return store.get_all(
        COLLECTION,
        [
            ("patientId", "==", patient_id),
            ("scheduledDate", ">=", start),
            ("scheduledDate", "<", end),
        ],
    )


def get_record(record_id: str) -> Optional[Dict[str, Any]]:
    return store.get_by_id(COLLECTION, record_id)


def create_record(data: Dict[str, Any]) -> Dict[str, Any]:
    return store.create(COLLECTION, {**data, "status": data.get("status") or "scheduled"})


def update_record(record_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
    return store.update(COLLECTION, record_id, data)


def mark_as_given(record_id: str, given_by: str, notes: Optional[str] = None) -> Dict[str, Any]:
    _warn_if_out_of_order(record_id, "given")
    payload = {"givenBy": given_by, "givenAt": utcnow(), "status": "given"}
    if notes:
        payload["notes"] = notes
    return store.update(COLLECTION, record_id, payload)


def mark_as_eaten(
    record_id: str,
    eaten_by: str,
    quantity: Optional[str] = None,
    notes: Optional[str] = None,
) -> Dict[str, Any]:
    status = "skipped" if quantity == "none" else "eaten"
    _warn_if_out_of_order(record_id, status)
    payload = {
        "eatenBy": eaten_by,
        "eatenAt": utcnow(),
        "quantity": quantity,
        "status": status,
    }
    if notes:
        payload["notes"] = notes
    return store.update(COLLECTION, record_id, payload)


def delete_record(record_id: str) -> None:
    store.delete(COLLECTION, record_id)


def daily_adherence_stats(patients: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Today's served vs skipped meals across ``patients``."""
    start, end = day_range()
    total = eaten = 0
    for patient in patients:
        try:
            tracking = get_by_date_range(patient["id"], start, end)
        except store.StoreError as exc:
            logger.warning("Skipping meal stats for patient %s: %s", patient.get("id"), exc)
            continue
        total += len(tracking)
        eaten += len([t for t in tracking if t.get("status") == "eaten"])

    return {
        "totalPatients": len(patients),
        "adherenceRate": round(eaten / total * 100) if total else 0,
        "mealsServed": eaten,
        "mealsSkipped": total - eaten,
    }

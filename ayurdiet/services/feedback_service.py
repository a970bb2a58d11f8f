from datetime import datetime
from typing import Any, Dict, List, Optional

from ayurdiet.services import firestore_store as store
from ayurdiet.services.time_utils import day_range, utcnow

COLLECTION = "patientFeedback"
NEWEST_FIRST = ("date", store.DESCENDING)


def get_by_patient(patient_id: str) -> List[Dict[str, Any]]:
    return store.get_all(COLLECTION, [("patientId", "==", patient_id)], order_by=NEWEST_FIRST)


def get_by_diet_plan(diet_plan_id: str) -> List[Dict[str, Any]]:
    return store.get_all(COLLECTION, [("dietPlanId", "==", diet_plan_id)], order_by=NEWEST_FIRST)


def get_by_date_range(patient_id: str, start: datetime, end: datetime) -> List[Dict[str, Any]]:
    return store.get_all(
        COLLECTION,
        [("patientId", "==", patient_id), ("date", ">=", start), ("date", "<=", end)],
        order_by=NEWEST_FIRST,
    )


def get_today(patient_id: str) -> List[Dict[str, Any]]:
    start, end = day_range()
    return store.get_all(
        COLLECTION,
        [("patientId", "==", patient_id), ("date", ">=", start), ("date", "<", end)],
    )


def get_feedback(feedback_id: str) -> Optional[Dict[str, Any]]:
    return store.get_by_id(COLLECTION, feedback_id)


def create_feedback(data: Dict[str, Any]) -> Dict[str, Any]:
    return store.create(COLLECTION, {**data, "date": data.get("date") or utcnow()})


def update_feedback(feedback_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
    return store.update(COLLECTION, feedback_id, data)


def delete_feedback(feedback_id: str) -> None:
    store.delete(COLLECTION, feedback_id)


def adherence_summary(feedback: List[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Roll a patient's feedback entries up into dashboard numbers.

    A day counts as adherent when breakfast, lunch and dinner were all
    followed (snacks are ignored). Rates are whole percentages, averages
    keep one decimal.
    """
    total = len(feedback)
    if not total:
        return {
            "totalFeedback": 0,
            "adherenceRate": 0,
            "avgEnergyLevel": 0,
            "avgSleepQuality": 0,
            "avgWaterIntake": 0,
        }

    adherent = 0
    for entry in feedback:
        meals = entry.get("mealAdherence") or {}
        if meals.get("breakfast") and meals.get("lunch") and meals.get("dinner"):
            adherent += 1

    def _avg(field):
        return round(sum(e.get(field) or 0 for e in feedback) / total, 1)

    return {
        "totalFeedback": total,
        "adherenceRate": round(adherent / total * 100),
        "avgEnergyLevel": _avg("energyLevel"),
        "avgSleepQuality": _avg("sleepQuality"),
        "avgWaterIntake": _avg("waterIntake"),
    }

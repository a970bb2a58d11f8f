from typing import Any, Dict, List, Optional

from ayurdiet.services import firestore_store as store

COLLECTION = "consultations"
NEWEST_FIRST = ("date", store.DESCENDING)


def list_consultations() -> List[Dict[str, Any]]:
    return store.get_all(COLLECTION, order_by=NEWEST_FIRST)


def get_consultation(consultation_id: str) -> Optional[Dict[str, Any]]:
    return store.get_by_id(COLLECTION, consultation_id)


def get_by_patient(patient_id: str) -> List[Dict[str, Any]]:
    return store.get_all(COLLECTION, [("patientId", "==", patient_id)], order_by=NEWEST_FIRST)


def get_by_dietitian(dietitian_id: str) -> List[Dict[str, Any]]:
    return store.get_all(COLLECTION, [("dietitianId", "==", dietitian_id)], order_by=NEWEST_FIRST)


def create_consultation(data: Dict[str, Any]) -> Dict[str, Any]:
    return store.create(COLLECTION, {**data, "status": data.get("status") or "scheduled"})


def update_consultation(consultation_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
    return store.update(COLLECTION, consultation_id, data)


def delete_consultation(consultation_id: str) -> None:
    store.delete(COLLECTION, consultation_id)

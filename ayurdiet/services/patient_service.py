"""Business logic / service layer for patient operations.

Patients are plain documents in ``patients``. Diet plans, vitals, feedback
and meal logs point at them by ``patientId`` with no referential integrity,
so deleting a patient leaves those records in place.
"""
import time
from typing import Any, Dict, List, Optional

from ayurdiet.services import firestore_store as store
from ayurdiet.services.logger import get_logger
from ayurdiet.services.time_utils import utcnow

logger = get_logger(__name__)

COLLECTION = "patients"


def generate_patient_code() -> str:
    # PAT + last 6 digits of the epoch millis
    return f"PAT{str(int(time.time() * 1000))[-6:]}"


def list_patients() -> List[Dict[str, Any]]:
    return store.get_all(COLLECTION)


def get_patient(patient_id: str) -> Optional[Dict[str, Any]]:
    return store.get_by_id(COLLECTION, patient_id)


def get_by_dietitian(dietitian_id: str) -> List[Dict[str, Any]]:
    return store.get_all(COLLECTION, [("dietitianId", "==", dietitian_id)])


def get_by_hospital(hospital_id: str) -> List[Dict[str, Any]]:
    return store.get_all(COLLECTION, [("hospitalId", "==", hospital_id)])


def create_patient(data: Dict[str, Any]) -> Dict[str, Any]:
    now = utcnow()
    payload = {
        **data,
        "code": data.get("code") or generate_patient_code(),
        "registrationDate": data.get("registrationDate") or now,
        "lastUpdated": now,
    }
    created = store.create(COLLECTION, payload)
    logger.info("Created patient %s (%s)", created["id"], created["code"])
    return created


def update_patient(patient_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
    return store.update(COLLECTION, patient_id, {**data, "lastUpdated": utcnow()})


def delete_patient(patient_id: str) -> None:
    store.delete(COLLECTION, patient_id)

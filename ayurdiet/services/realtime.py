"""
Named real-time subscriptions.

Each function attaches a Firestore snapshot listener and returns the
``unsubscribe()`` callable. Callbacks run on the Firestore watch thread
and receive the full current result on every change.
"""
from typing import Any, Callable, Dict, List, Optional

from ayurdiet.services import firestore_store as store

Callback = Callable[[List[Dict[str, Any]]], None]
DocCallback = Callable[[Optional[Dict[str, Any]]], None]
ErrorCallback = Optional[Callable[[Exception], None]]
Unsubscribe = Callable[[], None]


def patients(callback: Callback, dietitian_id: Optional[str] = None, on_error: ErrorCallback = None) -> Unsubscribe:
    filters = [("dietitianId", "==", dietitian_id)] if dietitian_id else []
    return store.subscribe_to_collection("patients", callback, filters, on_error=on_error)


def patient(patient_id: str, callback: DocCallback, on_error: ErrorCallback = None) -> Unsubscribe:
    return store.subscribe_to_document("patients", patient_id, callback, on_error=on_error)


def vitals(patient_id: str, callback: Callback, on_error: ErrorCallback = None) -> Unsubscribe:
    return store.subscribe_to_collection(
        "vitals", callback, [("patientId", "==", patient_id)],
        order_by=("date", store.DESCENDING), on_error=on_error,
    )


def diet_plans(patient_id: str, callback: Callback, on_error: ErrorCallback = None) -> Unsubscribe:
    return store.subscribe_to_collection(
        "dietPlans", callback, [("patientId", "==", patient_id)],
        order_by=("createdAt", store.DESCENDING), on_error=on_error,
    )


def consultations(patient_id: str, callback: Callback, on_error: ErrorCallback = None) -> Unsubscribe:
    return store.subscribe_to_collection(
        "consultations", callback, [("patientId", "==", patient_id)],
        order_by=("date", store.DESCENDING), on_error=on_error,
    )


def mess_menus(hospital_id: str, callback: Callback, on_error: ErrorCallback = None) -> Unsubscribe:
    return store.subscribe_to_collection(
        "messMenus", callback, [("hospitalId", "==", hospital_id)],
        order_by=("date", store.DESCENDING), on_error=on_error,
    )


def meal_tracking(patient_id: str, callback: Callback, on_error: ErrorCallback = None) -> Unsubscribe:
    return store.subscribe_to_collection(
        "mealTracking", callback, [("patientId", "==", patient_id)],
        order_by=("scheduledDate", store.DESCENDING), on_error=on_error,
    )


def patient_feedback(patient_id: str, callback: Callback, on_error: ErrorCallback = None) -> Unsubscribe:
    return store.subscribe_to_collection(
        "patientFeedback", callback, [("patientId", "==", patient_id)],
        order_by=("date", store.DESCENDING), on_error=on_error,
    )


def notifications(user_id: str, callback: Callback, on_error: ErrorCallback = None) -> Unsubscribe:
    return store.subscribe_to_collection(
        "notifications", callback, [("userId", "==", user_id)],
        order_by=("createdAt", store.DESCENDING), on_error=on_error,
    )
